"""Main entry point for the funding report."""

import argparse
import asyncio
import json
import sys

import structlog

from funding_report.config import Settings, load_settings
from funding_report.monitoring.logger import setup_logging
from funding_report.reporting.service import FundingReportService

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Funding cycle and equity report across exchanges"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the report over HTTP instead of printing it once",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="",
        help="Path to a YAML config file overriding environment settings",
    )
    return parser


async def run_once(settings: Settings) -> dict:
    """Compute one report and return its payload."""
    report = await FundingReportService(settings).run()
    return report.to_payload()


def serve(settings: Settings) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from funding_report.api import app as api_module

    api_module.set_service_factory(lambda: FundingReportService(settings))
    logger.info("api_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        api_module.app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="warning",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(config_file=args.config) if args.config else load_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)

    if args.serve:
        serve(settings)
        return 0

    try:
        payload = asyncio.run(run_once(settings))
    except Exception as e:
        logger.error("funding_report_failed", error=str(e))
        print(json.dumps({"error": str(e)}))
        return 1
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nShutdown requested. Exiting.")
        sys.exit(0)
