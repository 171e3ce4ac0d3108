"""FastAPI endpoint serving the funding report."""

from datetime import datetime, timezone

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from funding_report.reporting.service import FundingReportService

logger = structlog.get_logger()

app = FastAPI(title="Funding Report")

# Builds a fresh service per request; replaced in tests via
# set_service_factory()
_service_factory = FundingReportService


def set_service_factory(factory) -> None:
    """Set the callable that builds a FundingReportService per request."""
    global _service_factory
    _service_factory = factory


def get_service_factory():
    return _service_factory


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/funding")
async def get_funding_report():
    """Compute the report from scratch; no state survives between calls."""
    try:
        report = await _service_factory().run()
    except Exception as e:
        logger.error("funding_api_error", error=str(e))
        return JSONResponse(status_code=500, content={"error": str(e)})
    return report.to_payload()
