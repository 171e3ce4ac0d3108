"""Monitoring package."""

from funding_report.monitoring.logger import setup_logging

__all__ = ["setup_logging"]
