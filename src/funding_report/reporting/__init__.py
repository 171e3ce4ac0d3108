"""Report assembly and orchestration."""

from funding_report.reporting.builder import ReportBuilder, clean_symbol, normalized_funding
from funding_report.reporting.service import FundingReportService

__all__ = [
    "FundingReportService",
    "ReportBuilder",
    "clean_symbol",
    "normalized_funding",
]
