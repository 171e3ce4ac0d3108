"""Position valuation and equity aggregation."""

from funding_report.accounting.equity import aggregate, collect_equity, total_equity
from funding_report.accounting.valuation import resolve_side, valuate, valuate_with_ticker

__all__ = [
    "aggregate",
    "collect_equity",
    "resolve_side",
    "total_equity",
    "valuate",
    "valuate_with_ticker",
]
