"""Exchange adapters package."""

from funding_report.exchanges.base import FundingExchangeAdapter, PageCursor
from funding_report.exchanges.factory import ExchangeFactory, register_adapter
from funding_report.exchanges.pacing import RequestPacer

__all__ = [
    "ExchangeFactory",
    "FundingExchangeAdapter",
    "PageCursor",
    "RequestPacer",
    "register_adapter",
]
