"""Binance USDM futures adapter using ccxt."""

from typing import Any

import ccxt.async_support as ccxt

from funding_report.config import ExchangeCredentials
from funding_report.exchanges.base import PageCursor
from funding_report.exchanges.ccxt_base import CcxtFundingAdapter
from funding_report.exchanges.factory import register_adapter
from funding_report.models import ExchangeId, PaginationStyle


class BinanceAdapter(CcxtFundingAdapter):
    """Binance USDM perpetual futures.

    Funding comes from the income endpoint filtered to FUNDING_FEE, paged by
    a moving ``startTime`` against a fixed ``endTime``. Amounts are already
    signed as the holder sees them. ``positionAmt`` is signed (negative for
    shorts in one-way mode) and backs up a missing ``side``.
    """

    exchange_id = ExchangeId.BINANCE
    pagination = PaginationStyle.TIME
    page_size = 1000
    raw_amount_field = "positionAmt"

    def _create_client(self, credentials: ExchangeCredentials) -> Any:
        return ccxt.binance(
            {
                "apiKey": credentials.api_key,
                "secret": credentials.secret_key,
                "enableRateLimit": True,
                "options": {"defaultType": "future"},
            }
        )

    def _history_request(self, cursor: PageCursor) -> tuple[int | None, dict]:
        params: dict = {"incomeType": "FUNDING_FEE"}
        if cursor.since is not None:
            params["startTime"] = cursor.since
        if cursor.until is not None:
            params["endTime"] = cursor.until
        return cursor.since, params


register_adapter("binance", BinanceAdapter)
