"""Bybit USDT perpetual adapter using ccxt."""

from typing import Any

import ccxt.async_support as ccxt

from funding_report.config import ExchangeCredentials
from funding_report.exchanges.base import PageCursor
from funding_report.exchanges.ccxt_base import CcxtFundingAdapter
from funding_report.exchanges.factory import register_adapter
from funding_report.models import AmountSource, ExchangeId, PaginationStyle

SEVEN_DAYS_MS = 7 * 24 * 60 * 60 * 1000


class BybitAdapter(CcxtFundingAdapter):
    """Bybit unified-account swaps.

    Funding settlements come from the execution list, which rejects
    ``[startTime, endTime]`` spans wider than seven days and answers with the
    newest executions first. The page size is sent as ``limit`` explicitly;
    otherwise the endpoint falls back to its own smaller default. The fee is
    read from ``info.execFee`` when present; a fee paid by the holder is
    positive.
    """

    exchange_id = ExchangeId.BYBIT
    pagination = PaginationStyle.TIME
    page_size = 100
    max_span_ms = SEVEN_DAYS_MS
    newest_first = True

    def _create_client(self, credentials: ExchangeCredentials) -> Any:
        return ccxt.bybit(
            {
                "apiKey": credentials.api_key,
                "secret": credentials.secret_key,
                "enableRateLimit": True,
                "options": {"defaultType": "swap"},
            }
        )

    def _history_request(self, cursor: PageCursor) -> tuple[int | None, dict]:
        params: dict = {"limit": cursor.limit}
        if cursor.until is not None:
            params["until"] = cursor.until
        return cursor.since, params

    def _raw_amount(self, row: dict) -> tuple[Any, AmountSource]:
        exec_fee = (row.get("info") or {}).get("execFee")
        if exec_fee not in (None, ""):
            return exec_fee, AmountSource.EXEC_FEE
        return row.get("amount"), AmountSource.AMOUNT


register_adapter("bybit", BybitAdapter)
