"""MEXC USDT perpetual adapter using ccxt."""

from typing import Any

import ccxt.async_support as ccxt

from funding_report.config import ExchangeCredentials
from funding_report.exchanges.base import PageCursor
from funding_report.exchanges.ccxt_base import CcxtFundingAdapter
from funding_report.exchanges.factory import register_adapter
from funding_report.models import ExchangeId, PaginationStyle


class MexcAdapter(CcxtFundingAdapter):
    """MEXC contract swaps, funding history paged by page number."""

    exchange_id = ExchangeId.MEXC
    pagination = PaginationStyle.PAGE
    page_size = 100

    def _create_client(self, credentials: ExchangeCredentials) -> Any:
        return ccxt.mexc(
            {
                "apiKey": credentials.api_key,
                "secret": credentials.secret_key,
                "enableRateLimit": True,
                "options": {"defaultType": "swap"},
            }
        )

    def _history_request(self, cursor: PageCursor) -> tuple[int | None, dict]:
        return None, {"page_num": cursor.page, "page_size": cursor.limit}

    def _position_symbols(self) -> list[str] | None:
        return self._usdt_swap_symbols()


register_adapter("mexc", MexcAdapter)
