"""Phemex USDT perpetual adapter using ccxt."""

from typing import Any

import ccxt.async_support as ccxt

from funding_report.config import ExchangeCredentials
from funding_report.exchanges.base import PageCursor
from funding_report.exchanges.ccxt_base import CcxtFundingAdapter
from funding_report.exchanges.factory import register_adapter
from funding_report.models import ExchangeId, PaginationStyle


class PhemexAdapter(CcxtFundingAdapter):
    """Phemex USDT-settled swaps.

    Funding history is offset-paged in pages of 200 and the endpoint only
    serves the first 1000 rows. Fees paid by the holder are positive.
    Positions must be requested with an explicit symbol list.
    """

    exchange_id = ExchangeId.PHEMEX
    pagination = PaginationStyle.OFFSET
    page_size = 200
    offset_ceiling = 1000

    def _create_client(self, credentials: ExchangeCredentials) -> Any:
        return ccxt.phemex(
            {
                "apiKey": credentials.api_key,
                "secret": credentials.secret_key,
                "enableRateLimit": True,
                "options": {"defaultType": "swap"},
            }
        )

    def _history_request(self, cursor: PageCursor) -> tuple[int | None, dict]:
        return None, {"limit": cursor.limit, "offset": cursor.offset}

    def _position_symbols(self) -> list[str] | None:
        return self._usdt_swap_symbols()


register_adapter("phemex", PhemexAdapter)
