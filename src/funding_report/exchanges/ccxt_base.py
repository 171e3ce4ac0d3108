"""Shared ccxt plumbing for the funding report exchange adapters."""

from decimal import Decimal, InvalidOperation
from typing import Any

import ccxt.async_support as ccxt

from funding_report.config import ExchangeCredentials
from funding_report.exchanges.base import FundingExchangeAdapter, PageCursor
from funding_report.exchanges.pacing import DEFAULT_REQUEST_INTERVALS
from funding_report.models import (
    AmountSource,
    ExchangeId,
    FundingEvent,
    Position,
    PositionSide,
)

USDT_SWAP_SUFFIX = "/USDT:USDT"


def to_decimal(value: Any, default: Decimal | None = None) -> Decimal | None:
    """Convert an exchange number (str, int or float) to Decimal."""
    if value is None or value == "":
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


class CcxtFundingAdapter(FundingExchangeAdapter):
    """Base adapter wrapping an async ccxt client.

    Subclasses set ``exchange_id``, build the client in ``_create_client``
    and describe their funding history cursor in ``_history_request``.
    """

    exchange_id: ExchangeId
    # Field of the raw position payload holding a signed amount, if any
    raw_amount_field: str | None = None

    def __init__(
        self,
        credentials: ExchangeCredentials | None = None,
        request_interval: float | None = None,
        **kwargs,
    ):
        self._credentials = credentials or ExchangeCredentials()
        self._request_interval = request_interval
        self._exchange = self._create_client(self._credentials)

    def _create_client(self, credentials: ExchangeCredentials) -> Any:
        raise NotImplementedError

    def _history_request(self, cursor: PageCursor) -> tuple[int | None, dict]:
        """Return the ``since`` argument and extra params for one page."""
        raise NotImplementedError

    @property
    def name(self) -> str:
        return self.exchange_id.value

    @property
    def min_request_interval(self) -> float:
        if self._request_interval is not None:
            return self._request_interval
        fallback = DEFAULT_REQUEST_INTERVALS.get(self.name, 0.0)
        rate_limit_ms = getattr(self._exchange, "rateLimit", None)
        if isinstance(rate_limit_ms, (int, float)) and rate_limit_ms > 0:
            return max(rate_limit_ms / 1000.0, fallback)
        return fallback

    # ------------------------------------------------------------------
    # FundingExchangeAdapter implementation
    # ------------------------------------------------------------------

    async def load_markets(self) -> None:
        try:
            await self._exchange.load_markets()
        except ccxt.NetworkError as e:
            raise ConnectionError(f"Network error loading markets: {e}") from e
        except ccxt.ExchangeError as e:
            raise RuntimeError(f"Exchange error loading markets: {e}") from e

    async def fetch_open_positions(self) -> list[Position]:
        try:
            symbols = self._position_symbols()
            if symbols is None:
                raw_positions = await self._exchange.fetch_positions()
            else:
                raw_positions = await self._exchange.fetch_positions(symbols)
        except ccxt.NetworkError as e:
            raise ConnectionError(f"Network error fetching positions: {e}") from e
        except ccxt.ExchangeError as e:
            raise RuntimeError(f"Exchange error fetching positions: {e}") from e
        return [self._parse_position(p) for p in raw_positions or []]

    async def fetch_funding_history_page(
        self, symbol: str, cursor: PageCursor
    ) -> list[FundingEvent]:
        since, params = self._history_request(cursor)
        try:
            rows = await self._exchange.fetch_funding_history(
                symbol, since, cursor.limit, params
            )
        except ccxt.BadSymbol as e:
            raise ValueError(f"Invalid symbol: {symbol}") from e
        except ccxt.NetworkError as e:
            raise ConnectionError(f"Network error fetching funding history: {e}") from e
        except ccxt.ExchangeError as e:
            raise RuntimeError(f"Exchange error: {e}") from e
        return [self._parse_funding_row(symbol, row) for row in rows or []]

    async def fetch_last_price(self, symbol: str) -> Decimal:
        try:
            ticker = await self._exchange.fetch_ticker(symbol)
        except ccxt.BadSymbol as e:
            raise ValueError(f"Invalid symbol: {symbol}") from e
        except ccxt.NetworkError as e:
            raise ConnectionError(f"Network error fetching ticker: {e}") from e
        except ccxt.ExchangeError as e:
            raise RuntimeError(f"Exchange error: {e}") from e
        price = to_decimal((ticker or {}).get("last"))
        if price is None:
            raise ValueError(f"Ticker for {symbol} has no last price")
        return price

    async def fetch_balance_snapshot(self, wallet_type: str) -> dict:
        try:
            balance = await self._exchange.fetch_balance({"type": wallet_type})
        except ccxt.NetworkError as e:
            raise ConnectionError(f"Network error fetching balance: {e}") from e
        except ccxt.ExchangeError as e:
            raise RuntimeError(f"Exchange error: {e}") from e
        return dict(balance or {})

    async def close(self) -> None:
        await self._exchange.close()

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _position_symbols(self) -> list[str] | None:
        """Symbols to pass to fetch_positions; None means all."""
        return None

    def _usdt_swap_symbols(self) -> list[str]:
        return [
            s for s in (self._exchange.symbols or [])
            if s.endswith(USDT_SWAP_SUFFIX)
        ]

    def _parse_position(self, data: dict) -> Position:
        side = data.get("side")
        raw_amount = None
        if self.raw_amount_field:
            raw_amount = to_decimal(
                (data.get("info") or {}).get(self.raw_amount_field)
            )
        contracts = to_decimal(data.get("contracts"), Decimal(0))
        return Position(
            exchange=self.exchange_id,
            symbol=data.get("symbol", ""),
            side=PositionSide(side) if side in ("long", "short") else None,
            size=abs(contracts),
            entry_price=to_decimal(data.get("entryPrice"), Decimal(0)),
            raw_amount=raw_amount,
        )

    def _raw_amount(self, row: dict) -> tuple[Any, AmountSource]:
        return row.get("amount"), AmountSource.AMOUNT

    def _parse_funding_row(self, symbol: str, row: Any) -> FundingEvent:
        if not isinstance(row, dict):
            raise ValueError(f"Malformed funding row for {symbol}: {row!r}")
        timestamp = row.get("timestamp")
        raw, source = self._raw_amount(row)
        amount = to_decimal(raw)
        if not isinstance(timestamp, (int, float)) or amount is None:
            raise ValueError(f"Malformed funding row for {symbol}: {row!r}")
        return FundingEvent(
            exchange=self.exchange_id,
            symbol=row.get("symbol") or symbol,
            timestamp=int(timestamp),
            amount=amount,
            amount_source=source,
        )
