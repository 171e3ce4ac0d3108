"""Assemble position records and the equity overview into a Report."""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from funding_report.accounting.equity import total_equity
from funding_report.exchanges.ccxt_base import USDT_SWAP_SUFFIX
from funding_report.exchanges.conventions import funding_sign
from funding_report.models import (
    ExchangeEquity,
    ExchangeId,
    FundingEvent,
    Position,
    PositionRecord,
    Report,
    Valuation,
)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def clean_symbol(symbol: str) -> str:
    """``BTC/USDT:USDT`` -> ``BTC``."""
    return symbol.replace(USDT_SWAP_SUFFIX, "")


def normalized_funding(exchange: ExchangeId, events: Sequence[FundingEvent]) -> Decimal:
    """Signed sum of funding amounts in the report's sign convention."""
    sign = funding_sign(exchange)
    return sum((e.amount * sign for e in events), Decimal(0))


class ReportBuilder:
    """Accumulates the records of one report invocation."""

    def __init__(self, display_timezone: str = "Asia/Singapore"):
        self._tz = ZoneInfo(display_timezone)
        self._records: list[PositionRecord] = []
        self._equity: dict[str, ExchangeEquity] = {}

    def format_timestamp(self, timestamp_ms: int) -> str:
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
        return moment.astimezone(self._tz).strftime(DISPLAY_FORMAT)

    def add_position(
        self,
        exchange: ExchangeId,
        position: Position,
        events: Sequence[FundingEvent],
        valuation: Valuation,
        funding_complete: bool = True,
    ) -> PositionRecord:
        record = PositionRecord(
            source=exchange.value,
            symbol=clean_symbol(position.symbol),
            current_price=valuation.current_price,
            position_size=position.size,
            position_value=valuation.position_value,
            unrealized_pnl=valuation.unrealized_pnl,
            count=len(events),
            total_funding=normalized_funding(exchange, events),
            start_time=self.format_timestamp(events[0].timestamp) if events else None,
            end_time=self.format_timestamp(events[-1].timestamp) if events else None,
            price_available=valuation.price_available,
            funding_complete=funding_complete,
        )
        self._records.append(record)
        return record

    def set_equity(self, exchange: ExchangeId, equity: ExchangeEquity) -> None:
        self._equity[exchange.value] = equity

    @property
    def records(self) -> list[PositionRecord]:
        return list(self._records)

    def build(self) -> Report:
        return Report(
            position_records=list(self._records),
            equity_overview=dict(self._equity),
            total_equity=total_equity(self._equity),
        )
