"""Funding event model."""

from decimal import Decimal

from pydantic import Field

from funding_report.models.base import AmountSource, ExchangeId, FrozenModel

EventKey = tuple[str, str, int, Decimal]


class FundingEvent(FrozenModel):
    """A single funding settlement for one position.

    ``amount`` keeps the exchange's own sign; normalization to holder cost
    happens when the report is built.
    """

    exchange: ExchangeId
    symbol: str
    timestamp: int = Field(ge=0)
    amount: Decimal
    amount_source: AmountSource = AmountSource.AMOUNT

    @property
    def key(self) -> EventKey:
        """Identity used for deduplication across overlapping pages."""
        return (self.exchange.value, self.symbol, self.timestamp, self.amount)
