"""Position and valuation models."""

from decimal import Decimal

from pydantic import Field

from funding_report.models.base import ExchangeId, FrozenModel, PositionSide


class Position(FrozenModel):
    """An open derivatives position as reported by an exchange."""

    exchange: ExchangeId
    symbol: str
    side: PositionSide | None = None
    size: Decimal = Field(ge=0)
    entry_price: Decimal = Decimal(0)
    # Signed position amount, used only when ``side`` is missing
    raw_amount: Decimal | None = None

    @property
    def is_open(self) -> bool:
        return self.size > 0


class Valuation(FrozenModel):
    """Mark-to-market result for one position."""

    current_price: Decimal = Decimal(0)
    position_value: Decimal = Decimal(0)
    unrealized_pnl: Decimal = Decimal(0)
    price_available: bool = True

    @classmethod
    def unavailable(cls) -> "Valuation":
        return cls(price_available=False)
