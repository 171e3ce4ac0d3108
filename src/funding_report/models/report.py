"""Report output models."""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import Field

from funding_report.models.base import FrozenModel, decimal_str
from funding_report.models.equity import ExchangeEquity


class PositionRecord(FrozenModel):
    """One line of the report: funding and PnL for an open position."""

    source: str
    symbol: str
    current_price: Decimal = Decimal(0)
    position_size: Decimal = Decimal(0)
    position_value: Decimal = Decimal(0)
    unrealized_pnl: Decimal = Decimal(0)
    count: int = Field(default=0, ge=0)
    total_funding: Decimal = Decimal(0)
    start_time: str | None = None
    end_time: str | None = None
    price_available: bool = True
    funding_complete: bool = True

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "symbol": self.symbol,
            "currentPrice": decimal_str(self.current_price),
            "positionSize": decimal_str(self.position_size),
            "positionValue": decimal_str(self.position_value),
            "unrealizedPnl": decimal_str(self.unrealized_pnl),
            "count": self.count,
            "totalFunding": decimal_str(self.total_funding),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "priceAvailable": self.price_available,
            "fundingComplete": self.funding_complete,
        }


class Report(FrozenModel):
    """Complete output of one report invocation."""

    position_records: list[PositionRecord] = Field(default_factory=list)
    equity_overview: dict[str, ExchangeEquity] = Field(default_factory=dict)
    total_equity: Decimal = Decimal(0)
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_payload(self) -> dict:
        """Render the HTTP response body.

        Money and size fields are decimal strings so no digits are lost to
        binary floats on the way out.
        """
        return {
            "success": True,
            "result": [r.to_dict() for r in self.position_records],
            "equityOverview": {
                name: equity.to_dict()
                for name, equity in self.equity_overview.items()
            },
            "totalEquity": decimal_str(self.total_equity),
            "generatedAt": self.generated_at.isoformat(),
        }
