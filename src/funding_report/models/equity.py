"""Per-exchange equity model."""

from decimal import Decimal

from funding_report.models.base import FrozenModel, decimal_str


class ExchangeEquity(FrozenModel):
    """Account value of one exchange split into futures and funding wallets."""

    futures_balance: Decimal = Decimal(0)
    funding_balance: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    includes_unrealized_pnl: bool = True
    fetch_failed: bool = False

    def to_dict(self) -> dict:
        return {
            "futuresBalance": decimal_str(self.futures_balance),
            "fundingBalance": decimal_str(self.funding_balance),
            "total": decimal_str(self.total),
            "fetchFailed": self.fetch_failed,
        }
