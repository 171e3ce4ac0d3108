"""Normalize exchange balances into comparable equity figures."""

from collections.abc import Mapping
from decimal import Decimal

import structlog

from funding_report.exchanges.base import FundingExchangeAdapter
from funding_report.exchanges.conventions import equity_rule, resolve_path
from funding_report.exchanges.ccxt_base import to_decimal
from funding_report.models import ExchangeEquity, ExchangeId

logger = structlog.get_logger()


def aggregate(
    exchange: ExchangeId,
    snapshots: Mapping[str, dict],
    unrealized_pnl_sum: Decimal = Decimal(0),
) -> ExchangeEquity:
    """Build an exchange's equity entry from its raw wallet snapshots.

    ``snapshots`` maps wallet type to the raw balance. Missing wallets and
    fields count as zero. Unrealized PnL is added only where the exchange's
    futures balance leaves it out.
    """
    rule = equity_rule(exchange)

    futures = to_decimal(
        resolve_path(snapshots.get(rule.futures_wallet), rule.futures_path),
        Decimal(0),
    )
    funding = Decimal(0)
    if rule.funding_wallet is not None and rule.funding_path is not None:
        funding = to_decimal(
            resolve_path(snapshots.get(rule.funding_wallet), rule.funding_path),
            Decimal(0),
        )

    total = futures + funding
    if not rule.includes_unrealized_pnl:
        total += unrealized_pnl_sum

    return ExchangeEquity(
        futures_balance=futures,
        funding_balance=funding,
        total=total,
        includes_unrealized_pnl=rule.includes_unrealized_pnl,
    )


async def collect_equity(
    adapter: FundingExchangeAdapter,
    exchange: ExchangeId,
    unrealized_pnl_sum: Decimal = Decimal(0),
) -> ExchangeEquity:
    """Fetch the wallets an exchange's rule needs and aggregate them.

    A failed balance fetch zeroes this exchange's entry instead of failing
    the report.
    """
    rule = equity_rule(exchange)
    snapshots: dict[str, dict] = {}
    for wallet in rule.wallets:
        try:
            snapshots[wallet] = await adapter.fetch_balance_snapshot(wallet)
        except (ValueError, ConnectionError, RuntimeError) as e:
            logger.warning(
                "balance_fetch_failed",
                exchange=exchange.value,
                wallet=wallet,
                operation="fetch_balance_snapshot",
                error=str(e),
            )
            return ExchangeEquity(
                includes_unrealized_pnl=rule.includes_unrealized_pnl,
                fetch_failed=True,
            )
    return aggregate(exchange, snapshots, unrealized_pnl_sum)


def total_equity(overview: Mapping[str, ExchangeEquity]) -> Decimal:
    """Exact sum of every exchange's total."""
    return sum((equity.total for equity in overview.values()), Decimal(0))
