"""Mark-to-market valuation of open positions."""

from decimal import Decimal

import structlog

from funding_report.exchanges.base import FundingExchangeAdapter
from funding_report.models import Position, PositionSide, Valuation

logger = structlog.get_logger()


def resolve_side(position: Position) -> PositionSide:
    """Return the position's side, inferring it from the signed amount if needed.

    Inference assumes a positive raw amount is long. That holds for one-way
    mode on the supported exchanges but should be checked for any new one.
    """
    if position.side is not None:
        return position.side
    if position.raw_amount is not None and position.raw_amount != 0:
        return PositionSide.LONG if position.raw_amount > 0 else PositionSide.SHORT
    logger.warning(
        "position_side_unknown",
        exchange=position.exchange.value,
        symbol=position.symbol,
    )
    return PositionSide.LONG


def valuate(position: Position, last_price: Decimal) -> Valuation:
    """Compute notional value and unrealized PnL at ``last_price``."""
    size = abs(position.size)
    if resolve_side(position) == PositionSide.LONG:
        pnl = (last_price - position.entry_price) * size
    else:
        pnl = (position.entry_price - last_price) * size
    return Valuation(
        current_price=last_price,
        position_value=size * last_price,
        unrealized_pnl=pnl,
    )


async def valuate_with_ticker(
    adapter: FundingExchangeAdapter, position: Position
) -> Valuation:
    """Fetch the last price and valuate; a failed ticker yields a zero valuation."""
    try:
        price = await adapter.fetch_last_price(position.symbol)
    except (ValueError, ConnectionError, RuntimeError) as e:
        logger.warning(
            "ticker_fetch_failed",
            exchange=adapter.name,
            symbol=position.symbol,
            operation="fetch_last_price",
            error=str(e),
        )
        return Valuation.unavailable()
    return valuate(position, price)
