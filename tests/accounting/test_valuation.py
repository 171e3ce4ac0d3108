"""Tests for position valuation."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from funding_report.accounting.valuation import resolve_side, valuate, valuate_with_ticker
from funding_report.models import ExchangeId, Position, PositionSide


def make_position(side=PositionSide.LONG, size="2", entry="100", raw_amount=None) -> Position:
    return Position(
        exchange=ExchangeId.BINANCE,
        symbol="BTC/USDT:USDT",
        side=side,
        size=Decimal(size),
        entry_price=Decimal(entry),
        raw_amount=Decimal(raw_amount) if raw_amount is not None else None,
    )


class TestValuate:
    def test_long(self):
        v = valuate(make_position(PositionSide.LONG), Decimal("110"))
        assert v.unrealized_pnl == Decimal("20")
        assert v.position_value == Decimal("220")
        assert v.current_price == Decimal("110")
        assert v.price_available is True

    def test_short(self):
        v = valuate(make_position(PositionSide.SHORT), Decimal("110"))
        assert v.unrealized_pnl == Decimal("-20")
        assert v.position_value == Decimal("220")

    def test_short_profits_when_price_falls(self):
        v = valuate(make_position(PositionSide.SHORT), Decimal("90"))
        assert v.unrealized_pnl == Decimal("20")

    def test_decimal_precision_kept(self):
        v = valuate(make_position(size="0.003", entry="64000.1"), Decimal("64100.25"))
        assert v.unrealized_pnl == Decimal("0.30045")


class TestResolveSide:
    def test_explicit_side_wins(self):
        pos = make_position(PositionSide.SHORT, raw_amount="5")
        assert resolve_side(pos) == PositionSide.SHORT

    def test_inferred_long(self):
        assert resolve_side(make_position(None, raw_amount="2")) == PositionSide.LONG

    def test_inferred_short(self):
        assert resolve_side(make_position(None, raw_amount="-2")) == PositionSide.SHORT

    def test_unknown_defaults_long(self):
        assert resolve_side(make_position(None)) == PositionSide.LONG

    def test_inferred_short_valuation(self):
        v = valuate(make_position(None, raw_amount="-2"), Decimal("110"))
        assert v.unrealized_pnl == Decimal("-20")


class TestValuateWithTicker:
    @pytest.mark.asyncio
    async def test_uses_last_price(self):
        adapter = MagicMock()
        adapter.name = "binance"
        adapter.fetch_last_price = AsyncMock(return_value=Decimal("110"))

        v = await valuate_with_ticker(adapter, make_position())

        assert v.unrealized_pnl == Decimal("20")
        adapter.fetch_last_price.assert_awaited_once_with("BTC/USDT:USDT")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [ConnectionError("down"), RuntimeError("rejected"), ValueError("bad symbol")]
    )
    async def test_ticker_failure_zeroes(self, error):
        adapter = MagicMock()
        adapter.name = "binance"
        adapter.fetch_last_price = AsyncMock(side_effect=error)

        v = await valuate_with_ticker(adapter, make_position())

        assert v.price_available is False
        assert v.unrealized_pnl == 0
        assert v.position_value == 0
        assert v.current_price == 0
