"""Tests for equity extraction and aggregation."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from funding_report.accounting.equity import aggregate, collect_equity, total_equity
from funding_report.models import ExchangeEquity, ExchangeId

BINANCE_SNAPSHOTS = {
    "future": {"info": {"totalMarginBalance": "1500.25"}, "total": {"USDT": 1400.0}},
    "spot": {"free": {"USDT": 300.5, "BTC": 0.1}},
}
PHEMEX_SNAPSHOTS = {
    "swap": {"info": {"data": {"account": {"accountBalanceRv": "800"}}}},
}
BYBIT_SNAPSHOTS = {
    "unified": {"info": {"result": {"list": [{"totalEquity": "2000.75"}]}}},
    "funding": {"total": {"USDT": 250}},
}
MEXC_SNAPSHOTS = {
    "swap": {
        "info": {
            "data": [
                {"currency": "BTC", "equity": 0.01},
                {"currency": "USDT", "equity": 640.4},
            ]
        }
    },
}


def make_adapter(snapshots: dict) -> MagicMock:
    adapter = MagicMock()

    async def fetch(wallet_type):
        value = snapshots[wallet_type]
        if isinstance(value, Exception):
            raise value
        return value

    adapter.fetch_balance_snapshot = AsyncMock(side_effect=fetch)
    return adapter


class TestAggregate:
    def test_binance_futures_plus_spot(self):
        eq = aggregate(ExchangeId.BINANCE, BINANCE_SNAPSHOTS, Decimal("99"))
        assert eq.futures_balance == Decimal("1500.25")
        assert eq.funding_balance == Decimal("300.5")
        assert eq.total == Decimal("1800.75")

    def test_phemex_adds_unrealized_pnl(self):
        eq = aggregate(ExchangeId.PHEMEX, PHEMEX_SNAPSHOTS, Decimal("-35.5"))
        assert eq.futures_balance == Decimal("800")
        assert eq.funding_balance == 0
        assert eq.total == Decimal("764.5")
        assert eq.includes_unrealized_pnl is False

    def test_bybit_equity_plus_funding_wallet(self):
        eq = aggregate(ExchangeId.BYBIT, BYBIT_SNAPSHOTS, Decimal("12"))
        assert eq.futures_balance == Decimal("2000.75")
        assert eq.funding_balance == Decimal("250")
        assert eq.total == Decimal("2250.75")

    def test_mexc_selects_usdt_asset(self):
        eq = aggregate(ExchangeId.MEXC, MEXC_SNAPSHOTS, Decimal("5"))
        assert eq.futures_balance == Decimal("640.4")
        assert eq.funding_balance == 0
        assert eq.total == Decimal("640.4")

    def test_missing_fields_default_to_zero(self):
        eq = aggregate(ExchangeId.BYBIT, {"unified": {"info": {}}, "funding": {}})
        assert eq.futures_balance == 0
        assert eq.funding_balance == 0
        assert eq.total == 0

    def test_unparsable_field_defaults_to_zero(self):
        eq = aggregate(ExchangeId.BINANCE, {"future": {"info": {"totalMarginBalance": "n/a"}}})
        assert eq.futures_balance == 0


class TestCollectEquity:
    @pytest.mark.asyncio
    async def test_fetches_every_wallet_of_the_rule(self):
        adapter = make_adapter(BINANCE_SNAPSHOTS)
        eq = await collect_equity(adapter, ExchangeId.BINANCE)
        wallets = [c.args[0] for c in adapter.fetch_balance_snapshot.await_args_list]
        assert wallets == ["future", "spot"]
        assert eq.total == Decimal("1800.75")
        assert eq.fetch_failed is False

    @pytest.mark.asyncio
    async def test_failed_fetch_zeroes_entry(self):
        adapter = make_adapter({"swap": ConnectionError("timeout")})
        eq = await collect_equity(adapter, ExchangeId.PHEMEX, Decimal("50"))
        assert eq.total == 0
        assert eq.fetch_failed is True


class TestTotalEquity:
    def test_exact_sum(self):
        overview = {
            "binance": ExchangeEquity(total=Decimal("0.1")),
            "bybit": ExchangeEquity(total=Decimal("0.2")),
            "mexc": ExchangeEquity(total=Decimal("0.3")),
        }
        assert total_equity(overview) == Decimal("0.6")

    def test_empty(self):
        assert total_equity({}) == 0
