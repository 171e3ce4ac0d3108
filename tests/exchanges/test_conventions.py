"""Tests for the per-exchange convention table."""

from decimal import Decimal

import pytest

from funding_report.exchanges.conventions import (
    EQUITY_RULES,
    FUNDING_SIGN,
    equity_rule,
    funding_sign,
    resolve_path,
)
from funding_report.models import ExchangeId


class TestTables:
    def test_every_exchange_has_rules(self):
        for exchange in ExchangeId:
            assert exchange in FUNDING_SIGN
            assert exchange in EQUITY_RULES

    def test_funding_signs(self):
        assert funding_sign(ExchangeId.BINANCE) == Decimal(1)
        assert funding_sign(ExchangeId.PHEMEX) == Decimal(-1)
        assert funding_sign(ExchangeId.BYBIT) == Decimal(-1)
        assert funding_sign(ExchangeId.MEXC) == Decimal(1)

    def test_only_phemex_excludes_unrealized_pnl(self):
        excluded = [e for e, rule in EQUITY_RULES.items() if not rule.includes_unrealized_pnl]
        assert excluded == [ExchangeId.PHEMEX]

    def test_wallets(self):
        assert equity_rule(ExchangeId.BINANCE).wallets == ["future", "spot"]
        assert equity_rule(ExchangeId.MEXC).wallets == ["swap"]


class TestResolvePath:
    def test_nested_dicts(self):
        assert resolve_path({"a": {"b": 3}}, ("a", "b")) == 3

    def test_list_index(self):
        assert resolve_path({"a": [{"b": 1}, {"b": 2}]}, ("a", 1, "b")) == 2

    def test_list_match(self):
        data = {"rows": [{"ccy": "BTC", "v": 1}, {"ccy": "USDT", "v": 7}]}
        assert resolve_path(data, ("rows", {"ccy": "USDT"}, "v")) == 7

    @pytest.mark.parametrize(
        "data,path",
        [
            (None, ("a",)),
            ({}, ("a", "b")),
            ({"a": []}, ("a", 0)),
            ({"a": [{"ccy": "BTC"}]}, ("a", {"ccy": "USDT"}, "v")),
            ({"a": "text"}, ("a", "b")),
            ({"a": {"b": 1}}, ("a", 0)),
        ],
    )
    def test_broken_paths_give_none(self, data, path):
        assert resolve_path(data, path) is None
