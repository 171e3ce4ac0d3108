"""Per-exchange sign and balance conventions.

Every exchange reports funding and balances differently. The rules live in
this table and are consumed by generic code; nothing else in the package
branches on the exchange name.

Funding sign
    Multiplier turning a raw funding amount into the signed amount the
    report shows. Phemex and Bybit report a fee paid by the holder as a
    positive number, so their amounts are negated.

Equity rules
    ``futures_path`` / ``funding_path`` address a field inside the raw ccxt
    balance of the named wallet. A path element that is a dict selects the
    first list item whose fields match it. ``includes_unrealized_pnl`` is
    False where the futures balance excludes open PnL, in which case the
    position PnL is added to the total.

===========  ==============================  ==========================  ========
exchange     futures                         funding                     uPnL in
===========  ==============================  ==========================  ========
binance      future: totalMarginBalance      spot: free USDT             yes
phemex       swap: accountBalanceRv          none                        no
bybit        unified: totalEquity            funding: total USDT         yes
mexc         swap: USDT asset equity         none                        yes
===========  ==============================  ==========================  ========
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from funding_report.models.base import ExchangeId

FieldPath = tuple[Any, ...]


@dataclass(frozen=True)
class EquityRule:
    """Where an exchange keeps its futures and funding balances."""

    futures_wallet: str
    futures_path: FieldPath
    funding_wallet: str | None = None
    funding_path: FieldPath | None = None
    includes_unrealized_pnl: bool = True

    @property
    def wallets(self) -> list[str]:
        wallets = [self.futures_wallet]
        if self.funding_wallet is not None:
            wallets.append(self.funding_wallet)
        return wallets


FUNDING_SIGN: dict[ExchangeId, Decimal] = {
    ExchangeId.BINANCE: Decimal(1),
    ExchangeId.PHEMEX: Decimal(-1),
    ExchangeId.BYBIT: Decimal(-1),
    ExchangeId.MEXC: Decimal(1),
}

EQUITY_RULES: dict[ExchangeId, EquityRule] = {
    ExchangeId.BINANCE: EquityRule(
        futures_wallet="future",
        futures_path=("info", "totalMarginBalance"),
        funding_wallet="spot",
        funding_path=("free", "USDT"),
    ),
    ExchangeId.PHEMEX: EquityRule(
        futures_wallet="swap",
        futures_path=("info", "data", "account", "accountBalanceRv"),
        includes_unrealized_pnl=False,
    ),
    ExchangeId.BYBIT: EquityRule(
        futures_wallet="unified",
        futures_path=("info", "result", "list", 0, "totalEquity"),
        funding_wallet="funding",
        funding_path=("total", "USDT"),
    ),
    ExchangeId.MEXC: EquityRule(
        futures_wallet="swap",
        futures_path=("info", "data", {"currency": "USDT"}, "equity"),
    ),
}


def funding_sign(exchange: ExchangeId) -> Decimal:
    return FUNDING_SIGN.get(exchange, Decimal(1))


def equity_rule(exchange: ExchangeId) -> EquityRule:
    try:
        return EQUITY_RULES[exchange]
    except KeyError:
        raise ValueError(f"No equity rule for exchange: {exchange.value}") from None


def resolve_path(data: Any, path: FieldPath) -> Any:
    """Walk ``path`` through nested dicts and lists; None when it breaks."""
    current = data
    for step in path:
        if current is None:
            return None
        if isinstance(step, dict):
            if not isinstance(current, list):
                return None
            current = next(
                (
                    item for item in current
                    if isinstance(item, dict)
                    and all(item.get(k) == v for k, v in step.items())
                ),
                None,
            )
        elif isinstance(step, int):
            if not isinstance(current, list) or step >= len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
    return current
