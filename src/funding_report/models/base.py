"""Base model and common enums for the funding report."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Immutable base model."""

    model_config = ConfigDict(frozen=True)


class ExchangeId(str, Enum):
    """Exchanges the report knows how to read."""

    BINANCE = "binance"
    PHEMEX = "phemex"
    BYBIT = "bybit"
    MEXC = "mexc"


class PositionSide(str, Enum):
    """Direction of a derivatives position."""

    LONG = "long"
    SHORT = "short"


class AmountSource(str, Enum):
    """Raw field a funding amount was read from."""

    AMOUNT = "amount"
    EXEC_FEE = "info.execFee"


class PaginationStyle(str, Enum):
    """Cursor idiom of an exchange's funding history endpoint."""

    TIME = "time"
    OFFSET = "offset"
    PAGE = "page"


class CollectionMode(str, Enum):
    """How far back funding history is collected."""

    FULL_HISTORY = "full_history"
    WINDOWED = "windowed"


class CyclePolicy(str, Enum):
    """Which events count as the current funding period."""

    LATEST_CYCLE = "latest_cycle"
    WINDOW_SUM = "window_sum"


def decimal_str(value: Decimal) -> str:
    """Render a Decimal in plain notation, keeping every digit it carries."""
    return format(value, "f")
