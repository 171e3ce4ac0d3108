"""Abstract exchange adapter interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from funding_report.models import FundingEvent, PaginationStyle, Position


@dataclass(frozen=True)
class PageCursor:
    """Parameters for one funding history page request.

    Time-cursor adapters read ``since``/``until``; offset adapters read
    ``offset``; page-number adapters read ``page``. ``limit`` is always set.
    """

    limit: int
    since: int | None = None
    until: int | None = None
    offset: int = 0
    page: int = 1


class FundingExchangeAdapter(ABC):
    """Abstract base class for exchange adapters used by the funding report.

    All I/O methods are async. Class attributes describe the exchange's
    funding history pagination so the collector can drive it generically.
    """

    pagination: PaginationStyle = PaginationStyle.TIME
    page_size: int = 100
    # Offset idiom only: stop once the offset reaches this value
    offset_ceiling: int | None = None
    # Time idiom only: widest [since, until] span one request may cover
    max_span_ms: int | None = None
    # Time idiom only: pages hold the newest events of [since, until]
    newest_first: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the exchange name."""

    @property
    @abstractmethod
    def min_request_interval(self) -> float:
        """Minimum seconds between successive requests to this exchange."""

    @abstractmethod
    async def load_markets(self) -> None:
        """Load market metadata. Must be awaited before other queries."""

    @abstractmethod
    async def fetch_open_positions(self) -> list[Position]:
        """Fetch derivatives positions (callers filter out empty ones)."""

    @abstractmethod
    async def fetch_funding_history_page(
        self, symbol: str, cursor: PageCursor
    ) -> list[FundingEvent]:
        """Fetch one page of funding settlements for a symbol."""

    @abstractmethod
    async def fetch_last_price(self, symbol: str) -> Decimal:
        """Fetch the last traded price for a symbol."""

    @abstractmethod
    async def fetch_balance_snapshot(self, wallet_type: str) -> dict:
        """Fetch the raw balance structure of one wallet."""

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
