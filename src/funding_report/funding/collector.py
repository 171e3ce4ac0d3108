"""FundingCollector - pages through an exchange's funding history."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from funding_report.exchanges.base import FundingExchangeAdapter, PageCursor
from funding_report.exchanges.pacing import RequestPacer
from funding_report.models import CollectionMode, FundingEvent, PaginationStyle
from funding_report.models.funding import EventKey

logger = structlog.get_logger()

DAY_MS = 24 * 60 * 60 * 1000
DEFAULT_MAX_PAGES = 100


def now_ms() -> int:
    return int(time.time() * 1000)


class EventAccumulator:
    """Collects events once each, keyed by their identity."""

    def __init__(self) -> None:
        self._seen: set[EventKey] = set()
        self._events: list[FundingEvent] = []

    def add_page(self, page: list[FundingEvent]) -> int:
        """Add a page of events and return how many were new."""
        added = 0
        for event in page:
            if event.key in self._seen:
                continue
            self._seen.add(event.key)
            self._events.append(event)
            added += 1
        return added

    def __len__(self) -> int:
        return len(self._events)

    def sorted_events(self) -> list[FundingEvent]:
        return sorted(self._events, key=lambda e: e.timestamp)


@dataclass
class FundingCollection:
    """Result of collecting one symbol's funding history."""

    exchange: str
    symbol: str
    window_start: int
    window_end: int
    events: list[FundingEvent] = field(default_factory=list)
    pages: int = 0
    truncated: bool = False

    @property
    def complete(self) -> bool:
        return not self.truncated


class _PageFailed(Exception):
    """Internal signal: a page could not be fetched or parsed."""


class FundingCollector:
    """Drive an adapter's funding history pagination to exhaustion.

    One collector instance serves one adapter; it owns the adapter's
    ``RequestPacer`` so every page request, across every symbol, honours the
    exchange's minimum request interval. The first request is sent
    immediately and each later one waits for its slot.

    Pagination ends on an empty page, a short page, a cursor that would not
    advance (time cursor), or the offset ceiling. The time cursor walks the
    window slice by slice; within a slice it moves ``since`` up when pages
    are oldest first, or ``until`` down when the adapter sets
    ``newest_first``.

    A page that raises ends the loop early; the events already gathered are
    kept and the collection is marked truncated. Running out of
    ``max_pages`` while more pages may remain truncates it too.
    """

    def __init__(
        self,
        adapter: FundingExchangeAdapter,
        pacer: RequestPacer | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        clock_ms: Callable[[], int] = now_ms,
    ):
        self._adapter = adapter
        self._pacer = pacer or RequestPacer(
            min_interval=adapter.min_request_interval, name=adapter.name
        )
        self._max_pages = max_pages
        self._clock_ms = clock_ms

    @property
    def pacer(self) -> RequestPacer:
        return self._pacer

    def full_history_window(self, lookback_days: int = 90) -> tuple[int, int]:
        end = self._clock_ms()
        return end - lookback_days * DAY_MS, end

    def recent_window(self, hours: float = 24.0) -> tuple[int, int]:
        end = self._clock_ms()
        return end - int(hours * 60 * 60 * 1000), end

    async def collect(
        self,
        symbol: str,
        window_start: int,
        window_end: int,
        mode: CollectionMode = CollectionMode.FULL_HISTORY,
    ) -> FundingCollection:
        """Collect deduplicated funding events for one symbol, oldest first.

        In WINDOWED mode only events inside ``[window_start, window_end]``
        are kept; FULL_HISTORY keeps everything the exchange returns.
        """
        collection = FundingCollection(
            exchange=self._adapter.name,
            symbol=symbol,
            window_start=window_start,
            window_end=window_end,
        )
        accumulator = EventAccumulator()

        style = self._adapter.pagination
        try:
            if style == PaginationStyle.TIME:
                await self._collect_by_time(collection, accumulator)
            elif style == PaginationStyle.OFFSET:
                await self._collect_by_offset(collection, accumulator)
            elif style == PaginationStyle.PAGE:
                await self._collect_by_page(collection, accumulator)
            else:
                raise ValueError(f"Unsupported pagination style: {style}")
        except _PageFailed:
            collection.truncated = True

        events = accumulator.sorted_events()
        if mode == CollectionMode.WINDOWED:
            events = [
                e for e in events if window_start <= e.timestamp <= window_end
            ]
        collection.events = events

        logger.info(
            "funding_collection_complete",
            exchange=collection.exchange,
            symbol=symbol,
            mode=mode.value,
            pages=collection.pages,
            events=len(events),
            truncated=collection.truncated,
        )
        return collection

    # ------------------------------------------------------------------
    # Cursor idioms
    # ------------------------------------------------------------------

    async def _collect_by_time(
        self, collection: FundingCollection, accumulator: EventAccumulator
    ) -> None:
        span = self._adapter.max_span_ms
        limit = self._adapter.page_size
        newest_first = self._adapter.newest_first
        end = collection.window_end

        cursor = collection.window_start
        slice_end = end if span is None else min(end, cursor + span)
        until = slice_end

        while cursor < end:
            if self._page_limit_reached(collection):
                return
            page = await self._fetch(
                collection, PageCursor(limit=limit, since=cursor, until=until)
            )
            accumulator.add_page(page)

            if page and not newest_first:
                last = max(e.timestamp for e in page)
                if last < cursor:
                    self._log_stall(collection, cursor, last)
                    return
                if len(page) >= limit:
                    cursor = last + 1
                    if cursor <= slice_end:
                        continue
            elif len(page) >= limit:
                oldest = min(e.timestamp for e in page)
                if oldest >= until:
                    self._log_stall(collection, until, oldest)
                    return
                if oldest > cursor:
                    # Walk down inside the slice; events at the boundary
                    # timestamp come back again and are dropped as duplicates
                    until = oldest
                    continue

            # The slice is exhausted; an empty slice is not the end of the window
            if slice_end >= end:
                return
            cursor = max(cursor, slice_end + 1)
            slice_end = end if span is None else min(end, cursor + span)
            until = slice_end

    async def _collect_by_offset(
        self, collection: FundingCollection, accumulator: EventAccumulator
    ) -> None:
        limit = self._adapter.page_size
        ceiling = self._adapter.offset_ceiling
        offset = 0

        while ceiling is None or offset < ceiling:
            if self._page_limit_reached(collection):
                return
            page = await self._fetch(
                collection, PageCursor(limit=limit, offset=offset)
            )
            if not page:
                return
            accumulator.add_page(page)
            if len(page) < limit:
                return
            offset += limit

    async def _collect_by_page(
        self, collection: FundingCollection, accumulator: EventAccumulator
    ) -> None:
        limit = self._adapter.page_size
        page_number = 1

        while not self._page_limit_reached(collection):
            page = await self._fetch(
                collection, PageCursor(limit=limit, page=page_number)
            )
            if not page:
                return
            accumulator.add_page(page)
            if len(page) < limit:
                return
            page_number += 1

    def _page_limit_reached(self, collection: FundingCollection) -> bool:
        """Check ``max_pages`` before a request; hitting it truncates."""
        if collection.pages < self._max_pages:
            return False
        logger.warning(
            "funding_page_limit_reached",
            exchange=collection.exchange,
            symbol=collection.symbol,
            max_pages=self._max_pages,
        )
        collection.truncated = True
        return True

    def _log_stall(
        self, collection: FundingCollection, cursor: int, timestamp: int
    ) -> None:
        logger.warning(
            "funding_cursor_stalled",
            exchange=collection.exchange,
            symbol=collection.symbol,
            cursor=cursor,
            page_timestamp=timestamp,
        )

    async def _fetch(
        self, collection: FundingCollection, cursor: PageCursor
    ) -> list[FundingEvent]:
        await self._pacer.wait()
        try:
            page = await self._adapter.fetch_funding_history_page(
                collection.symbol, cursor
            )
        except (ValueError, ConnectionError, RuntimeError) as e:
            logger.warning(
                "funding_page_failed",
                exchange=collection.exchange,
                symbol=collection.symbol,
                operation="fetch_funding_history_page",
                page=collection.pages + 1,
                error=str(e),
            )
            raise _PageFailed() from e
        collection.pages += 1
        logger.debug(
            "funding_page_fetched",
            exchange=collection.exchange,
            symbol=collection.symbol,
            page=collection.pages,
            size=len(page),
        )
        return page
