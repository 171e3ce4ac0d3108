"""Minimum-interval request pacer for paginated exchange calls."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()

# Fallback spacing (seconds) when an exchange client does not advertise one
DEFAULT_REQUEST_INTERVALS: dict[str, float] = {
    "binance": 0.05,
    "phemex": 0.12,
    "bybit": 0.5,
    "mexc": 0.1,
}


@dataclass
class PacingMetrics:
    """Tracks how often and how long the pacer made callers wait."""

    total_requests: int = 0
    delayed_requests: int = 0
    total_wait_time_ms: float = 0.0

    @property
    def avg_wait_ms(self) -> float:
        if self.delayed_requests == 0:
            return 0.0
        return self.total_wait_time_ms / self.delayed_requests

    def record_request(self, wait_ms: float = 0.0) -> None:
        self.total_requests += 1
        if wait_ms > 0:
            self.delayed_requests += 1
            self.total_wait_time_ms += wait_ms

    def to_dict(self) -> dict:
        return {
            "total_requests": self.total_requests,
            "delayed_requests": self.delayed_requests,
            "avg_wait_ms": round(self.avg_wait_ms, 2),
        }


class RequestPacer:
    """Guarantees a minimum interval between successive calls to one exchange.

    The first call never waits. Every later call waits until
    ``min_interval`` seconds have passed since the previous call was let
    through. ``clock`` and ``sleep`` are injectable so schedules can be
    verified without wall-clock waits.
    """

    def __init__(
        self,
        min_interval: float,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self._min_interval = min_interval
        self._name = name
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()
        self._metrics = PacingMetrics()

    @property
    def name(self) -> str:
        return self._name

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def metrics(self) -> PacingMetrics:
        return self._metrics

    def delay_needed(self) -> float:
        """Seconds the next call would have to wait right now."""
        if self._last_call is None:
            return 0.0
        elapsed = self._clock() - self._last_call
        return max(0.0, self._min_interval - elapsed)

    async def wait(self) -> float:
        """Wait for this caller's slot.

        Returns:
            Wait time in seconds (0.0 if no wait was needed).
        """
        async with self._lock:
            delay = self.delay_needed()
            if delay > 0:
                logger.debug(
                    "request_pacer_waiting",
                    pacer=self._name,
                    wait_ms=round(delay * 1000.0, 1),
                )
                await self._sleep(delay)
            self._last_call = self._clock()
            self._metrics.record_request(wait_ms=delay * 1000.0)
        return delay

    def to_dict(self) -> dict:
        return {
            "name": self._name,
            "min_interval": self._min_interval,
            "metrics": self._metrics.to_dict(),
        }
