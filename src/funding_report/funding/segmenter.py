"""Split funding event streams into funding cycles.

A funding cycle is the longest run of settlements with no silence longer
than the gap threshold. Funding settles at least every eight hours on the
supported exchanges, so a gap above nine hours means the position was closed
and later reopened. Re-validate the threshold before adding an exchange with
a slower funding cadence.
"""

from collections.abc import Sequence

from funding_report.models import CyclePolicy, FundingEvent

GAP_THRESHOLD_MS = 9 * 60 * 60 * 1000

FundingCycle = tuple[FundingEvent, ...]


def segment(
    events: Sequence[FundingEvent], gap_threshold_ms: int = GAP_THRESHOLD_MS
) -> list[FundingCycle]:
    """Partition time-ordered events into cycles.

    Concatenating the returned cycles reproduces ``events`` exactly. An
    empty input yields no cycles.
    """
    cycles: list[FundingCycle] = []
    current: list[FundingEvent] = []
    previous_ts: int | None = None

    for event in events:
        if previous_ts is not None and event.timestamp - previous_ts > gap_threshold_ms:
            cycles.append(tuple(current))
            current = []
        current.append(event)
        previous_ts = event.timestamp

    if current:
        cycles.append(tuple(current))
    return cycles


def latest_cycle(
    events: Sequence[FundingEvent], gap_threshold_ms: int = GAP_THRESHOLD_MS
) -> FundingCycle:
    """Return the most recent cycle, or an empty tuple when there are no events."""
    cycles = segment(events, gap_threshold_ms)
    return cycles[-1] if cycles else ()


def window_events(events: Sequence[FundingEvent]) -> FundingCycle:
    """Treat a bounded window as a single period without segmenting it."""
    return tuple(events)


def select_current(
    events: Sequence[FundingEvent],
    policy: CyclePolicy = CyclePolicy.LATEST_CYCLE,
    gap_threshold_ms: int = GAP_THRESHOLD_MS,
) -> FundingCycle:
    """Pick the events that make up the current funding period."""
    if policy == CyclePolicy.WINDOW_SUM:
        return window_events(events)
    return latest_cycle(events, gap_threshold_ms)
