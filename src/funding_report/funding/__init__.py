"""Funding history collection and cycle segmentation."""

from funding_report.funding.collector import (
    EventAccumulator,
    FundingCollection,
    FundingCollector,
)
from funding_report.funding.segmenter import (
    GAP_THRESHOLD_MS,
    latest_cycle,
    segment,
    select_current,
    window_events,
)

__all__ = [
    "GAP_THRESHOLD_MS",
    "EventAccumulator",
    "FundingCollection",
    "FundingCollector",
    "latest_cycle",
    "segment",
    "select_current",
    "window_events",
]
