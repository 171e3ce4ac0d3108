"""Core data models for the funding report."""

from funding_report.models.base import (
    AmountSource,
    CollectionMode,
    CyclePolicy,
    ExchangeId,
    PaginationStyle,
    PositionSide,
)
from funding_report.models.equity import ExchangeEquity
from funding_report.models.funding import FundingEvent
from funding_report.models.position import Position, Valuation
from funding_report.models.report import PositionRecord, Report

__all__ = [
    "AmountSource",
    "CollectionMode",
    "CyclePolicy",
    "ExchangeEquity",
    "ExchangeId",
    "FundingEvent",
    "PaginationStyle",
    "Position",
    "PositionRecord",
    "PositionSide",
    "Report",
    "Valuation",
]
