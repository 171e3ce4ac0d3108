"""Funding cycle, PnL and equity report for perpetual futures positions."""

__version__ = "0.1.0"
