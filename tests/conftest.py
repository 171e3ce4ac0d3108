"""Shared test fixtures."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep structlog configuration (bound to captured streams) from leaking between tests."""
    yield
    structlog.reset_defaults()
