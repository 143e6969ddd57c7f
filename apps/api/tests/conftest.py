"""Shared pytest configuration and fixtures for the test suite."""

import pytest

from stacks.core import limiter


@pytest.fixture(autouse=True)
def _disable_rate_limit():
    """Import endpoints are rate limited per user; tests call them back to back."""
    limiter.enabled = False
    yield
    limiter.enabled = True
