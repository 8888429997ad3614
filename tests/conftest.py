"""
Shared fixtures.

Every test gets its own Telemetry so recorded errors and counters never
leak between tests.
"""

import pytest

from family_finance.config import get_settings
from family_finance.telemetry import Telemetry


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings groups are cached; reload them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def telemetry():
    return Telemetry()


@pytest.fixture
def checking_account():
    return {"id": "a1", "name": "Main", "type": "CHECKING", "balance": 1000, "currency": "BRL"}
