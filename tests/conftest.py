"""
Pytest fixtures for the syncwatch backend tests.
"""

import pytest
from fastapi.testclient import TestClient

from syncwatch.core.clock import ManualClock
from syncwatch.core.config import Settings
from syncwatch.main import create_app
from syncwatch.services.player_engine import PlaybackEngine

ADMIN_PW = "hunter2"


@pytest.fixture
def clock():
    """Manually driven monotonic clock, starts at an arbitrary non-zero epoch."""
    return ManualClock(start_ns=7_000_000_000)


@pytest.fixture
def engine(clock):
    return PlaybackEngine(clock=clock)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {"admin_pw": ADMIN_PW, "heartbeat_interval_s": 5.0}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def client(make_settings):
    with TestClient(create_app(make_settings())) as c:
        yield c


@pytest.fixture
def auth():
    return {"Authorization": ADMIN_PW}
