"""Pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from kebon_monitor.models import MonitorConfiguration
from kebon_monitor.services import (
    IngestionCoordinator,
    LivenessTracker,
    MonitorState,
    QuerySurface,
    ReadingStore,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """A monotonic clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def monitor_state(fake_clock):
    """Isolated state with default timings and a fake clock."""
    return MonitorState(
        store=ReadingStore(clock=fake_clock),
        tracker=LivenessTracker(timeout_seconds=30.0, check_interval_seconds=5.0, clock=fake_clock),
        clock=fake_clock,
    )


@pytest.fixture
def coordinator(monitor_state):
    return IngestionCoordinator(monitor_state)


@pytest.fixture
def queries(monitor_state):
    return QuerySurface(monitor_state, advertised_ip="127.0.0.1", port=3000)


@pytest.fixture
def monitor_config():
    """Default configuration."""
    return MonitorConfiguration()
