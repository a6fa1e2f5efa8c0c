"""MonitorState: the explicitly owned state shared by ingestion and queries."""

import time
from datetime import datetime
from typing import Callable, Optional

from ..models import MonitorConfiguration
from .liveness_tracker import LivenessTracker
from .reading_store import ReadingStore


class MonitorState:
    """Reading store, liveness tracker and process start time for one app."""

    def __init__(self,
                 store: Optional[ReadingStore] = None,
                 tracker: Optional[LivenessTracker] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.store = store or ReadingStore(clock=clock)
        self.tracker = tracker or LivenessTracker(clock=clock)
        self._clock = clock
        self.started_monotonic = clock()
        self.started_at = datetime.now()

    @classmethod
    def from_configuration(cls,
                           config: MonitorConfiguration,
                           clock: Callable[[], float] = time.monotonic) -> "MonitorState":
        """Build state sized and timed by the configuration."""
        store = ReadingStore(
            capacity=config.storage.history_capacity,
            time_format=config.storage.time_format,
            date_format=config.storage.date_format,
            clock=clock,
        )
        tracker = LivenessTracker(
            timeout_seconds=config.liveness.timeout_seconds,
            check_interval_seconds=config.liveness.check_interval_seconds,
            clock=clock,
        )
        return cls(store=store, tracker=tracker, clock=clock)

    @property
    def uptime_seconds(self) -> float:
        """Seconds since this state was created."""
        return self._clock() - self.started_monotonic
