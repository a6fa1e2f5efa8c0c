"""LivenessTracker service for timeout-based device online/offline state."""

import asyncio
import threading
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional

import structlog

from ..models import DeviceStatus, synthesize_device_id


logger = structlog.get_logger(__name__)


class LivenessTracker:
    """Tracks the single logical device across all reporting channels.

    The device goes online synchronously on every accepted reading and
    offline only when the periodic check finds it silent for longer than
    the timeout, so detection lags the timeout by at most one interval.
    """

    def __init__(self,
                 timeout_seconds: float = 30.0,
                 check_interval_seconds: float = 5.0,
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], datetime] = datetime.now):
        """Initialize the tracker in the offline state."""
        self.timeout_seconds = timeout_seconds
        self.check_interval_seconds = check_interval_seconds
        self._clock = clock
        self._wall_clock = wall_clock

        self._status = DeviceStatus()
        self._last_seen_monotonic: Optional[float] = None
        self._lock = threading.RLock()

        # Reassessment loop state
        self.is_running = False
        self._check_task: Optional[asyncio.Task] = None
        self.check_count = 0

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the device-status lock across a multi-step update."""
        with self._lock:
            yield

    def mark_seen(self, sensor_type: str, declared_device_id: Optional[str] = None) -> DeviceStatus:
        """Record an accepted reading and return the resulting status."""
        with self._lock:
            was_online = self._status.is_online

            if declared_device_id:
                self._status.device_id = declared_device_id
            elif self._status.device_id is None:
                self._status.device_id = synthesize_device_id(sensor_type)

            self._last_seen_monotonic = self._clock()
            self._status.last_seen = int(self._wall_clock().timestamp() * 1000)
            self._status.is_online = True

            if not was_online:
                logger.info("Device online",
                            device_id=self._status.device_id,
                            sensor_type=sensor_type)

            return self._status.model_copy()

    def reassess(self) -> bool:
        """Take the device offline if it has been silent past the timeout."""
        with self._lock:
            self.check_count += 1
            if self._last_seen_monotonic is None:
                return self._status.is_online

            silent_for = self._clock() - self._last_seen_monotonic
            if silent_for > self.timeout_seconds and self._status.is_online:
                self._status.is_online = False
                logger.warning("Device offline",
                               device_id=self._status.device_id,
                               silent_seconds=round(silent_for, 3),
                               timeout_seconds=self.timeout_seconds)

            return self._status.is_online

    def snapshot(self) -> DeviceStatus:
        """Copy of the current device status."""
        with self._lock:
            return self._status.model_copy()

    async def start(self) -> None:
        """Start the periodic reassessment task."""
        if self.is_running:
            logger.warning("Liveness tracker already running")
            return

        self.is_running = True
        self._check_task = asyncio.create_task(self._check_loop())

        logger.info("Liveness tracker started",
                    timeout_seconds=self.timeout_seconds,
                    check_interval_seconds=self.check_interval_seconds)

    async def stop(self) -> None:
        """Stop the periodic reassessment task."""
        if not self.is_running:
            return

        self.is_running = False

        if self._check_task:
            self._check_task.cancel()
            try:
                await self._check_task
            except asyncio.CancelledError:
                pass
            self._check_task = None

        logger.info("Liveness tracker stopped")

    async def _check_loop(self) -> None:
        """Reassess liveness every check interval until stopped."""
        while self.is_running:
            await asyncio.sleep(self.check_interval_seconds)
            try:
                self.reassess()
            except Exception as e:
                logger.error("Error in liveness check", error=str(e))

    def get_tracker_stats(self) -> Dict[str, Any]:
        """Loop state and timing settings."""
        return {
            "is_running": self.is_running,
            "timeout_seconds": self.timeout_seconds,
            "check_interval_seconds": self.check_interval_seconds,
            "check_count": self.check_count,
        }


__all__ = ["LivenessTracker"]
