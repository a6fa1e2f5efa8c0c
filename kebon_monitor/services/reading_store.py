"""ReadingStore service holding the latest snapshot and bounded history per class."""

import threading
import time
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

import structlog

from ..models import ActuatorState, Reading, SensorClass


logger = structlog.get_logger(__name__)

Snapshot = Union[Reading, ActuatorState]

DEFAULT_HISTORY_CAPACITY = 100


class SensorChannel:
    """Latest slot plus a fixed-capacity FIFO window for one sensor class."""

    def __init__(self, sensor_type: str, capacity: int = DEFAULT_HISTORY_CAPACITY):
        """Initialize an empty channel."""
        self.sensor_type = sensor_type
        self.readings: deque = deque(maxlen=capacity)
        self.latest: Optional[Snapshot] = None
        self.lock = threading.RLock()

    def append(self, reading: Reading) -> None:
        """Replace the snapshot and append, evicting the oldest when full."""
        with self.lock:
            self.latest = reading
            self.readings.append(reading)

    def get_readings(self) -> List[Reading]:
        """Copy of the window in insertion order."""
        with self.lock:
            return list(self.readings)

    def clear(self) -> None:
        """Empty both the snapshot and the window."""
        with self.lock:
            self.latest = None
            self.readings.clear()


class ReadingStore:
    """Per-class snapshots and history for every sensor class seen so far."""

    def __init__(self,
                 capacity: int = DEFAULT_HISTORY_CAPACITY,
                 time_format: str = "%H:%M:%S",
                 date_format: str = "%d/%m/%Y",
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], datetime] = datetime.now):
        """Initialize the store with channels for the known classes."""
        self.capacity = capacity
        self.time_format = time_format
        self.date_format = date_format
        self._clock = clock
        self._wall_clock = wall_clock

        self._registry_lock = threading.Lock()
        self._channels: Dict[str, SensorChannel] = {
            name: SensorChannel(name, capacity) for name in SensorClass.wire_names()
        }

    def _channel(self, sensor_type: str) -> SensorChannel:
        """Return the channel for a class, creating dynamic ones on first use."""
        with self._registry_lock:
            channel = self._channels.get(sensor_type)
            if channel is None:
                logger.info("Registering dynamic sensor class", sensor_type=sensor_type)
                channel = SensorChannel(sensor_type, self.capacity)
                self._channels[sensor_type] = channel
            return channel

    @contextmanager
    def locked(self, sensor_type: str) -> Iterator[None]:
        """Hold the class lock across a multi-step update."""
        with self._channel(sensor_type).lock:
            yield

    def record(self,
               sensor_type: str,
               fields: Mapping[str, Any],
               device_id: Optional[str] = None) -> Reading:
        """Stamp, snapshot and append a validated reading."""
        now = self._wall_clock()
        reading = Reading(
            sensor_type=sensor_type,
            fields=dict(fields),
            captured_monotonic=self._clock(),
            unix_timestamp=int(now.timestamp() * 1000),
            timestamp=now.strftime(self.time_format),
            date=now.strftime(self.date_format),
            device_id=device_id,
        )
        self._channel(sensor_type).append(reading)
        return reading

    def set_latest(self, sensor_type: str, snapshot: Snapshot) -> None:
        """Overwrite the snapshot without touching history."""
        channel = self._channel(sensor_type)
        with channel.lock:
            channel.latest = snapshot

    def latest(self, sensor_type: str) -> Optional[Snapshot]:
        """Most recent snapshot, or None if the class has no data."""
        channel = self._channels.get(sensor_type)
        return channel.latest if channel else None

    def history(self, sensor_type: str) -> List[Reading]:
        """Copy of the bounded history, oldest first."""
        channel = self._channels.get(sensor_type)
        return channel.get_readings() if channel else []

    def has_reported(self, sensor_type: str) -> bool:
        """Weak liveness: the class holds data since its last reset."""
        return self.latest(sensor_type) is not None

    def reset(self, sensor_type: str) -> None:
        """Clear one class's snapshot and history."""
        self._channel(sensor_type).clear()
        logger.info("Sensor class reset", sensor_type=sensor_type)

    def sensor_types(self) -> List[str]:
        """Known classes followed by dynamic ones in registration order."""
        with self._registry_lock:
            return list(self._channels)


__all__ = ["ReadingStore", "SensorChannel", "Snapshot", "DEFAULT_HISTORY_CAPACITY"]
