"""QuerySurface: read-only projections over the reading store and device status."""

from datetime import datetime
from typing import Any, Dict

from .monitor_state import MonitorState


class QuerySurface:
    """Side-effect-free views used by the HTTP API and the CLI."""

    def __init__(self, state: MonitorState, advertised_ip: str = "127.0.0.1", port: int = 3000):
        """Initialize with the state to project and the address to echo."""
        self.state = state
        self.advertised_ip = advertised_ip
        self.port = port

    def _snapshot_payload(self, sensor_type: str) -> Dict[str, Any]:
        snapshot = self.state.store.latest(sensor_type)
        return snapshot.to_payload() if snapshot is not None else {}

    def latest_of(self, sensor_type: str) -> Dict[str, Any]:
        """Latest snapshot merged with the timeout-based device status."""
        response = self._snapshot_payload(sensor_type)
        response.update({
            "device_status": self.state.tracker.snapshot().to_payload(),
            "server_ip": self.advertised_ip,
            "sensor_type": sensor_type,
        })
        return response

    def all_of(self, sensor_type: str) -> Dict[str, Any]:
        """Full bounded history with its count."""
        readings = self.state.store.history(sensor_type)
        return {
            "data": [reading.to_payload() for reading in readings],
            "count": len(readings),
            "sensor_type": sensor_type,
            "server_ip": self.advertised_ip,
        }

    def health_summary(self) -> Dict[str, Any]:
        """Coarse health; device liveness comes from DeviceStatus only."""
        return {
            "status": "healthy",
            "device_status": self.state.tracker.snapshot().label,
            "server_ip": self.advertised_ip,
            "port": self.port,
            "timestamp": datetime.now().isoformat(),
        }

    def detailed_health(self) -> Dict[str, Any]:
        """Per-class breakdown using the weak has-reported signal.

        A class counts as online once it has any data since its last reset,
        however stale that data is.
        """
        store = self.state.store
        sensor_types = store.sensor_types()
        sensor_status = {
            sensor_type: "online" if store.has_reported(sensor_type) else "offline"
            for sensor_type in sensor_types
        }

        return {
            "status": "healthy",
            "server_ip": self.advertised_ip,
            "port": self.port,
            "timestamp": datetime.now().isoformat(),
            "uptime": self.state.uptime_seconds,
            "connected_sensors": sum(1 for s in sensor_status.values() if s == "online"),
            "total_sensors": len(sensor_types),
            "sensor_status": sensor_status,
            "liveness": self.state.tracker.get_tracker_stats(),
        }

    def all_status(self) -> Dict[str, Any]:
        """Weak liveness, last update and raw payload for every class."""
        store = self.state.store
        sensors = {}
        for sensor_type in store.sensor_types():
            snapshot = store.latest(sensor_type)
            sensors[sensor_type] = {
                "online": snapshot is not None,
                "lastUpdate": snapshot.unix_timestamp if snapshot is not None else None,
                "data": snapshot.to_payload() if snapshot is not None else {},
            }

        return {
            "server": "online",
            "timestamp": datetime.now().isoformat(),
            "sensors": sensors,
        }


__all__ = ["QuerySurface"]
