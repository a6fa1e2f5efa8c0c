"""Core services for the telemetry monitor."""

from .telemetry_validator import validate_fields, sanitize_numeric
from .reading_store import ReadingStore, SensorChannel, Snapshot
from .liveness_tracker import LivenessTracker
from .monitor_state import MonitorState
from .ingestion import (
    IngestionCoordinator,
    IngestionResult,
    InvalidPayloadError,
    parse_payload,
)
from .query_surface import QuerySurface
from .demo_data import seed_demo_data

__all__ = [
    "validate_fields",
    "sanitize_numeric",
    "ReadingStore",
    "SensorChannel",
    "Snapshot",
    "LivenessTracker",
    "MonitorState",
    "IngestionCoordinator",
    "IngestionResult",
    "InvalidPayloadError",
    "parse_payload",
    "QuerySurface",
    "seed_demo_data",
]
