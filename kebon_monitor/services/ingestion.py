"""IngestionCoordinator: validation, storage and liveness for incoming telemetry."""

import json
import math
from typing import Any, Dict, Mapping, NamedTuple, Optional, Union

import structlog

from ..models import ActuatorState, DeviceStatus, PumpMode, Reading, SensorClass
from .monitor_state import MonitorState
from .telemetry_validator import validate_fields


logger = structlog.get_logger(__name__)

# Payload key carrying the reporting device's own identity
DEVICE_ID_FIELD = "deviceId"


class InvalidPayloadError(ValueError):
    """Raised when a request body cannot be read as a JSON object."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IngestionResult(NamedTuple):
    """Outcome of an accepted reading."""

    reading: Reading
    device_status: DeviceStatus


def _finite_or_none(literal: str) -> Optional[float]:
    value = float(literal)
    return value if math.isfinite(value) else None


def parse_payload(body: Union[bytes, str]) -> Dict[str, Any]:
    """Decode a request body into a JSON object; an empty body is {}.

    Raises InvalidPayloadError for undecodable bytes, invalid JSON or a
    top-level value that is not an object.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPayloadError(str(e)) from e

    if not body.strip():
        return {}

    try:
        # non-finite numbers become null so they can never reach a response
        payload = json.loads(
            body,
            parse_float=_finite_or_none,
            parse_constant=lambda _: None,
        )
    except json.JSONDecodeError as e:
        raise InvalidPayloadError(str(e)) from e

    if not isinstance(payload, dict):
        raise InvalidPayloadError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


class IngestionCoordinator:
    """Runs validation, storage and liveness updates as one atomic step."""

    def __init__(self, state: MonitorState):
        self.state = state

    def ingest(self, sensor_type: str, payload: Mapping[str, Any]) -> IngestionResult:
        """Accept a reading for any class, known or dynamic."""
        fields = validate_fields(sensor_type, payload)
        declared_id = payload.get(DEVICE_ID_FIELD)
        if not declared_id:
            declared_id = None
        elif not isinstance(declared_id, str):
            declared_id = str(declared_id)

        store = self.state.store
        tracker = self.state.tracker

        # class lock first, then device lock; the reassessment loop only takes the latter
        with store.locked(sensor_type), tracker.locked():
            status = tracker.mark_seen(sensor_type, declared_id)
            reading = store.record(sensor_type, fields, device_id=status.device_id)

        logger.debug("Reading recorded", reading=str(reading), device_id=status.device_id)
        return IngestionResult(reading=reading, device_status=status)

    def control_actuator(self, action: str, mode: Optional[str] = None) -> ActuatorState:
        """Overwrite the pump's desired state; liveness and history are untouched."""
        actuator_state = ActuatorState(
            status=action == "on",
            mode=PumpMode(mode) if mode else PumpMode.MANUAL,
        )
        self.state.store.set_latest(SensorClass.PUMP.value, actuator_state)

        logger.info("Pump control",
                    action=action,
                    mode=actuator_state.mode.value,
                    controlled_by=actuator_state.controlled_by)
        return actuator_state


__all__ = [
    "IngestionCoordinator",
    "IngestionResult",
    "InvalidPayloadError",
    "parse_payload",
    "DEVICE_ID_FIELD",
]
