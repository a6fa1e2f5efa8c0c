"""Data models for the telemetry monitor."""

from .sensor_class import (
    SensorClass,
    SENSOR_FIELD_DEFAULTS,
    field_defaults_for,
    synthesize_device_id,
)
from .reading import Reading
from .device_status import DeviceStatus
from .actuator_state import ActuatorState, PumpMode, DASHBOARD_CONTROLLER
from .monitor_configuration import MonitorConfiguration

__all__ = [
    "SensorClass",
    "SENSOR_FIELD_DEFAULTS",
    "field_defaults_for",
    "synthesize_device_id",
    "Reading",
    "DeviceStatus",
    "ActuatorState",
    "PumpMode",
    "DASHBOARD_CONTROLLER",
    "MonitorConfiguration",
]
