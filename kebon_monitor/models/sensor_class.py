"""Sensor class catalogue and per-class telemetry field defaults."""

from enum import Enum
from typing import Dict, List, Optional


class SensorClass(str, Enum):
    """Fixed telemetry/actuator categories, valued by their wire names."""

    POWER = "power"
    TEMPERATURE = "suhu"
    PH = "ph"
    DISSOLVED_SOLIDS = "tds"
    PUMP = "pompa"

    @classmethod
    def resolve(cls, sensor_type: str) -> Optional["SensorClass"]:
        """Return the member for a wire name, or None for dynamic classes."""
        try:
            return cls(sensor_type)
        except ValueError:
            return None

    @classmethod
    def wire_names(cls) -> List[str]:
        """Wire names of all known classes in declaration order."""
        return [member.value for member in cls]


# Numeric telemetry fields and the value substituted when a reading is unusable.
# pH falls back to neutral rather than zero.
SENSOR_FIELD_DEFAULTS: Dict[SensorClass, Dict[str, float]] = {
    SensorClass.POWER: {
        "voltage": 0,
        "current": 0,
        "power": 0,
        "energy": 0,
        "frequency": 0,
        "power_factor": 0,
    },
    SensorClass.TEMPERATURE: {
        "suhu": 0,
        "kelembaban": 0,
        "heat_index": 0,
    },
    SensorClass.PH: {
        "ph": 7.0,
    },
    SensorClass.DISSOLVED_SOLIDS: {
        "tds": 0,
        "suhu_air": 0,
    },
    SensorClass.PUMP: {},
}

# Prefix used when a device reports without declaring its own identity
DEVICE_FAMILY_PREFIX = "ESP32"


def field_defaults_for(sensor_type: str) -> Dict[str, float]:
    """Numeric field defaults for a wire name; empty for pump and dynamic classes."""
    sensor_class = SensorClass.resolve(sensor_type)
    if sensor_class is None:
        return {}
    return SENSOR_FIELD_DEFAULTS[sensor_class]


def synthesize_device_id(sensor_type: str) -> str:
    """Build the fallback device identity for a reporting class."""
    return f"{DEVICE_FAMILY_PREFIX}_{sensor_type.upper()}"
