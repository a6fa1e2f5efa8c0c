"""Demo readings for running the dashboard without hardware."""

from typing import Any, Dict

import structlog

from ..models import PumpMode, SensorClass
from .ingestion import IngestionCoordinator
from .monitor_state import MonitorState


logger = structlog.get_logger(__name__)

DEMO_DEVICE_ID = "ESP32_DEMO"

DEMO_PAYLOADS: Dict[SensorClass, Dict[str, Any]] = {
    SensorClass.POWER: {
        "voltage": 220.4,
        "current": 1.35,
        "power": 285.2,
        "energy": 12.84,
        "frequency": 50.0,
        "power_factor": 0.96,
    },
    SensorClass.TEMPERATURE: {"suhu": 29.6, "kelembaban": 71.2, "heat_index": 33.1},
    SensorClass.PH: {"ph": 6.3},
    SensorClass.DISSOLVED_SOLIDS: {"tds": 840.0, "suhu_air": 26.4},
}


def seed_demo_data(state: MonitorState) -> None:
    """Ingest one reading per telemetry class and set the pump to manual/off."""
    coordinator = IngestionCoordinator(state)

    for sensor_class, fields in DEMO_PAYLOADS.items():
        payload = dict(fields, deviceId=DEMO_DEVICE_ID)
        coordinator.ingest(sensor_class.value, payload)

    coordinator.control_actuator("off", PumpMode.MANUAL.value)

    logger.info("Demo data initialized",
                sensors=len(DEMO_PAYLOADS),
                device_id=DEMO_DEVICE_ID)
