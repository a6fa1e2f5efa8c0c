"""Unit tests for data models."""

import pytest
from datetime import datetime
from pydantic import ValidationError

from kebon_monitor.models import (
    ActuatorState,
    DeviceStatus,
    MonitorConfiguration,
    PumpMode,
    Reading,
    SensorClass,
    field_defaults_for,
    synthesize_device_id,
)


def make_reading(**overrides):
    values = dict(
        sensor_type="ph",
        fields={"ph": 6.5},
        captured_monotonic=10.0,
        unix_timestamp=1700000000000,
        timestamp="10:15:00",
        date="14/11/2023",
        device_id="ESP32_PH",
    )
    values.update(overrides)
    return Reading(**values)


class TestSensorClass:
    """Test the sensor class catalogue."""

    def test_wire_names(self):
        """Test known classes use their wire names."""
        assert SensorClass.wire_names() == ["power", "suhu", "ph", "tds", "pompa"]

    def test_resolve_known_and_dynamic(self):
        """Test resolving wire names."""
        assert SensorClass.resolve("suhu") is SensorClass.TEMPERATURE
        assert SensorClass.resolve("co2") is None
        assert SensorClass.resolve("PH") is None

    def test_field_defaults(self):
        """Test per-class defaults."""
        assert field_defaults_for("ph") == {"ph": 7.0}
        assert set(field_defaults_for("tds")) == {"tds", "suhu_air"}
        assert field_defaults_for("pompa") == {}
        assert field_defaults_for("co2") == {}

    def test_synthesized_device_id(self):
        """Test fallback identity format."""
        assert synthesize_device_id("power") == "ESP32_POWER"
        assert synthesize_device_id("co2") == "ESP32_CO2"


class TestReading:
    """Test Reading model."""

    def test_payload_projection(self):
        """Test flat wire projection."""
        payload = make_reading().to_payload()

        assert payload == {
            "ph": 6.5,
            "timestamp": "10:15:00",
            "date": "14/11/2023",
            "deviceId": "ESP32_PH",
            "unix_timestamp": 1700000000000,
        }

    def test_stamps_override_payload_keys(self):
        """Test capture stamps win over same-named payload fields."""
        reading = make_reading(fields={"ph": 6.5, "timestamp": "bogus"})
        assert reading.to_payload()["timestamp"] == "10:15:00"

    def test_field_count(self):
        assert make_reading(fields={"a": 1, "b": 2}).field_count == 2

    def test_reading_is_immutable(self):
        """Test readings cannot be modified once stored."""
        reading = make_reading()
        with pytest.raises(ValidationError):
            reading.device_id = "other"

    def test_str(self):
        assert str(make_reading()) == "ph@10:15:00 (1 fields)"


class TestDeviceStatus:
    """Test DeviceStatus model."""

    def test_defaults(self):
        """Test a fresh status is offline and anonymous."""
        status = DeviceStatus()

        assert status.is_online is False
        assert status.last_seen is None
        assert status.device_id is None
        assert status.label == "offline"

    def test_payload_keys(self):
        status = DeviceStatus(is_online=True, last_seen=123, device_id="ESP32_A")

        assert status.label == "online"
        assert status.to_payload() == {"isOnline": True, "lastSeen": 123, "deviceId": "ESP32_A"}


class TestActuatorState:
    """Test ActuatorState model."""

    def test_defaults(self):
        state = ActuatorState()

        assert state.status is False
        assert state.mode == PumpMode.MANUAL
        assert state.controlled_by == "web-dashboard"

    def test_payload(self):
        """Test pump wire projection."""
        updated = datetime(2024, 5, 1, 8, 30, 0)
        state = ActuatorState(status=True, mode=PumpMode.AUTO, last_updated=updated)

        assert state.to_payload() == {
            "status": True,
            "mode": "auto",
            "last_updated": "2024-05-01T08:30:00",
            "controlled_by": "web-dashboard",
        }
        assert state.unix_timestamp == int(updated.timestamp() * 1000)

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            ActuatorState(mode="turbo")


class TestMonitorConfiguration:
    """Test MonitorConfiguration model."""

    def test_defaults(self):
        """Test default configuration."""
        config = MonitorConfiguration()

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.server.advertised_ip == "127.0.0.1"
        assert config.server.static_dir is None
        assert config.liveness.timeout_seconds == 30.0
        assert config.liveness.check_interval_seconds == 5.0
        assert config.liveness.worst_case_detection_seconds == 35.0
        assert config.storage.history_capacity == 100
        assert config.logging.level == "INFO"

    def test_validation(self):
        """Test range and format checks."""
        with pytest.raises(ValidationError):
            MonitorConfiguration(server={"port": 0})

        with pytest.raises(ValidationError):
            MonitorConfiguration(liveness={"timeout_seconds": -1})

        with pytest.raises(ValidationError):
            MonitorConfiguration(storage={"history_capacity": 0})

        with pytest.raises(ValidationError):
            MonitorConfiguration(storage={"time_format": "HH:MM"})

        with pytest.raises(ValidationError):
            MonitorConfiguration(logging={"level": "VERBOSE"})

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            MonitorConfiguration(mqtt={"broker": "localhost"})

    def test_validate_assignment(self):
        config = MonitorConfiguration()
        with pytest.raises(ValidationError):
            config.logging = {"level": "LOUD"}

    def test_export_dict(self):
        """Test export omits derived values."""
        exported = MonitorConfiguration().export_dict()

        assert set(exported) == {"server", "liveness", "storage", "logging"}
        assert "worst_case_detection_seconds" not in exported["liveness"]
        assert MonitorConfiguration(**exported) == MonitorConfiguration()
