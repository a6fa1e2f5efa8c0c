"""
Contract tests for POST /api/data/{sensor_type} and POST /api/pompa/control.

Tests telemetry submission, body validation and pump control requests.
"""
import pytest

pytestmark = pytest.mark.contract


def test_submit_reading_returns_acknowledgement(client):
    """Test an accepted reading is acknowledged with device status."""
    response = client.post("/api/data/power", json={"voltage": 221.3, "current": 1.2})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Data power received OK!",
        "status": "success",
        "device_status": "online",
        "server_ip": "127.0.0.1",
    }


def test_submitted_values_are_sanitized(client):
    """Test non-numeric class fields are replaced by their defaults."""
    client.post("/api/data/ph", json={"ph": "sour", "deviceId": "ESP32_BED_3"})

    data = client.get("/api/latest/ph").json()

    assert data["ph"] == 7.0
    assert data["deviceId"] == "ESP32_BED_3"
    assert data["device_status"]["deviceId"] == "ESP32_BED_3"


def test_non_finite_literals_are_sanitized(client):
    response = client.post(
        "/api/data/tds",
        content=b'{"tds": NaN, "suhu_air": Infinity}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    data = client.get("/api/latest/tds").json()
    assert data["tds"] == 0
    assert data["suhu_air"] == 0


def test_overflowing_numbers_never_reach_responses(client):
    """Test out-of-range literals in passthrough fields are stored as null everywhere."""
    response = client.post(
        "/api/data/power",
        content=b'{"voltage": 220, "extra": 1e400, "voltage_peak": -1e999}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200

    latest = client.get("/api/latest/power")
    history = client.get("/api/all/power")
    status = client.get("/api/status/all")

    assert latest.status_code == 200
    assert latest.json()["extra"] is None
    assert latest.json()["voltage_peak"] is None
    assert latest.json()["voltage"] == 220
    assert history.json()["data"][0]["extra"] is None
    assert status.json()["sensors"]["power"]["data"]["extra"] is None


def test_overflowing_class_field_gets_default(client):
    client.post(
        "/api/data/ph",
        content=b'{"ph": 1e400}',
        headers={"Content-Type": "application/json"},
    )

    assert client.get("/api/latest/ph").json()["ph"] == 7.0


def test_dynamic_class_non_finite_values(client):
    """Test unvalidated classes never store non-finite numbers."""
    client.post(
        "/api/data/co2",
        content=b'{"ppm": 1e400, "trend": NaN, "samples": [410.5, -1e400]}',
        headers={"Content-Type": "application/json"},
    )

    latest = client.get("/api/latest/co2")

    assert latest.status_code == 200
    assert latest.json()["ppm"] is None
    assert latest.json()["trend"] is None
    assert latest.json()["samples"] == [410.5, None]


def test_falsy_device_id_uses_synthesized_identity(client):
    client.post("/api/data/suhu", json={"suhu": 28, "deviceId": 0})

    assert client.get("/api/latest/suhu").json()["device_status"]["deviceId"] == "ESP32_SUHU"


def test_empty_body_is_accepted(client):
    response = client.post("/api/data/suhu", content=b"")

    assert response.status_code == 200
    data = client.get("/api/latest/suhu").json()
    assert data["suhu"] == 0
    assert data["kelembaban"] == 0


def test_dynamic_sensor_class(client):
    """Test unknown classes are stored under their own name."""
    response = client.post("/api/data/co2", json={"ppm": 415})

    assert response.status_code == 200
    assert response.json()["message"] == "Data co2 received OK!"
    assert client.get("/api/all/co2").json()["count"] == 1


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2, 3]", b'"reading"'])
def test_malformed_body_rejected(client, body):
    """Test invalid JSON and non-object bodies return 400 without storing."""
    response = client.post(
        "/api/data/power",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid data format"
    assert data["server_ip"] == "127.0.0.1"
    assert "message" in data

    assert client.get("/api/all/power").json()["count"] == 0
    assert client.get("/api/health").json()["device_status"] == "offline"


def test_pump_control(client):
    """Test pump control records the desired state."""
    response = client.post("/api/pompa/control", json={"action": "on", "mode": "auto"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["message"] == "Pump turned on"
    assert data["data"]["status"] is True
    assert data["data"]["mode"] == "auto"
    assert data["data"]["controlled_by"] == "web-dashboard"

    latest = client.get("/api/latest/pompa").json()
    assert latest["status"] is True
    assert latest["mode"] == "auto"


def test_pump_control_defaults_to_manual(client):
    data = client.post("/api/pompa/control", json={"action": "off"}).json()

    assert data["message"] == "Pump turned off"
    assert data["data"]["status"] is False
    assert data["data"]["mode"] == "manual"


def test_pump_control_does_not_affect_liveness(client):
    """Test actuator commands are not device telemetry."""
    client.post("/api/pompa/control", json={"action": "on"})

    assert client.get("/api/health").json()["device_status"] == "offline"
    assert client.get("/api/all/pompa").json()["count"] == 0


@pytest.mark.parametrize("body", [
    {"action": "maybe"},
    {"action": "on", "mode": "turbo"},
    {},
])
def test_pump_control_rejects_invalid_requests(client, body):
    response = client.post("/api/pompa/control", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid data format"


def test_pump_control_rejects_invalid_json(client):
    response = client.post(
        "/api/pompa/control",
        content=b"{action",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_cors_headers(client):
    """Test dashboards on other origins may call the API."""
    response = client.get("/api/health", headers={"Origin": "http://dashboard.local"})

    assert response.headers["access-control-allow-origin"] == "*"
