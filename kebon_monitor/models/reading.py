"""Reading data model for accepted telemetry."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, computed_field


class Reading(BaseModel):
    """Accepted telemetry reading with capture stamps and device identity."""

    model_config = {
        "frozen": True,
        "extra": "forbid"
    }

    sensor_type: str = Field(description="Wire name of the reporting sensor class")
    fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Validated payload fields"
    )

    # Capture stamps
    captured_monotonic: float = Field(description="Monotonic ingestion instant")
    unix_timestamp: int = Field(description="Wall-clock capture time in epoch milliseconds")
    timestamp: str = Field(description="Local time-of-day rendering")
    date: str = Field(description="Local date rendering")

    device_id: Optional[str] = Field(default=None, description="Device identity at capture")

    @computed_field
    @property
    def field_count(self) -> int:
        """Number of payload fields carried by this reading."""
        return len(self.fields)

    def to_payload(self) -> Dict[str, Any]:
        """Flat wire projection consumed by dashboards."""
        payload = dict(self.fields)
        payload.update({
            "timestamp": self.timestamp,
            "date": self.date,
            "deviceId": self.device_id,
            "unix_timestamp": self.unix_timestamp,
        })
        return payload

    def __str__(self) -> str:
        """String representation for logging."""
        return f"{self.sensor_type}@{self.timestamp} ({self.field_count} fields)"
