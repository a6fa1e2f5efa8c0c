"""MonitorConfiguration data model for server, liveness and storage settings."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, computed_field


class ServerSettings(BaseModel):
    """HTTP server binding and advertised address."""

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP port")
    advertised_ip: str = Field(
        default="127.0.0.1",
        description="Address echoed back to devices and dashboards"
    )
    static_dir: Optional[str] = Field(
        default=None,
        description="Directory holding the dashboard pages"
    )


class LivenessSettings(BaseModel):
    """Device timeout and reassessment cadence."""

    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=3600.0,
        description="Silence after which the device is considered offline"
    )
    check_interval_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=600.0,
        description="Interval of the periodic offline check"
    )

    @computed_field
    @property
    def worst_case_detection_seconds(self) -> float:
        """Longest delay before a silent device is reported offline."""
        return self.timeout_seconds + self.check_interval_seconds


class StorageSettings(BaseModel):
    """History window and timestamp renderings."""

    history_capacity: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Readings retained per sensor class"
    )
    time_format: str = Field(default="%H:%M:%S", description="strftime format for time of day")
    date_format: str = Field(default="%d/%m/%Y", description="strftime format for the date")

    @field_validator('time_format', 'date_format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Reject formats without any strftime directive."""
        if "%" not in v:
            raise ValueError("format must contain at least one strftime directive")
        return v


class LoggingSettings(BaseModel):
    """Log level and renderer selection."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")
    structured: bool = Field(default=False, description="Emit JSON log lines")


class MonitorConfiguration(BaseModel):
    """Complete telemetry monitor configuration."""

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "server": {"port": 3000, "advertised_ip": "127.0.0.1"},
                "liveness": {"timeout_seconds": 30, "check_interval_seconds": 5},
                "storage": {"history_capacity": 100},
                "logging": {"level": "INFO"}
            }
        }
    }

    server: ServerSettings = Field(default_factory=ServerSettings)
    liveness: LivenessSettings = Field(default_factory=LivenessSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def export_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary for YAML/JSON serialization."""
        return self.model_dump(
            mode='json',
            exclude={"liveness": {"worst_case_detection_seconds"}}
        )
