"""ActuatorState model for the pump."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, Field


class PumpMode(str, Enum):
    """Pump operating modes."""

    MANUAL = "manual"
    AUTO = "auto"


# Tag recorded on every state change issued through the HTTP API
DASHBOARD_CONTROLLER = "web-dashboard"


class ActuatorState(BaseModel):
    """Desired pump state; recorded, not enforced."""

    model_config = {
        "frozen": True,
        "extra": "forbid"
    }

    status: bool = Field(default=False, description="True when the pump should run")
    mode: PumpMode = Field(default=PumpMode.MANUAL)
    last_updated: datetime = Field(default_factory=datetime.now)
    controlled_by: str = Field(default=DASHBOARD_CONTROLLER)

    @property
    def unix_timestamp(self) -> int:
        """Last update as epoch milliseconds."""
        return int(self.last_updated.timestamp() * 1000)

    def to_payload(self) -> Dict[str, Any]:
        """Wire projection of the pump state."""
        return {
            "status": self.status,
            "mode": self.mode.value,
            "last_updated": self.last_updated.isoformat(),
            "controlled_by": self.controlled_by,
        }
