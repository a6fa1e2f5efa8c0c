"""DeviceStatus model for the single logical reporting device."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class DeviceStatus(BaseModel):
    """Timeout-tracked liveness of the reporting device."""

    model_config = {
        "validate_assignment": True,
        "extra": "forbid"
    }

    is_online: bool = Field(default=False, description="Device reported within the timeout")
    last_seen: Optional[int] = Field(
        default=None,
        description="Epoch milliseconds of the last accepted reading"
    )
    device_id: Optional[str] = Field(default=None, description="Sticky device identity")

    @property
    def label(self) -> str:
        """Human-readable liveness label."""
        return "online" if self.is_online else "offline"

    def to_payload(self) -> Dict[str, Any]:
        """Wire projection using the dashboard's key names."""
        return {
            "isOnline": self.is_online,
            "lastSeen": self.last_seen,
            "deviceId": self.device_id,
        }
