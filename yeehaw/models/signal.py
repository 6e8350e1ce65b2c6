"""Session status signal models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    """Activity state of one work pane."""

    WORKING = "working"
    WAITING = "waiting"
    IDLE = "idle"
    ERROR = "error"


STATUS_ICONS: dict[SessionStatus, str] = {
    SessionStatus.WORKING: "⠿",
    SessionStatus.WAITING: "◆",
    SessionStatus.IDLE: "○",
    SessionStatus.ERROR: "✖",
}


def status_icon(status: SessionStatus) -> str:
    """Get the display glyph for a status."""
    return STATUS_ICONS[status]


@dataclass(frozen=True)
class SignalRecord:
    """Signal written by the session-status hook.

    updated is epoch seconds, as stored on disk.
    """

    status: SessionStatus
    updated: int

    @property
    def updated_ms(self) -> int:
        """Update time in epoch milliseconds."""
        return self.updated * 1000

    @classmethod
    def from_dict(cls, data: Any) -> "SignalRecord":
        """Validate a decoded signal body.

        Raises:
            ValueError: If the body is not a valid signal
        """
        if not isinstance(data, Mapping):
            raise ValueError("signal body is not an object")
        updated = data.get("updated")
        if (
            isinstance(updated, bool)
            or not isinstance(updated, int | float)
            or (isinstance(updated, float) and not math.isfinite(updated))
        ):
            raise ValueError(f"invalid updated value: {updated!r}")
        return cls(status=SessionStatus(data.get("status")), updated=int(updated))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk body."""
        return {"status": self.status.value, "updated": self.updated}
