"""LifecycleEvent model for process creation and termination.

Represents a single change in the process table detected between two
snapshots, with the timestamp of the snapshot that revealed it.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .process_record import ProcessRecord


class LifecycleAction(str, Enum):
    """What happened to a process between two snapshots."""

    CREATED = "created"
    CLOSED = "closed"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ``yyyy-MM-dd HH:mm:ss.ff`` (hundredths)."""
    hundredths = value.microsecond // 10000
    return f"{value:%Y-%m-%d %H:%M:%S}.{hundredths:02d}"


class LifecycleEvent(BaseModel):
    """Model representing a detected process lifecycle change."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=datetime.now)
    process: ProcessRecord
    action: LifecycleAction

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def name(self) -> str:
        return self.process.name

    def is_created(self) -> bool:
        return self.action is LifecycleAction.CREATED

    def is_closed(self) -> bool:
        return self.action is LifecycleAction.CLOSED

    def render(self) -> str:
        """Default textual rendering used by the CLI."""
        return (
            f"[{format_timestamp(self.timestamp)}] "
            f"{self.process.name} ({self.process.pid}) "
            f"has been {self.action.value}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return JSON-serializable representation."""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "name": self.process.name,
            "pid": self.process.pid,
            "action": self.action.value,
        }

    def __str__(self) -> str:
        return self.render()
