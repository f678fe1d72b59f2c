"""ProcessRecord and ProcessSnapshot models.

A ProcessRecord is one OS process as observed at snapshot time; a
ProcessSnapshot is the whole process table captured at one instant.
Both are immutable once built so they can be handed across threads.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProcessRecord(BaseModel):
    """One process observed in a snapshot."""

    model_config = ConfigDict(frozen=True)

    pid: int = Field(..., ge=0)
    name: str = Field(default="")

    @field_validator("name", mode="before")
    def normalize_name(cls, value):
        """Processes whose name cannot be read are recorded with an empty name."""
        if value is None:
            return ""
        return str(value)

    def __str__(self) -> str:
        return f"{self.name} ({self.pid})"


@dataclass(frozen=True)
class ProcessSnapshot:
    """Point-in-time mapping of process id to ProcessRecord."""

    taken_at: datetime
    records: Mapping[int, ProcessRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_records(
        cls, records: Iterable[ProcessRecord], taken_at: Optional[datetime] = None
    ) -> "ProcessSnapshot":
        """Build a snapshot; a pid listed twice keeps its last record."""
        table = {record.pid: record for record in records}
        return cls(
            taken_at=taken_at or datetime.now(),
            records=MappingProxyType(table),
        )

    def ids(self) -> Set[int]:
        """Return the set of process ids in this snapshot."""
        return set(self.records.keys())

    def get(self, pid: int) -> Optional[ProcessRecord]:
        return self.records.get(pid)

    def __contains__(self, pid: object) -> bool:
        return pid in self.records

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)
