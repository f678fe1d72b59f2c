"""Filter policies deciding which lifecycle events are emitted.

Exactly one policy is active for a watcher: unrestricted, a whitelist of
names/ids, or a blacklist of names/ids.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Union

from .process_record import ProcessRecord


class FilterMode(str, Enum):
    """Available filter modes."""

    UNRESTRICTED = "unrestricted"
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"


@dataclass(frozen=True)
class UnrestrictedPolicy:
    """Every event passes."""

    mode: FilterMode = field(default=FilterMode.UNRESTRICTED, init=False)

    def allows(self, record: ProcessRecord) -> bool:
        return True


@dataclass(frozen=True)
class WhitelistPolicy:
    """Only processes matching every non-empty dimension pass.

    An empty name set or id set does not restrict that dimension, so a
    whitelist with both sets empty lets everything through.
    """

    names: FrozenSet[str] = frozenset()
    ids: FrozenSet[int] = frozenset()
    mode: FilterMode = field(default=FilterMode.WHITELIST, init=False)

    def allows(self, record: ProcessRecord) -> bool:
        name_ok = not self.names or record.name in self.names
        id_ok = not self.ids or record.pid in self.ids
        return name_ok and id_ok


@dataclass(frozen=True)
class BlacklistPolicy:
    """Processes matching any excluded name or id are dropped."""

    names: FrozenSet[str] = frozenset()
    ids: FrozenSet[int] = frozenset()
    mode: FilterMode = field(default=FilterMode.BLACKLIST, init=False)

    def allows(self, record: ProcessRecord) -> bool:
        return record.name not in self.names and record.pid not in self.ids


FilterPolicy = Union[UnrestrictedPolicy, WhitelistPolicy, BlacklistPolicy]
