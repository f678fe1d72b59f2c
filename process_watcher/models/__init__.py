"""Data models for Process Watcher."""

from .filter_policy import (
    BlacklistPolicy,
    FilterMode,
    FilterPolicy,
    UnrestrictedPolicy,
    WhitelistPolicy,
)
from .lifecycle_event import LifecycleAction, LifecycleEvent, format_timestamp
from .process_record import ProcessRecord, ProcessSnapshot
from .watch_configuration import LogLevel, OutputFormat, WatchConfiguration

__all__ = [
    "BlacklistPolicy",
    "FilterMode",
    "FilterPolicy",
    "UnrestrictedPolicy",
    "WhitelistPolicy",
    "LifecycleAction",
    "LifecycleEvent",
    "format_timestamp",
    "ProcessRecord",
    "ProcessSnapshot",
    "LogLevel",
    "OutputFormat",
    "WatchConfiguration",
]
