"""Services for Process Watcher."""

from .config_manager import ConfigManager
from .process_source import ProcessSource, PsutilProcessSource, take_snapshot
from .process_watcher import ProcessWatcher, WatcherState
from .snapshot_differ import apply_filter, diff_snapshots

__all__ = [
    "ConfigManager",
    "ProcessSource",
    "PsutilProcessSource",
    "take_snapshot",
    "ProcessWatcher",
    "WatcherState",
    "apply_filter",
    "diff_snapshots",
]
