"""Process Watcher - report processes as they are created and closed."""

__version__ = "1.0.0"

from .exceptions import (
    ConfigValidationError,
    ProcessEnumerationError,
    WatcherException,
    WatcherStateError,
)
from .models import LifecycleAction, LifecycleEvent, ProcessRecord, WatchConfiguration
from .services import ProcessWatcher, PsutilProcessSource

__all__ = [
    "__version__",
    "ConfigValidationError",
    "ProcessEnumerationError",
    "WatcherException",
    "WatcherStateError",
    "LifecycleAction",
    "LifecycleEvent",
    "ProcessRecord",
    "WatchConfiguration",
    "ProcessWatcher",
    "PsutilProcessSource",
]
