"""Signal handling utilities for graceful shutdown."""

from __future__ import annotations

import signal
from types import FrameType
from typing import Callable, Dict, Optional

from ..services.process_watcher import ProcessWatcher
from ..utils.logging import get_logger


class SignalHandler:
    """Stop a process watcher when SIGINT or SIGTERM arrives."""

    def __init__(self, watcher: ProcessWatcher):
        self.watcher = watcher
        self.logger = get_logger(__name__)
        self._original_handlers: Dict[int, Callable] = {}
        self._registered = False

    def register(self) -> None:
        """Register SIGINT and SIGTERM handlers."""
        if self._registered:
            return

        for sig, handler in (
            (signal.SIGINT, self.handle_sigint),
            (signal.SIGTERM, self.handle_sigterm),
        ):
            self._original_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, handler)  # type: ignore[arg-type]

        self._registered = True

    def restore(self) -> None:
        """Restore previously registered handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()
        self._registered = False

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        """Handle SIGINT (Ctrl+C)."""
        self._shutdown("SIGINT", signum)

    def handle_sigterm(self, signum: int, frame: Optional[FrameType]) -> None:
        """Handle SIGTERM."""
        self._shutdown("SIGTERM", signum)

    def _shutdown(self, name: str, signum: int) -> None:
        self.logger.info(f"{name} received - stopping watcher", signal=signum)
        self.watcher.stop()

    def __enter__(self) -> "SignalHandler":
        self.register()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.restore()
