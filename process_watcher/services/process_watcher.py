"""ProcessWatcher service - polls the process table and emits lifecycle events.

Each cycle waits for the watch interval, snapshots the process table,
diffs it against the previous snapshot, filters the resulting events and
hands them to the consumer before the next snapshot is taken.
"""

import queue
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..exceptions import ProcessEnumerationError, WatcherStateError
from ..models.lifecycle_event import LifecycleEvent
from ..models.process_record import ProcessSnapshot
from ..models.watch_configuration import WatchConfiguration
from ..utils.logging import get_logger
from .process_source import ProcessSource, PsutilProcessSource, take_snapshot
from .snapshot_differ import apply_filter, diff_snapshots


class WatcherState(Enum):
    """Process watcher lifecycle states."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


EventCallback = Callable[[LifecycleEvent], None]


class ProcessWatcher:
    """Service watching the process table for created and closed processes.

    The watcher is single use: once its watch loop has started it cannot be
    started again. Create a new watcher to resume after a stop or failure.
    """

    def __init__(
        self,
        config: Optional[WatchConfiguration] = None,
        source: Optional[ProcessSource] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        waiter: Optional[Callable[[float], Any]] = None,
    ):
        """Initialize the process watcher.

        Args:
            config: Validated watch configuration (defaults to unrestricted)
            source: Process listing collaborator (defaults to psutil)
            clock: Returns the current time; used to stamp snapshots
            waiter: Sleeps for the given seconds between cycles and returns
                a truthy value when the watch should stop. Defaults to an
                interruptible wait on the watcher's stop event.
        """
        self.config = config or WatchConfiguration.create_default()
        self.source = source or PsutilProcessSource()
        self.policy = self.config.build_filter_policy()
        self.logger = get_logger(__name__)

        self._clock = clock or datetime.now
        self._stop_event = threading.Event()
        self._waiter = waiter or self._stop_event.wait
        self._lock = threading.RLock()

        self._state = WatcherState.IDLE
        self._watch_started = False
        self._previous: Optional[ProcessSnapshot] = None

        self.started_at: Optional[datetime] = None
        self.cycle_count = 0
        self.event_count = 0
        self.error: Optional[Exception] = None

        # Background mode
        self._thread: Optional[threading.Thread] = None
        self._callbacks: List[EventCallback] = []
        self._events: "queue.Queue[LifecycleEvent]" = queue.Queue()

    @classmethod
    def from_options(
        cls, source: Optional[ProcessSource] = None, **options: Any
    ) -> "ProcessWatcher":
        """Build a watcher from raw options.

        Raises:
            ConfigValidationError: If the options are invalid or mix
                whitelist and blacklist fields
        """
        return cls(WatchConfiguration.build(**options), source)

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def previous_snapshot(self) -> Optional[ProcessSnapshot]:
        return self._previous

    def is_running(self) -> bool:
        return self._state is WatcherState.RUNNING

    # ------------------------------------------------------------------ #
    # Polling
    # ------------------------------------------------------------------ #

    def initialize(self) -> ProcessSnapshot:
        """Take the initial snapshot and enter the running state.

        Raises:
            WatcherStateError: If the watcher was already initialized
            ProcessEnumerationError: If the process table cannot be listed
        """
        with self._lock:
            if self._state is not WatcherState.IDLE:
                raise WatcherStateError(
                    "Watcher has already been initialized",
                    details={"state": self._state.value},
                )
            self._state = WatcherState.INITIALIZING

        snapshot = self._take_snapshot()

        with self._lock:
            self._previous = snapshot
            self.started_at = self._clock()
            self._state = WatcherState.RUNNING

        self.logger.info(
            "Process watcher started",
            interval_ms=self.config.watch_interval,
            filter_mode=self.config.filter_mode.value,
            process_count=len(snapshot),
        )
        return snapshot

    def poll_once(self) -> List[LifecycleEvent]:
        """Run one snapshot/diff/filter step against the previous snapshot.

        Returns:
            Filtered events for this cycle

        Raises:
            WatcherStateError: If the watcher is not running
            ProcessEnumerationError: If the process table cannot be listed
        """
        if self._state is not WatcherState.RUNNING or self._previous is None:
            raise WatcherStateError(
                "Watcher is not running", details={"state": self._state.value}
            )

        current = self._take_snapshot()
        candidates = diff_snapshots(self._previous, current)
        events = apply_filter(candidates, self.policy)

        self._previous = current
        self.cycle_count += 1
        self.event_count += len(events)

        self.logger.debug(
            "Watch cycle completed",
            cycle=self.cycle_count,
            process_count=len(current),
            changes=len(candidates),
            emitted=len(events),
        )
        return events

    def watch(self, max_cycles: Optional[int] = None) -> Iterator[LifecycleEvent]:
        """Start watching and return the lazy, unbounded event stream.

        The stream ends when :meth:`stop` is called, when the waiter reports
        cancellation, after ``max_cycles`` polling cycles if given, or when
        the consumer closes it. An enumeration failure is raised from the
        stream and leaves the watcher FAILED.

        Raises:
            WatcherStateError: If the watch loop was started before or the
                watcher is already stopped
        """
        with self._lock:
            if self._watch_started or self._state in (
                WatcherState.STOPPED,
                WatcherState.FAILED,
            ):
                raise WatcherStateError(
                    "A process watcher cannot be restarted",
                    details={"state": self._state.value},
                )
            self._watch_started = True
        return self._watch_loop(max_cycles)

    def _watch_loop(self, max_cycles: Optional[int]) -> Iterator[LifecycleEvent]:
        if self._state is WatcherState.IDLE:
            if self._stop_event.is_set():
                with self._lock:
                    self._state = WatcherState.STOPPED
                return
            self.initialize()

        try:
            cycles = 0
            while not self._stop_event.is_set():
                if max_cycles is not None and cycles >= max_cycles:
                    break
                if self._wait_for_next_cycle():
                    break
                cycles += 1
                for event in self.poll_once():
                    yield event
        finally:
            with self._lock:
                if self._state is WatcherState.RUNNING:
                    self._state = WatcherState.STOPPED
                    self.logger.info(
                        "Process watcher stopped",
                        cycles=self.cycle_count,
                        events=self.event_count,
                    )

    def _wait_for_next_cycle(self) -> bool:
        """Sleep for the watch interval; True means stop watching."""
        cancelled = self._waiter(self.config.interval_seconds)
        return bool(cancelled) or self._stop_event.is_set()

    def _take_snapshot(self) -> ProcessSnapshot:
        try:
            return take_snapshot(self.source, self._clock)
        except ProcessEnumerationError as exc:
            with self._lock:
                self._state = WatcherState.FAILED
                self.error = exc
            self.logger.error(
                "Process enumeration failed", error=str(exc), cycle=self.cycle_count
            )
            raise

    def stop(self) -> None:
        """Request cancellation; the running loop exits at its next wait."""
        self._stop_event.set()
        with self._lock:
            if self._state is WatcherState.IDLE and not self._watch_started:
                self._state = WatcherState.STOPPED

    # ------------------------------------------------------------------ #
    # Background mode
    # ------------------------------------------------------------------ #

    def add_event_callback(self, callback: EventCallback) -> None:
        """Register a callback invoked for every event in background mode."""
        self._callbacks.append(callback)

    def start(
        self,
        on_event: Optional[EventCallback] = None,
        max_cycles: Optional[int] = None,
    ) -> threading.Thread:
        """Run the watch loop on a daemon thread.

        The initial snapshot is taken before this method returns, so any
        process launched afterwards is reported as created. Events go to
        the registered callbacks; when no callback is registered they are
        queued for :meth:`get_event`.

        Raises:
            WatcherStateError: If the watcher was already started
            ProcessEnumerationError: If the initial snapshot fails
        """
        events = self.watch(max_cycles)
        if self._state is WatcherState.IDLE:
            self.initialize()
        if on_event is not None:
            self.add_event_callback(on_event)

        self._thread = threading.Thread(
            target=self._run_background,
            args=(events,),
            name="process-watcher",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def _run_background(self, events: Iterator[LifecycleEvent]) -> None:
        try:
            for event in events:
                self._dispatch(event)
        except Exception as exc:
            with self._lock:
                self.error = exc
                self._state = WatcherState.FAILED

    def _dispatch(self, event: LifecycleEvent) -> None:
        if not self._callbacks:
            self._events.put(event)
            return

        for callback in list(self._callbacks):
            try:
                callback(event)
            except Exception as exc:
                self.logger.exception(
                    "Event callback failed", error=str(exc), pid=event.pid
                )

    def get_event(self, timeout: Optional[float] = None) -> Optional[LifecycleEvent]:
        """Return the next queued event, or None if none arrives in time."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the background loop to finish.

        Returns:
            True if the loop has finished

        Raises:
            Exception: The error that terminated the background loop
        """
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                return False
        if self.error is not None:
            raise self.error
        return True

    # ------------------------------------------------------------------ #
    # Reporting
    # ------------------------------------------------------------------ #

    def get_status(self) -> Dict[str, Any]:
        """Return a summary of the watcher's progress."""
        return {
            "state": self._state.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "interval_ms": self.config.watch_interval,
            "filter_mode": self.config.filter_mode.value,
            "cycles": self.cycle_count,
            "events": self.event_count,
            "process_count": len(self._previous) if self._previous else 0,
            "error": str(self.error) if self.error else None,
        }

    def __str__(self) -> str:
        return (
            f"ProcessWatcher("
            f"state={self._state.value}, "
            f"interval={self.config.watch_interval}ms, "
            f"mode={self.config.filter_mode.value}, "
            f"source={self.source}"
            f")"
        )
