"""Tests for the signal handler that stops the watcher."""

import signal

from process_watcher.lib.signal_handler import SignalHandler
from process_watcher.models.watch_configuration import WatchConfiguration
from process_watcher.services.process_watcher import ProcessWatcher, WatcherState


def test_sigint_stops_watcher(make_source):
    watcher = ProcessWatcher(WatchConfiguration(), make_source({}))
    handler = SignalHandler(watcher)

    handler.handle_sigint(signal.SIGINT, None)

    assert watcher.state is WatcherState.STOPPED


def test_sigterm_interrupts_running_watch(make_source, fake_clock):
    source = make_source({}, {1: "a"}, {1: "a", 2: "b"})
    handler_holder = {}

    def waiter(seconds):
        fake_clock.wait(seconds)
        if len(fake_clock.waits) == 2:
            handler_holder["handler"].handle_sigterm(signal.SIGTERM, None)
        return False

    watcher = ProcessWatcher(WatchConfiguration(), source, clock=fake_clock, waiter=waiter)
    handler_holder["handler"] = SignalHandler(watcher)

    events = list(watcher.watch())

    assert [event.pid for event in events] == [1]
    assert watcher.state is WatcherState.STOPPED


def test_register_and_restore(make_source):
    original = signal.getsignal(signal.SIGTERM)
    watcher = ProcessWatcher(WatchConfiguration(), make_source({}))

    with SignalHandler(watcher) as handler:
        assert signal.getsignal(signal.SIGTERM) == handler.handle_sigterm

    assert signal.getsignal(signal.SIGTERM) == original
