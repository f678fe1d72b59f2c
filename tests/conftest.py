"""Shared fixtures: path adjustments, fake process sources and a fake clock."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from process_watcher.exceptions import ProcessEnumerationError  # noqa: E402
from process_watcher.models.process_record import ProcessRecord  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: tests that watch the real process table"
    )


class FakeClock:
    """Clock whose time only moves when the watcher waits."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)
        self.waits: List[float] = []

    def __call__(self) -> datetime:
        return self.now

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        self.now += timedelta(seconds=seconds)
        return False


class FakeProcessSource:
    """Returns one synthetic process table per call, repeating the last one."""

    def __init__(self, tables: List[Dict[int, str]], clock: Optional[FakeClock] = None):
        self.tables = [dict(table) for table in tables]
        self.clock = clock
        self.calls = 0
        self.call_times: List[datetime] = []
        self.fail_on_call: Optional[int] = None

    def list_processes(self) -> List[ProcessRecord]:
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise ProcessEnumerationError("Access denied listing processes")
        if self.clock is not None:
            self.call_times.append(self.clock())
        table = self.tables[min(self.calls - 1, len(self.tables) - 1)]
        return [ProcessRecord(pid=pid, name=name) for pid, name in table.items()]

    def __str__(self) -> str:
        return "FakeProcessSource()"


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_source(fake_clock):
    """Factory building a FakeProcessSource bound to the fake clock."""

    def _make(*tables: Dict[int, str]) -> FakeProcessSource:
        return FakeProcessSource(list(tables), clock=fake_clock)

    return _make


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop handlers installed by configure_logging during a test."""
    yield
    logger = logging.getLogger("process_watcher")
    for handler in list(logger.handlers):
        if getattr(handler, "_process_watcher_handler", False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
