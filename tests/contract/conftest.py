"""Fixtures for CLI contract tests."""

import pytest
from click.testing import CliRunner

from process_watcher.services.config_manager import ConfigManager


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PROCESS_WATCHER_* variables of the host out of the CLI."""
    for env_var in ConfigManager.ENV_VAR_MAPPING:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def fake_source(monkeypatch, make_source):
    """Route the CLI's process listing through a FakeProcessSource."""

    def install(module, *tables):
        source = make_source(*tables)
        monkeypatch.setattr(module, "PsutilProcessSource", lambda: source)
        return source

    return install
