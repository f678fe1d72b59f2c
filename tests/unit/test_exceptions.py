"""Unit tests for custom exceptions."""

import pytest

from process_watcher.exceptions import (
    ConfigurationException,
    ConfigValidationError,
    InvalidConfigError,
    ProcessEnumerationError,
    ProcessException,
    WatcherException,
    WatcherStateError,
    with_context,
)
from process_watcher.models.watch_configuration import WatchConfiguration


class TestWatcherException:
    """Test base WatcherException class."""

    def test_exception_with_message_only(self):
        """Test exception creation with message only."""
        exc = WatcherException("Test error")
        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.details is None

    def test_exception_with_details(self):
        """Test exception creation with details."""
        details = {"key": "value", "count": 42}
        exc = WatcherException("Test error", details=details)
        assert exc.details == details
        assert "Details:" in str(exc)
        assert "key" in str(exc)


class TestHierarchy:
    """Test the exception hierarchy used by callers to tell errors apart."""

    @pytest.mark.parametrize(
        "exc_class, parent",
        [
            (ConfigValidationError, ConfigurationException),
            (InvalidConfigError, ConfigurationException),
            (ProcessEnumerationError, ProcessException),
            (WatcherStateError, WatcherException),
        ],
    )
    def test_subclasses(self, exc_class, parent):
        exc = exc_class("boom")
        assert isinstance(exc, parent)
        assert isinstance(exc, WatcherException)

    def test_enumeration_error_is_not_configuration_error(self):
        assert not isinstance(
            ProcessEnumerationError("boom"), ConfigurationException
        )


class TestExceptionContext:
    """Test exception context enhancement."""

    def test_with_context_merges_existing_details(self):
        exc = ProcessEnumerationError("Error", details={"original": "value"})
        enhanced = with_context(exc, {"cycle": 3})

        assert enhanced is exc
        assert enhanced.details == {"original": "value", "cycle": 3}

    def test_with_context_on_configuration_error(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            WatchConfiguration.build(WatchInterval=0)

        enhanced = with_context(exc_info.value, {"source": "cli"})

        assert enhanced.details["source"] == "cli"
        assert enhanced.details["errors"][0]["field"] in ("WatchInterval", "watch_interval")

    def test_with_context_keeps_non_mapping_details(self):
        exc = WatcherStateError("Error", details=["a", "b"])
        enhanced = with_context(exc, {"cycle": 1})

        assert enhanced.details == {"details": ["a", "b"], "cycle": 1}

    def test_with_context_on_standard_exception(self):
        """Test with_context on non-WatcherException returns unchanged."""
        exc = ValueError("Standard error")
        result = with_context(exc, {"key": "value"})

        assert result is exc
        assert not hasattr(result, "details")
