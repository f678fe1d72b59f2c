"""Custom exceptions for Process Watcher.

Provides a hierarchical exception structure for the configuration and
process enumeration domains, so callers can tell a rejected configuration
apart from a broken OS interface.
"""

from typing import Any, Optional


class WatcherException(Exception):
    """Base exception for all process watcher errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """Initialize with message and optional details."""
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation with details if available."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationException(WatcherException):
    """Exceptions related to watcher configuration."""

    pass


class ConfigValidationError(ConfigurationException):
    """Configuration values failed validation (rejected before watching)."""

    pass


class InvalidConfigError(ConfigurationException):
    """Configuration file is unreadable or malformed."""

    pass


class MissingConfigError(ConfigurationException):
    """Configuration file does not exist."""

    pass


class ProcessException(WatcherException):
    """Exceptions related to process enumeration."""

    pass


class ProcessEnumerationError(ProcessException):
    """The OS process listing failed; the watch loop cannot continue."""

    pass


class WatcherStateError(WatcherException):
    """Operation is not allowed in the watcher's current state."""

    pass


def with_context(exception: Exception, context: dict) -> Exception:
    """Add context information to an exception.

    Args:
        exception: The exception to enhance
        context: Dictionary of contextual information

    Returns:
        The same exception with added context
    """
    if isinstance(exception, WatcherException):
        details = exception.details
        if details is None:
            details = {}
        elif not isinstance(details, dict):
            details = {"details": details}
        exception.details = {**details, **context}
    return exception
