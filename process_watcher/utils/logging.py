"""Structured logging utilities for Process Watcher.

Every record is rendered as a single JSON object carrying the logger name,
level, message, any persistent context and per-call keyword fields.
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "process_watcher"


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a JSON line.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = getattr(record, "structured_fields", None)
        if fields:
            log_data.update(fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating handler that keeps writing when rotation fails."""

    def doRollover(self) -> None:  # pragma: no cover - filesystem specific
        try:
            super().doRollover()
        except OSError as exc:
            logging.getLogger(__name__).warning("Log rotation failed: %s", exc)


class StructuredLogger:
    """Structured logger with context support."""

    def __init__(self, name: str):
        """Initialize structured logger.

        Args:
            name: Logger name (usually __name__)
        """
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self.logger.name

    def set_level(self, level: str) -> None:
        """Set logging level.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.logger.setLevel(getattr(logging, level.upper()))

    def add_context(self, **kwargs: Any) -> None:
        """Add persistent context to all log messages."""
        self.context.update(kwargs)

    def remove_context(self, *keys: str) -> None:
        """Remove context keys."""
        for key in keys:
            self.context.pop(key, None)

    def clear_context(self) -> None:
        """Clear all context."""
        self.context.clear()

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        fields = {**self.context, **kwargs}
        self.logger.log(
            level, message, exc_info=exc_info, extra={"structured_fields": fields}
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with structured data."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with structured data."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with structured data."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with structured data."""
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error message with the active exception's traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


class ContextLogger:
    """Context manager for temporary logging context."""

    def __init__(self, logger: StructuredLogger, **context: Any):
        self.logger = logger
        self.context = context
        self.previous_context: Dict[str, Any] = {}

    def __enter__(self) -> StructuredLogger:
        """Save overridden keys and apply the temporary context."""
        for key in self.context:
            if key in self.logger.context:
                self.previous_context[key] = self.logger.context[key]

        self.logger.add_context(**self.context)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Drop the temporary context and restore overridden keys."""
        self.logger.remove_context(*self.context.keys())
        if self.previous_context:
            self.logger.add_context(**self.previous_context)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger.

    Records propagate to the ``process_watcher`` logger, whose handlers are
    installed by :func:`configure_logging`.
    """
    return StructuredLogger(name)


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    max_size_mb: int = 5,
    backup_count: int = 3,
) -> logging.Logger:
    """Install console and optional rotating file handlers.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        level: Log level for the package logger
        log_file: Optional log file path
        max_size_mb: Rotate the log file after this many megabytes
        backup_count: Number of rotated files to keep

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        if getattr(handler, "_process_watcher_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = StructuredFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler._process_watcher_handler = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)

    if log_file:
        file_path = Path(log_file).expanduser()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = SafeRotatingFileHandler(
            filename=str(file_path),
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler._process_watcher_handler = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    return logger
