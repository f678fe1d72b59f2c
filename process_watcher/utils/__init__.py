"""Utility modules for Process Watcher."""

from .logging import (
    ContextLogger,
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "StructuredFormatter",
    "get_logger",
    "configure_logging",
    "ContextLogger",
]
