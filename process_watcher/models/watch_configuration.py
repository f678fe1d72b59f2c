"""WatchConfiguration model for the process watcher.

Represents the watch cadence, the filter options and the logging settings.
Whitelist options (ProcessName, ProcessId) and blacklist options
(ExcludeProcessName, ExcludeProcessId) are mutually exclusive and are
rejected together at construction time, before any snapshot is taken.
"""

import json
import os
from enum import Enum
from typing import Any, Dict, Optional, Set

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..exceptions import ConfigValidationError, InvalidConfigError, MissingConfigError
from .filter_policy import (
    BlacklistPolicy,
    FilterMode,
    FilterPolicy,
    UnrestrictedPolicy,
    WhitelistPolicy,
)

DEFAULT_WATCH_INTERVAL_MS = 200


class LogLevel(str, Enum):
    """Available log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class OutputFormat(str, Enum):
    """How the CLI renders lifecycle events."""

    TEXT = "text"
    JSON = "json"


class WatchConfiguration(BaseModel):
    """Model representing the process watcher configuration."""

    model_config = ConfigDict(
        populate_by_name=True, validate_assignment=True, extra="forbid"
    )

    # Polling cadence in milliseconds
    watch_interval: int = Field(
        default=DEFAULT_WATCH_INTERVAL_MS, gt=0, alias="WatchInterval"
    )

    # Blacklist
    exclude_process_name: Set[str] = Field(
        default_factory=set, alias="ExcludeProcessName"
    )
    exclude_process_id: Set[int] = Field(default_factory=set, alias="ExcludeProcessId")

    # Whitelist
    process_name: Set[str] = Field(default_factory=set, alias="ProcessName")
    process_id: Set[int] = Field(default_factory=set, alias="ProcessId")

    # Output and logging
    output_format: OutputFormat = Field(default=OutputFormat.TEXT)
    log_level: LogLevel = Field(default=LogLevel.WARNING)
    log_file_path: Optional[str] = Field(default=None)
    max_log_size_mb: int = Field(default=5, ge=1, le=1000)
    backup_count: int = Field(default=3, ge=0, le=10)

    @field_validator("exclude_process_name", "process_name", mode="before")
    def normalize_names(cls, value: Any) -> Any:
        """Accept a single name or any iterable of names."""
        if value is None:
            return set()
        if isinstance(value, str):
            value = [value]
        names = set()
        for name in value:
            name = str(name).strip()
            if not name:
                raise ValueError("Process names cannot be empty")
            names.add(name)
        return names

    @field_validator("exclude_process_id", "process_id", mode="before")
    def normalize_ids(cls, value: Any) -> Any:
        """Accept a single id or any iterable of ids."""
        if value is None:
            return set()
        if isinstance(value, (int, str)):
            value = [value]
        return set(value)

    @field_validator("exclude_process_id", "process_id")
    def validate_ids(cls, value: Set[int]) -> Set[int]:
        if any(pid < 0 for pid in value):
            raise ValueError("Process ids cannot be negative")
        return value

    @field_validator("log_level", mode="before")
    def normalize_log_level(cls, value: Any) -> LogLevel:
        """Ensure log level values resolve to LogLevel enum members."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, str):
            normalized = value.upper()
            if normalized == "WARN":
                normalized = "WARNING"
            try:
                return LogLevel(normalized)
            except ValueError as exc:
                raise ValueError(f"Invalid log level: {value}") from exc
        raise ValueError("Log level must be a string or LogLevel enum")

    @model_validator(mode="after")
    def validate_filter_groups(self) -> "WatchConfiguration":
        """Whitelist and blacklist options cannot be combined."""
        has_whitelist = bool(self.process_name or self.process_id)
        has_blacklist = bool(self.exclude_process_name or self.exclude_process_id)
        if has_whitelist and has_blacklist:
            raise ValueError(
                "Whitelist options (ProcessName, ProcessId) cannot be combined "
                "with blacklist options (ExcludeProcessName, ExcludeProcessId)"
            )
        return self

    @property
    def interval_seconds(self) -> float:
        return self.watch_interval / 1000.0

    @property
    def filter_mode(self) -> FilterMode:
        if self.process_name or self.process_id:
            return FilterMode.WHITELIST
        if self.exclude_process_name or self.exclude_process_id:
            return FilterMode.BLACKLIST
        return FilterMode.UNRESTRICTED

    def build_filter_policy(self) -> FilterPolicy:
        """Return the filter policy matching the configured option group."""
        mode = self.filter_mode
        if mode is FilterMode.WHITELIST:
            return WhitelistPolicy(
                names=frozenset(self.process_name), ids=frozenset(self.process_id)
            )
        if mode is FilterMode.BLACKLIST:
            return BlacklistPolicy(
                names=frozenset(self.exclude_process_name),
                ids=frozenset(self.exclude_process_id),
            )
        return UnrestrictedPolicy()

    def get_log_file_path(self) -> Optional[str]:
        """Get the resolved log file path, if file logging is configured."""
        if not self.log_file_path:
            return None
        return os.path.expandvars(os.path.expanduser(self.log_file_path))

    def to_dict(self) -> Dict[str, Any]:
        """Return JSON-serializable representation using option names."""
        data = self.model_dump(mode="json", by_alias=True)
        for key in ("ExcludeProcessName", "ExcludeProcessId", "ProcessName", "ProcessId"):
            data[key] = sorted(data[key])
        return data

    @classmethod
    def create_default(cls) -> "WatchConfiguration":
        """Create a default (unrestricted) configuration instance."""
        return cls()

    @classmethod
    def build(cls, **options: Any) -> "WatchConfiguration":
        """Validate options, raising ConfigValidationError on failure."""
        try:
            return cls(**options)
        except ValidationError as exc:
            problems = [
                {
                    "field": ".".join(str(part) for part in error["loc"]) or "config",
                    "error": error["msg"],
                }
                for error in exc.errors()
            ]
            summary = "; ".join(f"{p['field']}: {p['error']}" for p in problems)
            raise ConfigValidationError(
                f"Invalid watcher configuration: {summary}", details={"errors": problems}
            ) from exc

    @staticmethod
    def load_file_data(file_path: str) -> Dict[str, Any]:
        """Read the raw option mapping stored in a JSON configuration file."""
        if not os.path.exists(file_path):
            raise MissingConfigError(
                "Configuration file not found", details={"path": file_path}
            )
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidConfigError(
                f"Cannot read configuration file: {exc}", details={"path": file_path}
            ) from exc

        if not isinstance(data, dict):
            raise InvalidConfigError(
                "Configuration file must contain a JSON object",
                details={"path": file_path},
            )
        return data

    @classmethod
    def from_file(cls, file_path: str) -> "WatchConfiguration":
        """Load and validate configuration from a JSON file."""
        return cls.build(**cls.load_file_data(file_path))

    def to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def __str__(self) -> str:
        """String representation of the configuration."""
        return (
            f"WatchConfiguration("
            f"interval={self.watch_interval}ms, "
            f"mode={self.filter_mode.value}, "
            f"log_level={self.log_level.value}"
            f")"
        )
