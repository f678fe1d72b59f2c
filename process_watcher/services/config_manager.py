"""ConfigManager service for configuration management.

Builds the watcher configuration from three layers, lowest priority first:
a JSON configuration file, environment variables and explicit overrides
(usually command-line options). The merged options are validated once, so
a conflict between layers is reported like any other invalid setting.
"""

import os
import threading
from typing import Any, Dict, Mapping, Optional

from ..exceptions import ConfigValidationError, MissingConfigError, with_context
from ..models.watch_configuration import WatchConfiguration
from ..utils.logging import get_logger


def _split_list(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def _int_list(value: str) -> list:
    return [int(item) for item in _split_list(value)]


class ConfigManager:
    """Service for loading and saving the watcher configuration."""

    # Environment variable -> (field name, converter)
    ENV_VAR_MAPPING: Dict[str, tuple] = {
        "PROCESS_WATCHER_WATCH_INTERVAL": ("watch_interval", int),
        "PROCESS_WATCHER_EXCLUDE_PROCESS_NAME": ("exclude_process_name", _split_list),
        "PROCESS_WATCHER_EXCLUDE_PROCESS_ID": ("exclude_process_id", _int_list),
        "PROCESS_WATCHER_PROCESS_NAME": ("process_name", _split_list),
        "PROCESS_WATCHER_PROCESS_ID": ("process_id", _int_list),
        "PROCESS_WATCHER_LOG_LEVEL": ("log_level", str),
        "PROCESS_WATCHER_LOG_FILE": ("log_file_path", str),
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the config manager.

        Args:
            config_file: Default configuration file path
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self.config_file = config_file
        self.environ = environ if environ is not None else os.environ
        self.current_config: Optional[WatchConfiguration] = None
        self.logger = get_logger(__name__)
        self._lock = threading.RLock()

    @staticmethod
    def _field_names() -> Dict[str, str]:
        """Map every accepted key (option name or field name) to its field."""
        mapping = {}
        for name, field in WatchConfiguration.model_fields.items():
            mapping[name] = name
            if field.alias:
                mapping[field.alias] = name
        return mapping

    def normalize_keys(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Rewrite option names such as ``WatchInterval`` to field names.

        Unknown keys are kept so validation can reject them.
        """
        names = self._field_names()
        return {names.get(key, key): value for key, value in data.items()}

    def read_file_options(self, file_path: Optional[str] = None) -> Dict[str, Any]:
        """Return the options stored in the configuration file, if any.

        Raises:
            MissingConfigError: If an explicitly given file does not exist
            InvalidConfigError: If the file cannot be parsed
        """
        config_path = file_path or self.config_file
        if not config_path:
            return {}
        return self.normalize_keys(WatchConfiguration.load_file_data(config_path))

    def read_env_options(self) -> Dict[str, Any]:
        """Return options set through ``PROCESS_WATCHER_*`` variables.

        Raises:
            ConfigValidationError: If a variable cannot be converted
        """
        options: Dict[str, Any] = {}
        for env_var, (field_name, converter) in self.ENV_VAR_MAPPING.items():
            raw = self.environ.get(env_var)
            if raw is None or not raw.strip():
                continue
            try:
                options[field_name] = converter(raw)
            except ValueError as exc:
                raise ConfigValidationError(
                    f"Invalid value for {env_var}: {raw!r}",
                    details={"variable": env_var, "error": str(exc)},
                ) from exc
        return options

    def load_config(
        self,
        file_path: Optional[str] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> WatchConfiguration:
        """Load, merge and validate the configuration.

        Args:
            file_path: Configuration file (falls back to the manager's file)
            overrides: Highest priority options; ``None`` and empty
                collections are treated as "not given"

        Returns:
            Validated WatchConfiguration

        Raises:
            ConfigurationException: If any layer is unreadable or the merged
                options are invalid
        """
        with self._lock:
            options = self.read_file_options(file_path)
            options.update(self.read_env_options())
            options.update(self._given(overrides or {}))

            try:
                config = WatchConfiguration.build(**options)
            except ConfigValidationError as exc:
                raise with_context(exc, {"config_file": file_path or self.config_file})
            self.current_config = config
            if file_path:
                self.config_file = file_path

            self.logger.debug(
                "Configuration loaded",
                config_file=self.config_file,
                interval_ms=config.watch_interval,
                filter_mode=config.filter_mode.value,
            )
            return config

    def _given(self, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        given = {}
        for key, value in self.normalize_keys(overrides).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set, frozenset)) and not value:
                continue
            given[key] = value
        return given

    def save_config(
        self, config: WatchConfiguration, file_path: Optional[str] = None
    ) -> str:
        """Save configuration to file.

        Returns:
            The path written

        Raises:
            MissingConfigError: If no target path is known
        """
        target_path = file_path or self.config_file
        if not target_path:
            raise MissingConfigError("No configuration file path specified")

        with self._lock:
            config.to_file(target_path)
            self.current_config = config
            self.config_file = target_path

        self.logger.info("Configuration saved", config_file=target_path)
        return target_path

    def get_config_summary(self) -> Dict[str, Any]:
        """Get summary of current configuration."""
        if self.current_config is None:
            return {"status": "no_config_loaded"}

        return {
            "config_file": self.config_file,
            "interval_ms": self.current_config.watch_interval,
            "filter_mode": self.current_config.filter_mode.value,
            "log_level": self.current_config.log_level.value,
        }

    def __str__(self) -> str:
        """String representation of the config manager."""
        config_file = os.path.basename(self.config_file) if self.config_file else "None"
        has_config = self.current_config is not None

        return f"ConfigManager(file={config_file}, loaded={has_config})"
