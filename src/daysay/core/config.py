"""
Hierarchical configuration management.

Loads configuration from multiple sources with this precedence (highest wins):
    1. Environment variables (PREFIX_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

Usage:
    config = Config()

    config = Config(
        config_file="~/.daysay/config.yaml",
        data_dir="~/journals",
    )

    config.get("paths.journal_dir")     # dot-notation access
    config.get("sharing.attribution")
"""

import json
import os
from typing import Any

import yaml

from .exceptions import ConfigurationError

_DEFAULT_ENV_PREFIX = "DAYSAY_"
_DEFAULT_DATA_DIR_NAME = ".daysay-data"

DEFAULT_ATTRIBUTION = "Recorded with DaySay"
DEFAULT_SHARE_POSTFIX = "\n\nRecorded with DaySay"


class Config:
    """
    Central configuration manager.

    Loads and merges configuration from defaults, a config file, and
    environment variables. Env vars use double-underscore to denote nesting:
    DAYSAY_LOGGING__LEVEL=DEBUG -> config["logging"]["level"] = "DEBUG"
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = _DEFAULT_ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to YAML or JSON configuration file.
            env_prefix: Prefix for environment variable overrides.
            data_dir: Base directory for data storage. Defaults to ~/.daysay-data.
            defaults: Additional default values to merge.
        """
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""
        self._data_dir = data_dir or os.path.join("~", _DEFAULT_DATA_DIR_NAME)
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from all sources."""
        self.config_data = self._get_default_config()

        if self._extra_defaults:
            self._update_dict(self.config_data, self._extra_defaults)

        if self.config_file and os.path.exists(self.config_file):
            file_config = self._load_file(self.config_file)
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_file} must contain a mapping")
            self._update_dict(self.config_data, file_config)

        # Env vars override everything
        self._load_from_env()

    def _get_default_config(self) -> dict[str, Any]:
        data_dir = os.path.expanduser(self._data_dir)
        return {
            "paths": {
                "data_dir": data_dir,
                "journal_dir": os.path.join(data_dir, "journal"),
                "log_dir": os.path.join(data_dir, "logs"),
            },
            "journal": {
                "lexicon_file": "",
                "debug": False,
                "storage_keys": {
                    "entries": "daysay_journal_entries",
                    "active_entry_id": "daysay_active_entry_id",
                    "version": "daysay_journal_version",
                },
            },
            "sharing": {
                "attribution": DEFAULT_ATTRIBUTION,
                "share_postfix": DEFAULT_SHARE_POSTFIX,
                "share_title": "DaySay Journal Entry",
            },
            "logging": {
                "level": "WARNING",
                "log_file": "",
            },
        }

    @staticmethod
    def _load_file(path: str) -> Any:
        """Load a YAML or JSON config file."""
        ext = os.path.splitext(path)[1].lower()
        try:
            with open(path) as f:
                if ext in (".yaml", ".yml"):
                    return yaml.safe_load(f) or {}
                elif ext == ".json":
                    return json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e
        return {}

    def _update_dict(self, target: dict, source: dict) -> None:
        """Recursively merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        """Override config values from environment variables."""
        if not self.env_prefix:
            return
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.env_prefix):
                continue
            config_key = env_key[len(self.env_prefix) :].lower()
            key_parts = config_key.split("__")

            current = self.config_data
            for part in key_parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[key_parts[-1]] = env_value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "paths.journal_dir", "logging.level"
            default: Returned when key is not found.
        """
        parts = key_path.split(".")
        current = self.config_data
        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key_path: str, value: Any) -> None:
        """Set a config value by dot-notation path, creating intermediate dicts."""
        parts = key_path.split(".")
        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def get_data_dir(self) -> str:
        """Return the resolved data directory path."""
        return os.path.expanduser(self.get("paths.data_dir", self._data_dir))

    def get_journal_dir(self) -> str:
        """Return the directory holding the persisted journal keys."""
        return os.path.expanduser(self.get("paths.journal_dir") or os.path.join(self.get_data_dir(), "journal"))

    def ensure_directories(self) -> None:
        """Create all configured directories if they don't exist."""
        for path_value in self.config_data.get("paths", {}).values():
            if isinstance(path_value, str) and path_value:
                os.makedirs(os.path.expanduser(path_value), exist_ok=True)

    def validated(self):
        """Return the configuration as a validated ``DaySayConfig``.

        Raises:
            ConfigurationError: If the merged data does not satisfy the schema.
        """
        from pydantic import ValidationError

        from .config_schema import DaySayConfig

        try:
            return DaySayConfig.model_validate(self.config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


# Module-level singleton
_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = _DEFAULT_ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Get or create the global Config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Reset the global Config singleton (useful for testing)."""
    global _config_instance
    _config_instance = None
