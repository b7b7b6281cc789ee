"""YAML configuration loading with dot-separated key access."""
import os
from typing import Any, Optional

import yaml

from overunder.errors import OverUnderError


class ConfigError(OverUnderError):
    """Configuration error"""
    pass


class Config:
    """Configuration manager

    Loads a YAML file and exposes nested values through dot-separated keys.

    Example:
        config = Config("config/config.yaml")
        model = config.get("llm.model")
        backend = config.get("storage.backend", "json")
    """

    def __init__(self, config_path: str):
        """Load the configuration file

        Args:
            config_path: Path to the YAML file

        Raises:
            ConfigError: File is missing or is not valid YAML
        """

        if not os.path.exists(config_path):
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file: {e}")

        if not isinstance(self._data, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get a configuration value

        Args:
            key: Dot-separated key, e.g. "llm.model"
            default: Returned when any segment is missing

        Returns:
            The configured value or the default
        """
        keys = key.split(".")
        value = self._data

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def section(self, key: str) -> dict:
        """Return a nested mapping, or an empty dict if absent."""
        value = self.get(key, {})
        return value if isinstance(value, dict) else {}
