"""Configuration loader for YAML files."""

from pathlib import Path
from typing import Any

import yaml

from flightcontrol.core.exceptions.errors import ConfigurationError

# Searched in order when no explicit path is given
DEFAULT_CONFIG_PATHS = [
    Path("flightcontrol.yaml"),
    Path("config") / "flightcontrol.yaml",
    Path.home() / ".flightcontrol" / "config.yaml",
]


class ConfigLoader:
    """Load configuration sections from a YAML file."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            config_path: Path to configuration file.
        """
        self.config_path = config_path
        self._config: dict[str, Any] = {}

    def load(self, path: Path | None = None) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML file. Uses config_path if not provided.

        Returns:
            Loaded configuration dictionary.

        Raises:
            ConfigurationError: If the file is missing, invalid, or not a mapping.
        """
        load_path = path or self.config_path
        if not load_path:
            return {}

        try:
            with open(load_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {load_path}",
                config_key=str(load_path),
            ) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {load_path}",
                config_key=str(load_path),
                details={"error": str(e)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {load_path}",
                config_key=str(load_path),
                details={"type": type(data).__name__},
            )

        self._config = data
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Supports dot notation for nested keys (e.g., 'build.mod_folder').

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Args:
            section: Section name.

        Returns:
            Configuration section dictionary (empty if absent).
        """
        result = self._config.get(section, {})
        return result if isinstance(result, dict) else {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    @staticmethod
    def find_default() -> Path | None:
        """Return the first existing default configuration file, if any."""
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.is_file():
                return candidate
        return None
