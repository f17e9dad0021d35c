"""Configuration loading from YAML files.

The loading hierarchy is:
1. Default values from Pydantic models
2. Configuration file (YAML)
3. Environment variables referenced as ${VAR} inside the file
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationFileError, ConfigurationValidationError
from .models import MirrorConfig

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "ISSUE_MIRROR_CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "issue_mirror.yaml"


class ConfigurationLoader:
    """Handles loading and validation of the mirror configuration."""

    def __init__(self) -> None:
        self._config: MirrorConfig | None = None
        self._config_file_path: Path | None = None

    @property
    def config(self) -> MirrorConfig | None:
        """Most recently loaded configuration."""
        return self._config

    @property
    def config_file_path(self) -> Path | None:
        """Resolved path of the file the configuration came from."""
        return self._config_file_path

    def load_from_file(self, config_path: str | Path) -> MirrorConfig:
        """Load configuration from a YAML file.

        Raises:
            ConfigurationFileError: If file cannot be read or parsed
            ConfigurationValidationError: If configuration validation fails
        """
        config_path = Path(config_path)

        if not config_path.is_file():
            raise ConfigurationFileError(
                "configuration file not found", str(config_path)
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationFileError(
                f"invalid YAML: {e}", str(config_path)
            ) from e
        except OSError as e:
            raise ConfigurationFileError(
                f"cannot read file: {e}", str(config_path)
            ) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationFileError(
                "configuration root must be a mapping", str(config_path)
            )

        config = self.load_from_dict(config_data)
        self._config_file_path = config_path.resolve()
        logger.info(f"Loaded configuration from {self._config_file_path}")
        return config

    def load_from_dict(self, config_data: dict[str, Any]) -> MirrorConfig:
        """Load configuration from a dictionary.

        Raises:
            ConfigurationValidationError: If configuration validation fails
        """
        try:
            self._config = MirrorConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationValidationError(e) from e
        return self._config

    def find_config_file(self, filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
        """Find configuration file in standard locations.

        Search order:
        1. Current working directory
        2. ISSUE_MIRROR_CONFIG_PATH environment variable (file or directory)
        3. ~/.issue_mirror/
        """
        search_paths = [Path.cwd() / filename]

        env_path_str = os.getenv(CONFIG_PATH_ENV_VAR)
        if env_path_str:
            env_path = Path(env_path_str)
            search_paths.append(env_path if env_path.is_file() else env_path / filename)

        search_paths.append(Path.home() / ".issue_mirror" / filename)

        for path in search_paths:
            if path.is_file():
                return path
        return None

    def auto_load(self, filename: str = DEFAULT_CONFIG_FILENAME) -> MirrorConfig:
        """Load configuration from the first standard location that has it.

        Raises:
            ConfigurationFileError: If no configuration file is found
        """
        config_path = self.find_config_file(filename)
        if config_path is None:
            raise ConfigurationFileError(
                f"No configuration file '{filename}' found in standard locations"
            )
        return self.load_from_file(config_path)
