"""Configuration manager for i18n-tasks.

This module loads the optional YAML configuration file and validates it
with the Pydantic schema. Command-line overrides are applied on top of the
validated file contents.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.core.exceptions import ConfigurationError
from .schema import I18nTasksConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "i18n-tasks.yml"


class ConfigManager:
    """Loads and validates i18n-tasks configuration."""

    @staticmethod
    def load_config(config_path: Path, required: bool = False) -> I18nTasksConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            required: Raise if the file does not exist instead of using defaults

        Returns:
            I18nTasksConfig: Validated configuration object

        Raises:
            ConfigurationError: If the file is missing (when required), is not
                valid YAML, or fails validation
        """
        if not config_path.exists():
            if required:
                raise ConfigurationError(
                    f"Configuration file not found: {config_path}", context=str(config_path)
                )
            logger.debug(f"No configuration file at {config_path}, using defaults")
            return I18nTasksConfig()

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML syntax in {config_path}: {e}", context=str(config_path)
            ) from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ConfigurationError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}",
                context=str(config_path),
            )

        try:
            config = I18nTasksConfig.model_validate(config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}", context=str(config_path)
            ) from e

        logger.info(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def apply_overrides(
        config: I18nTasksConfig, plugin_name: str | None = None
    ) -> I18nTasksConfig:
        """
        Apply command-line overrides to a loaded configuration.

        Args:
            config: Configuration loaded from file
            plugin_name: Plugin identifier given on the command line

        Returns:
            A new validated configuration; the input is not modified
        """
        if plugin_name is None:
            return config

        data = config.model_dump()
        data["plugin_name"] = plugin_name
        try:
            return I18nTasksConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid command-line override: {e}") from e
