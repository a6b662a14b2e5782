"""
Manages loading and validation of the optional INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bgm_builder.exceptions import ConfigurationError
from bgm_builder.models.config import BuildConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("bgm-builder.ini")


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path = DEFAULT_CONFIG_FILE):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> BuildConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: the built-in defaults are used instead.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated BuildConfig object.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        config_data: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            config_data = self._get_config_as_dict()
            log.debug(f"Loaded configuration from {self.config_file_path}")
        else:
            log.debug(
                f"No configuration file at {self.config_file_path}, using defaults."
            )

        if cli_options:
            config_data.update(cli_options)

        try:
            return BuildConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """
        Creates and saves a complete configuration file.

        Args:
            settings: Values to write instead of the defaults.
        """
        try:
            config = BuildConfig(**(settings or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {
            key: str(getattr(config, key)) for key in BuildConfig.get_ini_keys()
        }

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys of the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        unknown = set(section) - set(BuildConfig.get_ini_keys())
        if unknown:
            log.warning(
                f"[yellow]Ignoring unknown configuration keys: "
                f"{', '.join(sorted(unknown))}[/yellow]"
            )
        return {
            key: section.get(key)
            for key in BuildConfig.get_ini_keys()
            if key in section
        }
