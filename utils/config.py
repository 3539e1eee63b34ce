import configparser
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    A class responsible for managing application configuration settings from
    a .ini file.

    This manager provides a robust way to access configuration, with built-in
    defaults, type conversion, and error handling. A missing file is not an
    error: every value then comes from its fallback.
    """

    def __init__(self, config_dir: str = 'config'):
        """
        Initialize the ConfigManager.

        Args:
            config_dir (str): The directory containing the configuration file.
        """
        self.config_file = os.path.join(config_dir, 'config.ini')
        self.config = configparser.ConfigParser()
        self._section_map: Dict[str, str] = {}
        self._mover_config: Dict[str, Any] | None = None
        self._logging_config: Dict[str, Any] | None = None
        self.load_config()

    def load_config(self) -> None:
        """
        Loads the configuration from the .ini file.
        If the file doesn't exist, it proceeds with an empty configuration,
        allowing fallbacks to default values.
        """
        if os.path.exists(self.config_file):
            self.config.read(self.config_file, encoding='utf-8')
        else:
            logger.info(
                f"Configuration file not found at: {self.config_file}. "
                "Using default values.")
        self._refresh_section_map()
        self._invalidate_cache()

    def _invalidate_cache(self) -> None:
        self._mover_config = None
        self._logging_config = None

    def _refresh_section_map(self) -> None:
        """Build a mapping of normalized section names to their original form."""
        self._section_map = {
            self._canonical_section_key(section): section
            for section in self.config.sections()
        }

    @staticmethod
    def _canonical_section_key(section: str) -> str:
        """Normalize section names for case-insensitive lookups."""
        return ''.join(ch for ch in section.lower() if ch.isalnum())

    def _resolve_section(self, section: str) -> str:
        """Resolve a section name using the normalization map."""
        key = self._canonical_section_key(section)
        return self._section_map.get(key, section)

    @property
    def mover(self) -> Dict[str, Any]:
        """
        Get the [mover] configuration, parsed with defaults and type safety.

        Range checks are left to MoverConfig so that an out-of-range value
        in the file is reported as a fatal error rather than replaced.
        """
        if self._mover_config is None:
            self._mover_config = {
                'interval': self._get_int('mover', 'interval', 30),
                'distance': self._get_int('mover', 'distance', 1),
                'verbose': self._get_bool('mover', 'verbose', False),
            }
        return self._mover_config

    @property
    def log_settings(self) -> Dict[str, Any]:
        """
        Get the [logging] configuration, parsed with defaults.
        """
        if self._logging_config is None:
            section = self._resolve_section('logging')
            self._logging_config = {
                'log_dir':
                self.config.get(section, 'log_dir', fallback='logs'),
                'file_enabled':
                self._get_bool('logging', 'file_enabled', True),
            }
        return self._logging_config

    @property
    def language(self) -> str:
        """The language code from [general], 'en' if unset."""
        return self.get('general', 'language', fallback='en')

    def _get_int(self, section: str, key: str, fallback: int) -> int:
        """
        Safely retrieve an integer value from the configuration.

        If the section or key is missing, or if the value is not a valid
        integer, it logs a warning and returns the fallback value.

        Args:
            section (str): The section in the config file.
            key (str): The key in the section.
            fallback (int): The default value to return on failure.

        Returns:
            The integer value or the fallback.
        """
        resolved_section = self._resolve_section(section)
        try:
            return self.config.getint(resolved_section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback  # No need to log if the key simply doesn't exist
        except ValueError:
            value = self.config.get(resolved_section, key)
            logger.warning(
                f"Invalid value for '{key}' in section '[{section}]'. "
                f"Expected an integer, but got '{value}'. "
                f"Using default value: {fallback}.")
            return fallback

    def _get_bool(self, section: str, key: str, fallback: bool) -> bool:
        """Boolean counterpart of _get_int."""
        resolved_section = self._resolve_section(section)
        try:
            return self.config.getboolean(resolved_section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback
        except ValueError:
            value = self.config.get(resolved_section, key)
            logger.warning(
                f"Invalid value for '{key}' in section '[{section}]'. "
                f"Expected a boolean, but got '{value}'. "
                f"Using default value: {fallback}.")
            return fallback

    def get(self, section: str, key: str, fallback: Any = None) -> Any:
        """
        Retrieve a configuration value for a given section and key.

        Args:
            section (str): The section in the config file.
            key (str): The key in the section.
            fallback: Value to return if the section or key is not found.

        Returns:
            The value associated with the key, or the fallback value.
        """
        resolved_section = self._resolve_section(section)
        return self.config.get(resolved_section, key, fallback=fallback)

