"""Settings manager for the INI settings file."""

import configparser
import logging
from pathlib import Path

from icon_bridge.config.paths import Paths
from icon_bridge.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_NETWORK,
    SETTINGS_VERSION,
)
from icon_bridge.types import DirectorySettings, NetworkSettings, Settings

logger = logging.getLogger(__name__)

RawSettingsDict = dict[str, str | dict[str, str]]

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

FILE_HEADER = """\
# icon-bridge settings
#
# Log levels: DEBUG, INFO, WARNING, ERROR, CRITICAL
# timeout_seconds = 0 leaves provider requests without a timeout.

"""


class SettingsManager:
    """Manages the global INI settings."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = Paths.settings_file(self.config_dir)

    def get_default_settings(self) -> RawSettingsDict:
        return {
            KEY_CONFIG_VERSION: SETTINGS_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {"timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS)},
            SECTION_DIRECTORY: {
                "storage": str(self.config_dir),
                "logs": str(self.config_dir / "logs"),
            },
        }

    def _create_parser(
        self, defaults: RawSettingsDict
    ) -> configparser.ConfigParser:
        """Create a ConfigParser pre-populated with defaults."""
        parser = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )
        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        parser.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                parser.add_section(key)
                for subkey, subvalue in value.items():
                    parser.set(key, subkey, str(subvalue))

        return parser

    def load_settings(self) -> Settings:
        """Load settings, creating the file with defaults on first use.

        Returns:
            Parsed settings

        Raises:
            ValueError: If a value cannot be converted

        """
        parser = self._create_parser(self.get_default_settings())

        if self.settings_file.exists():
            parser.read(self.settings_file, encoding="utf-8")
        else:
            settings = self._convert(parser)
            self.save_settings(settings)
            return settings

        return self._convert(parser)

    def _convert(self, parser: configparser.ConfigParser) -> Settings:
        defaults = parser[SECTION_DEFAULT]

        log_level = defaults.get(KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
        if log_level not in VALID_LOG_LEVELS:
            logger.warning("Invalid log_level %r, using default", log_level)
            log_level = DEFAULT_LOG_LEVEL

        console_level = defaults.get(
            KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
        ).upper()
        if console_level not in VALID_LOG_LEVELS:
            logger.warning(
                "Invalid console_log_level %r, using default", console_level
            )
            console_level = DEFAULT_CONSOLE_LOG_LEVEL

        try:
            timeout_seconds = parser.getint(SECTION_NETWORK, "timeout_seconds")
        except ValueError as e:
            msg = f"Invalid timeout_seconds in {self.settings_file}: {e}"
            raise ValueError(msg) from e

        network = NetworkSettings(timeout_seconds=max(timeout_seconds, 0))
        directory = DirectorySettings(
            storage=Paths.expand_path(parser.get(SECTION_DIRECTORY, "storage")),
            logs=Paths.expand_path(parser.get(SECTION_DIRECTORY, "logs")),
        )

        return Settings(
            config_version=defaults.get(KEY_CONFIG_VERSION, SETTINGS_VERSION),
            log_level=log_level,
            console_log_level=console_level,
            network=network,
            directory=directory,
        )

    def save_settings(self, settings: Settings) -> None:
        """Write settings to the INI file.

        Args:
            settings: Settings to save

        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        parser = self._create_parser(
            {
                KEY_CONFIG_VERSION: settings["config_version"],
                KEY_LOG_LEVEL: settings["log_level"],
                KEY_CONSOLE_LOG_LEVEL: settings["console_log_level"],
                SECTION_NETWORK: {
                    "timeout_seconds": str(
                        settings["network"]["timeout_seconds"]
                    ),
                },
                SECTION_DIRECTORY: {
                    "storage": str(settings["directory"]["storage"]),
                    "logs": str(settings["directory"]["logs"]),
                },
            }
        )
        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(FILE_HEADER)
            parser.write(f)
        logger.debug("Saved settings to %s", self.settings_file)
