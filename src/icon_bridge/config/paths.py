"""Path constants and utilities for icon-bridge configuration."""

import os
from pathlib import Path

from icon_bridge.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    SETTINGS_FILE_NAME,
    STORE_FILE_NAME,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME

    @classmethod
    def config_dir(cls) -> Path:
        """Return the configuration directory.

        ``ICON_BRIDGE_CONFIG_DIR`` overrides the default location.
        """
        override = os.getenv("ICON_BRIDGE_CONFIG_DIR")
        if override:
            return Path(override).expanduser()
        return cls.CONFIG_DIR

    @classmethod
    def settings_file(cls, config_dir: Path | None = None) -> Path:
        return (config_dir or cls.config_dir()) / SETTINGS_FILE_NAME

    @classmethod
    def store_file(cls, storage_dir: Path) -> Path:
        return storage_dir / STORE_FILE_NAME

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand ``~`` and resolve a user-supplied path."""
        return Path(path_str).expanduser().resolve()
