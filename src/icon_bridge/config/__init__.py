"""Configuration management - settings file and path utilities."""

from icon_bridge.config.paths import Paths
from icon_bridge.config.settings import SettingsManager
from icon_bridge.types import Settings

__all__ = ["Paths", "Settings", "SettingsManager"]
