"""Logging utilities for icon-bridge.

Architecture:
    Application -> QueueHandler -> Queue -> QueueListener thread
                                                 |
                                       Console + File handlers

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Handlers are only attached to the root 'icon_bridge' logger
    4. Use %-formatting in log calls

Environment Variables:
    ICON_BRIDGE_LOG_DIR: Redirect the log file, overriding [directory] logs
        (used by the test suite)
"""

from typing import TYPE_CHECKING

from icon_bridge.logger.config import (
    update_logger_from_config as _update_config,
)
from icon_bridge.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from icon_bridge.logger.handlers import ConfigurationError
from icon_bridge.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from icon_bridge.logger.state import get_state

if TYPE_CHECKING:
    from icon_bridge.types import Settings

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(settings: "Settings | None" = None) -> None:
    """Apply settings.conf log levels and directory to the running handlers."""
    _update_config(get_state(), settings)
