"""Settings-driven configuration for the logging system.

The logger bootstraps with defaults because it is imported before the
settings layer exists; ``update_logger_from_config`` applies the levels and
the log directory from settings.conf afterwards. Late imports avoid the
circular dependency.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from icon_bridge.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_FILE_NAME,
)
from icon_bridge.logger.handlers import (
    ROOT_LOGGER_NAME,
    ConfigurationError,
    _create_file_handler,
)

if TYPE_CHECKING:
    from icon_bridge.logger.state import _LoggerState
    from icon_bridge.types import Settings


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap console level, file level and log file path.

    ``ICON_BRIDGE_LOG_DIR`` overrides the log directory so that test runs
    never write into the user's configuration directory.
    """
    env_log_dir = os.getenv("ICON_BRIDGE_LOG_DIR")
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / DEFAULT_CONFIG_SUBDIR
            / CONFIG_DIR_NAME
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def _relocate_file_handler(
    state: "_LoggerState", log_file: Path, file_level: int
) -> None:
    """Point the file handler at ``log_file`` if it writes elsewhere."""
    listener = state.queue_listener
    if listener is None:
        return

    target = os.path.abspath(log_file)
    handlers = list(listener.handlers)
    for index, handler in enumerate(handlers):
        if not isinstance(handler, RotatingFileHandler):
            continue
        if handler.baseFilename == target:
            return
        try:
            replacement = _create_file_handler(
                log_file, logging.getLevelName(file_level)
            )
        except ConfigurationError as e:
            logging.getLogger(ROOT_LOGGER_NAME).warning(
                "Keeping log file %s: %s", handler.baseFilename, e
            )
            return
        handlers[index] = replacement
        listener.stop()
        listener.handlers = tuple(handlers)
        listener.start()
        handler.close()
        return


def update_logger_from_config(
    state: "_LoggerState", settings: "Settings | None" = None
) -> None:
    """Apply handler levels and the log directory from settings.conf.

    Levels are set on the running handlers. The file handler moves to
    ``[directory] logs`` unless ``ICON_BRIDGE_LOG_DIR`` pins it. Errors while
    loading settings leave the bootstrap configuration in place.

    Args:
        state: Logger state object (from logger.state module)
        settings: Already loaded settings; loaded from disk when omitted

    """
    if settings is None:
        try:
            from icon_bridge.config import SettingsManager  # noqa: PLC0415

            settings = SettingsManager().load_settings()
        except (ImportError, KeyError, OSError, ValueError):
            return

    console_level = getattr(
        logging, settings["console_log_level"], logging.WARNING
    )
    file_level = getattr(logging, settings["log_level"], logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

        if not os.getenv("ICON_BRIDGE_LOG_DIR"):
            _relocate_file_handler(
                state,
                Path(settings["directory"]["logs"]) / LOG_FILE_NAME,
                file_level,
            )

    state.config_applied = True
