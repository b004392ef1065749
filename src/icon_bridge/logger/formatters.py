"""Console formatters for the icon-bridge logging system.

- ColoredConsoleFormatter: level names wrapped in ANSI colours
- SimpleConsoleFormatter: the message alone
- HybridConsoleFormatter: picks one of the above per record level

INFO records are printed as bare messages so that CLI output reads like
normal program output; everything else gets a coloured, structured line.
"""

import logging

from icon_bridge.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter that colours the level name.

    Colours come from ``LOG_COLORS``; levels without an entry are formatted
    unchanged. The colour is applied only for the duration of ``format``.

    Thread Safety:
        Each call works on its own record, so one instance can serve the
        listener thread and direct callers alike.

    """

    def format(self, record: logging.LogRecord) -> str:
        r"""Format the record with an ANSI-coloured level name.

        The record's levelname is restored afterwards because the same
        record may be handed to the file handler too.

        Args:
            record: The log record to format

        Returns:
            The formatted line, e.g.
            ``"\033[33mWARNING\033[0m - icon_bridge.core.sync - ..."``

        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]
            original_levelname = record.levelname
            record.levelname = f"{color}{original_levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class SimpleConsoleFormatter(logging.Formatter):
    """Formatter that outputs only the message.

    Used for INFO records that stand in for ``print()`` in the CLI, such as
    "Synced 42 icons from github", where a timestamp and module name would
    only add noise. Not normally instantiated directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Return the record's message with its arguments merged in."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Simple format for INFO, coloured structured format for the rest.

    Format selection:
        - INFO: message only
        - DEBUG, WARNING, ERROR, CRITICAL: ``fmt`` with a coloured level

    Example output:
        INFO:     "Synced 42 icons from github"
        WARNING:  "12:30:45 - icon_bridge.core.sync - WARNING - Sync failed"

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize the hybrid formatter.

        Args:
            fmt: Format string for structured (non-INFO) messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple_formatter = SimpleConsoleFormatter()
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format with the simple or the structured formatter by level.

        Args:
            record: The log record to format

        Returns:
            The bare message for INFO, a structured line otherwise

        """
        if record.levelno == logging.INFO:
            return self._simple_formatter.format(record)
        return self._colored_formatter.format(record)
