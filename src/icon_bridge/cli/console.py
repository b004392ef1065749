"""Console rendering of UI events for the command line."""

from typing import Any

from icon_bridge.constants import (
    EVENT_FETCH_FAILED,
    EVENT_FETCH_START,
    EVENT_FETCH_SUCCESS,
    PROVIDER_LABELS,
)
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


class ConsoleUiChannel:
    """UiChannel that prints sync progress and remembers failures."""

    def __init__(self, quiet: bool = False) -> None:  # noqa: FBT001, FBT002
        self.quiet = quiet
        self.events: list[dict[str, Any]] = []
        self.last_error: str | None = None

    def post(self, message: dict[str, Any]) -> None:
        self.events.append(message)
        event_type = message.get("type")
        provider = message.get("provider")
        label = PROVIDER_LABELS.get(provider, provider or "")

        if event_type == EVENT_FETCH_START:
            self.last_error = None
            self._print(f"🔄 Syncing icons from {label}...")
        elif event_type == EVENT_FETCH_SUCCESS:
            count = len(message.get("icons") or [])
            self._print(f"✅ {count} icons available from {label}")
        elif event_type == EVENT_FETCH_FAILED:
            self.last_error = str(message.get("error") or "Sync failed")
            print(f"❌ {self.last_error}")
        else:
            logger.debug("UI event %s", event_type)

    def _print(self, text: str) -> None:
        if not self.quiet:
            print(text)


def print_notice(message: str) -> None:
    print(f"ℹ️  {message}")
