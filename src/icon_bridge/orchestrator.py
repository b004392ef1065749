"""Routes UI messages to the core components.

The orchestrator owns the wiring of one session: configuration store,
provider registry, content cache, sync coordinator, preview pool and, when
a host document is present, the variant/size engine. Every handler failure
stops at ``handle_message`` and becomes a single host notice.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from icon_bridge.constants import (
    CONTEXT_RETRY_SYNC,
    CONTEXT_SAVE_PROVIDER,
    CONTEXT_SELECT_PROVIDER,
    CONTEXT_STARTUP,
    EVENT_FETCH_FAILED,
    EVENT_STATE_HYDRATE,
    MSG_APPLY_VARIANT_SIZE,
    MSG_CLOSE_PLUGIN,
    MSG_INSERT_ICON,
    MSG_REQUEST_PREVIEWS,
    MSG_RESIZE_UI,
    MSG_RETRY_SYNC,
    MSG_SAVE_PROVIDER,
    MSG_SELECT_PROVIDER,
    MSG_UI_READY,
    NOTICE_PREFIX,
    UI_HEIGHT,
    UI_WIDTH,
)
from icon_bridge.core.cache import ContentCache
from icon_bridge.core.config_store import ConfigStore, normalize_provider
from icon_bridge.core.previews import PreviewFetcher
from icon_bridge.core.protocols import Document, KeyValueStore, UiChannel
from icon_bridge.core.sources import SourceRegistry
from icon_bridge.core.state import AppState
from icon_bridge.core.sync import SyncCoordinator, SyncOutcome
from icon_bridge.core.variants import VariantApplyReport, VariantSizeEngine
from icon_bridge.exceptions import (
    IconBridgeError,
    InvalidInputError,
    get_error_message,
)
from icon_bridge.infrastructure.http import ApiTransport
from icon_bridge.logger import get_logger
from icon_bridge.types import UiMessage
from icon_bridge.utils.text import icon_name_from_path, normalize_string

logger = get_logger(__name__)

Notifier = Callable[[str], None]
Handler = Callable[[UiMessage], Any]


def _finite_number(value: Any, default: int) -> float:
    if (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    ):
        return value
    return default


class Orchestrator:
    """Entry point for every inbound UI message."""

    def __init__(
        self,
        state: AppState,
        registry: SourceRegistry,
        ui: UiChannel,
        document: Document | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            state: Session state
            registry: Provider sources
            ui: Channel to the UI peer
            document: Host document; None disables node commands
            notifier: Sink for user notices, defaults to the document's

        """
        self.state = state
        self.registry = registry
        self.ui = ui
        self.document = document
        self.sync_coordinator = SyncCoordinator(state, registry, ui)
        self.previews = PreviewFetcher(state, ui)
        self.engine = (
            VariantSizeEngine(state, document) if document is not None else None
        )
        if notifier is not None:
            self._notify = notifier
        elif document is not None:
            self._notify = document.notify
        else:
            self._notify = self._log_notice

        self._handlers: dict[str, Handler] = {
            MSG_UI_READY: self.handle_ui_ready,
            MSG_SAVE_PROVIDER: self.handle_save_provider,
            MSG_SELECT_PROVIDER: self.handle_select_provider,
            MSG_RETRY_SYNC: self.handle_retry_sync,
            MSG_INSERT_ICON: self.handle_insert_icon,
            MSG_APPLY_VARIANT_SIZE: self.handle_apply_variant_size,
            MSG_REQUEST_PREVIEWS: self.handle_request_previews,
            MSG_RESIZE_UI: self.handle_resize_ui,
            MSG_CLOSE_PLUGIN: self.handle_close_plugin,
        }

    @staticmethod
    def _log_notice(message: str) -> None:
        logger.info("%s", message)

    @property
    def config_store(self) -> ConfigStore:
        return self.state.config_store

    async def start(self) -> None:
        """Load the persisted configuration; call once before messages."""
        await self.config_store.load()

    def notify(self, message: str) -> None:
        self._notify(message)

    def post_hydration(self) -> None:
        self.ui.post({"type": EVENT_STATE_HYDRATE, **self.state.public_state()})

    async def handle_message(self, message: Any) -> None:
        """Dispatch one inbound message, turning failures into a notice."""
        if not isinstance(message, dict) or not isinstance(
            message.get("type"), str
        ):
            return

        handler = self._handlers.get(message["type"])
        if handler is None:
            logger.debug("Ignoring unknown message type %s", message["type"])
            return

        try:
            await handler(message)
        except IconBridgeError as e:
            logger.warning("%s failed: %s", message["type"], e)
            self.notify(f"{NOTICE_PREFIX}: {get_error_message(e)}")
        except Exception as e:
            logger.exception("Unexpected error handling %s", message["type"])
            self.notify(f"{NOTICE_PREFIX}: {get_error_message(e)}")

    # -------------------------------------------------------------------------
    # Provider and sync commands
    # -------------------------------------------------------------------------

    async def sync(self, provider: Any, context: str) -> SyncOutcome:
        return await self.sync_coordinator.sync(provider, context)

    async def handle_ui_ready(self, message: UiMessage) -> None:
        selected = self.config_store.ensure_selected_provider()
        await self.config_store.persist()
        self.post_hydration()
        if selected is not None:
            await self.sync(selected, CONTEXT_STARTUP)

    async def handle_save_provider(self, message: UiMessage) -> None:
        provider = self.config_store.save_provider(
            message.get("provider"),
            message.get("values"),
            select=bool(message.get("setSelectedProvider")),
        )
        await self.config_store.persist()
        self.post_hydration()
        if self.config_store.selected_provider == provider:
            await self.sync(provider, CONTEXT_SAVE_PROVIDER)

    async def handle_select_provider(self, message: UiMessage) -> None:
        provider = self.config_store.select_provider(message.get("provider"))
        await self.config_store.persist()
        self.post_hydration()
        await self.sync(provider, CONTEXT_SELECT_PROVIDER)

    async def handle_retry_sync(self, message: UiMessage) -> None:
        provider = self.config_store.ensure_selected_provider()
        await self.config_store.persist()
        self.post_hydration()
        if provider is None:
            self.ui.post(
                {
                    "type": EVENT_FETCH_FAILED,
                    "context": CONTEXT_RETRY_SYNC,
                    "error": "No provider is configured.",
                    **self.state.public_state(),
                }
            )
            return
        await self.sync(provider, CONTEXT_RETRY_SYNC)

    # -------------------------------------------------------------------------
    # Icon commands
    # -------------------------------------------------------------------------

    def _require_engine(self) -> VariantSizeEngine:
        if self.engine is None:
            msg = "This command needs an open design document."
            raise InvalidInputError(msg)
        return self.engine

    async def handle_insert_icon(self, message: UiMessage) -> None:
        engine = self._require_engine()
        icon_id = normalize_string(message.get("iconId"))
        if not icon_id:
            self.notify("Please choose an icon first.")
            return

        if normalize_provider(icon_id.split(":", 1)[0]) is None:
            self.notify("Invalid icon id. Please sync again.")
            return

        descriptor = self.state.find_descriptor(icon_id)
        if descriptor is None:
            self.notify("Icon metadata not found. Please sync again.")
            return

        try:
            node = await engine.insert_icon(
                icon_id,
                title=message.get("title"),
                name=message.get("name"),
                size=message.get("size"),
                variant=message.get("variant"),
            )
        except IconBridgeError as e:
            logger.warning("Inserting %s failed: %s", icon_id, e)
            self.notify(f"Failed to insert icon: {get_error_message(e)}")
            return
        except Exception as e:
            logger.exception("Unexpected error inserting %s", icon_id)
            self.notify(f"Failed to insert icon: {get_error_message(e)}")
            return

        self.notify(
            f"Inserted {node.name or icon_name_from_path(descriptor.path)}"
        )

    async def handle_apply_variant_size(
        self, message: UiMessage
    ) -> VariantApplyReport:
        engine = self._require_engine()
        return await engine.apply_variant_and_size(
            variant=message.get("variant"),
            size=message.get("size"),
        )

    async def handle_request_previews(self, message: UiMessage) -> list[str]:
        return await self.previews.fetch_previews(message.get("iconIds"))

    async def export_icon(self, icon_id: str) -> str:
        """Return the normalized SVG markup of a listed icon.

        Raises:
            InvalidInputError: If the id is not in the current index
            IconBridgeError: If fetching fails

        """
        descriptor = self.state.find_descriptor(normalize_string(icon_id))
        if descriptor is None:
            msg = "Icon metadata not found. Please sync again."
            raise InvalidInputError(msg)
        return await self.state.content_cache.get_or_fetch(
            normalize_string(icon_id), descriptor
        )

    # -------------------------------------------------------------------------
    # Plugin window
    # -------------------------------------------------------------------------

    async def handle_resize_ui(self, message: UiMessage) -> None:
        if self.document is None:
            return
        width = _finite_number(message.get("width"), UI_WIDTH)
        height = _finite_number(message.get("height"), UI_HEIGHT)
        self.document.resize_ui(width, height)

    async def handle_close_plugin(self, message: UiMessage) -> None:
        if self.document is not None:
            self.document.close()


def create_orchestrator(
    store: KeyValueStore,
    transport: ApiTransport,
    ui: UiChannel,
    document: Document | None = None,
    notifier: Notifier | None = None,
) -> Orchestrator:
    """Wire a fresh session around the given host collaborators."""
    config_store = ConfigStore(store)
    registry = SourceRegistry(transport, config_store.pat_for)
    state = AppState(
        config_store=config_store,
        content_cache=ContentCache(registry.fetch_file_text),
    )
    return Orchestrator(state, registry, ui, document, notifier)
