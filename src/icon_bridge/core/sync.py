"""Provider synchronization with generation-token staleness checks.

Several triggers (startup, save, provider switch, manual retry) may start
overlapping syncs and the transport has no cancellation. Each attempt takes
a fresh token; a result is applied only while its token is still the latest,
so an older, slower response never overwrites a newer one.
"""

from __future__ import annotations

from enum import Enum

from icon_bridge.constants import (
    EVENT_FETCH_FAILED,
    EVENT_FETCH_START,
    EVENT_FETCH_SUCCESS,
)
from icon_bridge.core.config_store import normalize_provider
from icon_bridge.core.protocols import UiChannel
from icon_bridge.core.sources import SourceRegistry
from icon_bridge.core.state import AppState
from icon_bridge.exceptions import get_error_message
from icon_bridge.logger import get_logger

logger = get_logger(__name__)


class SyncOutcome(Enum):
    """How a sync attempt ended."""

    IDLE = "idle"
    APPLIED = "applied"
    DISCARDED = "discarded"
    FAILED = "failed"


class SyncCoordinator:
    """Runs provider syncs against the shared AppState."""

    def __init__(
        self,
        state: AppState,
        registry: SourceRegistry,
        ui: UiChannel,
    ) -> None:
        self.state = state
        self.registry = registry
        self.ui = ui

    def _post(self, event_type: str, **fields: object) -> None:
        self.ui.post({"type": event_type, **fields, **self.state.public_state()})

    async def sync(self, provider: object, context: str) -> SyncOutcome:
        """Fetch and apply the index of one provider.

        Args:
            provider: Provider to sync; unknown or unconnected providers
                are ignored
            context: Trigger name echoed in every emitted event

        Returns:
            The outcome of this attempt

        """
        kind = normalize_provider(provider)
        if kind is None or not self.state.config_store.is_connected(kind):
            return SyncOutcome.IDLE

        token = self.state.next_sync_token()
        self._post(EVENT_FETCH_START, provider=kind, context=context)
        provider_config = dict(self.state.config_store.provider_config(kind))

        try:
            index = await self.registry.fetch_index(kind, provider_config)
        except Exception as e:  # noqa: BLE001
            if not self.state.is_current(token):
                logger.debug("Discarding stale %s sync failure: %s", kind, e)
                return SyncOutcome.DISCARDED
            logger.warning("Sync of %s failed: %s", kind, e)
            self._post(
                EVENT_FETCH_FAILED,
                provider=kind,
                context=context,
                error=get_error_message(e),
            )
            return SyncOutcome.FAILED

        if not self.state.is_current(token):
            logger.debug("Discarding stale %s sync result", kind)
            return SyncOutcome.DISCARDED

        self.state.replace_index(kind, index)
        if index.normalized_config:
            self.state.config_store.apply_normalized(
                kind, index.normalized_config
            )
            await self.state.config_store.persist()

        logger.info("Synced %d icons from %s", len(index.icons), kind)
        self._post(EVENT_FETCH_SUCCESS, provider=kind, context=context)
        return SyncOutcome.APPLIED
