"""Bounded preview fetching for the icon grid.

Requested ids are drained FIFO from one queue by a fixed number of workers,
which bounds outstanding requests. Each icon reports on its own as soon as
it settles; one completion event closes the batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from icon_bridge.constants import (
    EVENT_ICON_PREVIEW,
    EVENT_ICON_PREVIEW_FAILED,
    EVENT_PREVIEWS_COMPLETE,
    PREVIEW_MAX_REQUESTED,
    PREVIEW_MAX_WORKERS,
)
from icon_bridge.core.protocols import UiChannel
from icon_bridge.core.state import AppState
from icon_bridge.exceptions import (
    IconBridgeError,
    InvalidInputError,
    get_error_message,
)
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import normalize_string

logger = get_logger(__name__)


def unique_requested_ids(
    icon_ids: object, limit: int = PREVIEW_MAX_REQUESTED
) -> list[str]:
    """Deduplicate and trim requested ids, keeping order, up to ``limit``."""
    if isinstance(icon_ids, str) or not isinstance(icon_ids, Iterable):
        return []

    requested: list[str] = []
    for value in icon_ids:
        icon_id = normalize_string(value)
        if icon_id and icon_id not in requested:
            requested.append(icon_id)
            if len(requested) >= limit:
                break
    return requested


class PreviewFetcher:
    """Fetches SVG previews through the content cache."""

    def __init__(
        self,
        state: AppState,
        ui: UiChannel,
        max_workers: int = PREVIEW_MAX_WORKERS,
        max_requested: int = PREVIEW_MAX_REQUESTED,
    ) -> None:
        self.state = state
        self.ui = ui
        self.max_workers = max_workers
        self.max_requested = max_requested

    def _post(self, event_type: str, **fields: object) -> None:
        self.ui.post({"type": event_type, **fields, **self.state.public_state()})

    async def _fetch_one(self, icon_id: str) -> bool:
        try:
            descriptor = self.state.find_descriptor(icon_id)
            if descriptor is None:
                msg = "Icon metadata not found. Please sync again."
                raise InvalidInputError(msg)
            markup = await self.state.content_cache.get_or_fetch(
                icon_id, descriptor
            )
        except IconBridgeError as e:
            logger.debug("Preview of %s failed: %s", icon_id, e)
            self._post(
                EVENT_ICON_PREVIEW_FAILED,
                iconId=icon_id,
                error=get_error_message(e),
            )
            return False

        self._post(EVENT_ICON_PREVIEW, iconId=icon_id, svgMarkup=markup)
        return True

    async def _worker(self, queue: asyncio.Queue[str]) -> None:
        while True:
            try:
                icon_id = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                await self._fetch_one(icon_id)
            finally:
                queue.task_done()

    async def fetch_previews(self, icon_ids: object) -> list[str]:
        """Fetch previews of up to ``max_requested`` unique ids.

        Returns:
            The ids that were processed, in request order

        """
        requested = unique_requested_ids(icon_ids, self.max_requested)
        queue: asyncio.Queue[str] = asyncio.Queue()
        for icon_id in requested:
            queue.put_nowait(icon_id)

        worker_count = min(self.max_workers, len(requested))
        if worker_count:
            await asyncio.gather(
                *(self._worker(queue) for _ in range(worker_count))
            )

        logger.debug("Fetched %d previews", len(requested))
        self._post(EVENT_PREVIEWS_COMPLETE, requestedIds=requested)
        return requested
