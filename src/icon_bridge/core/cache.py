"""Session cache of fetched SVG markup.

Entries are keyed by icon id (``"{provider}:{path}"``) and live until the
provider they belong to resyncs, since a resync may point the same id at
different content.
"""

import re
from collections.abc import Awaitable, Callable

from icon_bridge.core.models import IconDescriptor
from icon_bridge.exceptions import InvalidSvgError
from icon_bridge.logger import get_logger

logger = get_logger(__name__)

_SVG_ROOT_RE = re.compile(r"<svg[\s>]", re.IGNORECASE)

SvgFetcher = Callable[[IconDescriptor], Awaitable[str]]


def normalize_svg_markup(markup: str | None) -> str:
    """Trim markup and require an ``<svg`` root tag.

    Raises:
        InvalidSvgError: If no ``<svg`` tag is present

    """
    text = (markup or "").strip()
    if not _SVG_ROOT_RE.search(text):
        msg = "Fetched file is not a valid SVG."
        raise InvalidSvgError(msg)
    return text


class ContentCache:
    """Unbounded per-session SVG cache with per-provider invalidation."""

    def __init__(self, fetcher: SvgFetcher) -> None:
        """Initialize the cache.

        Args:
            fetcher: Fetches a raw body for a descriptor on a miss

        """
        self._fetcher = fetcher
        self._entries: dict[str, str] = {}
        self._generations: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, icon_id: object) -> bool:
        return icon_id in self._entries

    def get(self, icon_id: str) -> str | None:
        return self._entries.get(icon_id)

    def put(self, icon_id: str, markup: str) -> None:
        self._entries[icon_id] = markup

    def invalidate_provider(self, provider: str) -> int:
        """Drop every entry of a provider.

        Fetches of that provider still in flight are not cached.

        Returns:
            Number of removed entries

        """
        self._generations[provider] = self._generations.get(provider, 0) + 1
        prefix = f"{provider}:"
        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Dropped %d cached SVGs for %s", len(stale), provider)
        return len(stale)

    async def get_or_fetch(self, icon_id: str, descriptor: IconDescriptor) -> str:
        """Return cached markup, fetching and validating it on a miss.

        Raises:
            InvalidSvgError: If the fetched body is not an SVG
            IconBridgeError: If the provider fetch fails

        """
        cached = self._entries.get(icon_id)
        if cached is not None:
            return cached

        provider = icon_id.split(":", 1)[0]
        generation = self._generations.get(provider, 0)
        markup = normalize_svg_markup(await self._fetcher(descriptor))
        # A resync during the fetch may have repointed this id.
        if self._generations.get(provider, 0) == generation:
            self._entries[icon_id] = markup
        else:
            logger.debug("Not caching %s, provider resynced mid-fetch", icon_id)
        return markup
