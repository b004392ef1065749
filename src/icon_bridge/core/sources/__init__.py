"""Icon sources, one per provider, behind a single registry."""

from collections.abc import Callable, Mapping
from typing import Any

from icon_bridge.constants import PROVIDER_LABELS
from icon_bridge.core.models import IconDescriptor, IconIndex
from icon_bridge.core.sources.azure import AzureIconSource
from icon_bridge.core.sources.base import IconSource
from icon_bridge.core.sources.github import GitHubIconSource
from icon_bridge.exceptions import AuthRequiredError, UnknownProviderError
from icon_bridge.infrastructure.http import ApiTransport
from icon_bridge.utils.text import normalize_string

__all__ = [
    "AzureIconSource",
    "GitHubIconSource",
    "IconSource",
    "SourceRegistry",
]

PatLookup = Callable[[str], str]


class SourceRegistry:
    """Dispatches index and file requests to the provider's source.

    Args:
        transport: Shared HTTP transport
        pat_lookup: Returns the current token of a provider, read at call
            time so a saved token applies without rebuilding the registry

    """

    def __init__(self, transport: ApiTransport, pat_lookup: PatLookup) -> None:
        self._pat_lookup = pat_lookup
        self._sources: dict[str, IconSource] = {
            source.provider: source
            for source in (
                GitHubIconSource(transport),
                AzureIconSource(transport),
            )
        }

    def register(self, source: IconSource) -> None:
        self._sources[source.provider] = source

    def get(self, provider: str) -> IconSource:
        try:
            return self._sources[provider]
        except KeyError:
            msg = f"Unknown provider: {provider}"
            raise UnknownProviderError(msg, provider) from None

    async def fetch_index(
        self, provider: str, provider_config: Mapping[str, Any]
    ) -> IconIndex:
        return await self.get(provider).fetch_index(provider_config)

    async def fetch_file_text(self, descriptor: IconDescriptor) -> str:
        """Fetch one icon body with the provider's current token.

        Raises:
            AuthRequiredError: If the provider has no token configured
            UnknownProviderError: If the descriptor's provider is unknown

        """
        source = self.get(descriptor.provider)
        pat = normalize_string(self._pat_lookup(descriptor.provider))
        if not pat:
            label = PROVIDER_LABELS.get(descriptor.provider, descriptor.provider)
            msg = f"{label} PAT is required."
            raise AuthRequiredError(msg, descriptor.provider)
        return await source.fetch_file_text(descriptor, pat)
