"""The single owned application state passed into every component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from icon_bridge.constants import PROVIDER_KINDS
from icon_bridge.core.cache import ContentCache
from icon_bridge.core.config_store import ConfigStore, normalize_provider
from icon_bridge.core.models import IconDescriptor, IconIndex, IconSummary
from icon_bridge.types import PublicState


def _per_provider(factory: type) -> dict[str, Any]:
    return {provider: factory() for provider in PROVIDER_KINDS}


@dataclass(slots=True)
class AppState:
    """Runtime state of one session.

    Attributes:
        config_store: Persisted provider configuration
        content_cache: Fetched SVG markup by icon id
        icons_by_provider: Sorted listing per provider
        descriptors_by_provider: Fetch descriptors per provider, by icon id
        sync_token: Generation counter of the latest sync attempt

    """

    config_store: ConfigStore
    content_cache: ContentCache
    icons_by_provider: dict[str, list[IconSummary]] = field(
        default_factory=lambda: _per_provider(list)
    )
    descriptors_by_provider: dict[str, dict[str, IconDescriptor]] = field(
        default_factory=lambda: _per_provider(dict)
    )
    sync_token: int = 0

    def next_sync_token(self) -> int:
        self.sync_token += 1
        return self.sync_token

    def is_current(self, token: int) -> bool:
        return token == self.sync_token

    def replace_index(self, provider: str, index: IconIndex) -> None:
        """Swap in a provider's listing and drop its cached bodies."""
        self.icons_by_provider[provider] = list(index.icons)
        self.descriptors_by_provider[provider] = dict(index.descriptors_by_id)
        self.content_cache.invalidate_provider(provider)

    def icons_for(self, provider: str | None) -> list[IconSummary]:
        if provider is None:
            return []
        return self.icons_by_provider.get(provider, [])

    def find_descriptor(self, icon_id: str) -> IconDescriptor | None:
        provider = normalize_provider(icon_id.split(":", 1)[0])
        if provider is None:
            return None
        return self.descriptors_by_provider[provider].get(icon_id)

    def public_state(self) -> PublicState:
        """Snapshot sent with every UI event, reconciling the selection."""
        selected = self.config_store.ensure_selected_provider()
        return {
            "selectedProvider": selected,
            "providers": self.config_store.providers_snapshot(),
            "icons": [icon.to_dict() for icon in self.icons_for(selected)],
        }
