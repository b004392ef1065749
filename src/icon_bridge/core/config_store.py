"""Provider configuration: normalization, reconciliation and persistence.

The whole configuration is one JSON blob stored under ``STORAGE_KEY`` in a
``KeyValueStore``. Every mutation is followed by ``ensure_selected_provider``
so that ``selectedProvider`` only ever names a connected provider.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, cast

from icon_bridge.constants import (
    DEFAULT_BRANCH,
    PROVIDER_AZURE,
    PROVIDER_GITHUB,
    PROVIDER_KINDS,
    STORAGE_KEY,
)
from icon_bridge.core.protocols import KeyValueStore
from icon_bridge.exceptions import InvalidInputError
from icon_bridge.logger import get_logger
from icon_bridge.types import AppConfig, ProviderConfig, ProviderKind
from icon_bridge.utils.text import normalize_string

logger = get_logger(__name__)


def normalize_provider(value: Any) -> ProviderKind | None:
    """Return ``value`` when it names a supported provider, else None."""
    if value in (PROVIDER_AZURE, PROVIDER_GITHUB):
        return cast("ProviderKind", value)
    return None


def require_provider(value: Any) -> ProviderKind:
    provider = normalize_provider(value)
    if provider is None:
        msg = "Invalid provider."
        raise InvalidInputError(msg)
    return provider


def normalize_provider_config(provider: str, raw: Any) -> ProviderConfig:
    """Coerce a raw provider entry into its normalized shape.

    Unknown keys are dropped, strings are trimmed and an empty branch
    becomes ``DEFAULT_BRANCH``.
    """
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    branch = normalize_string(source.get("branch")) or DEFAULT_BRANCH

    if provider == PROVIDER_AZURE:
        return {
            "connected": bool(source.get("connected")),
            "organizationUrl": normalize_string(source.get("organizationUrl")),
            "project": normalize_string(source.get("project")),
            "pat": normalize_string(source.get("pat")),
            "repository": normalize_string(source.get("repository")),
            "branch": branch,
        }

    return {
        "connected": bool(source.get("connected")),
        "pat": normalize_string(source.get("pat")),
        "repository": normalize_string(source.get("repository")),
        "branch": branch,
    }


def normalize_config(raw: Any) -> AppConfig:
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    providers = source.get("providers")
    if not isinstance(providers, Mapping):
        providers = {}

    config: AppConfig = {
        "selectedProvider": normalize_provider(source.get("selectedProvider")),
        "providers": {
            "azure": normalize_provider_config(
                PROVIDER_AZURE, providers.get(PROVIDER_AZURE)
            ),
            "github": normalize_provider_config(
                PROVIDER_GITHUB, providers.get(PROVIDER_GITHUB)
            ),
        },
    }
    ensure_selected_provider(config)
    return config


def default_config() -> AppConfig:
    return normalize_config(None)


def first_connected_provider(config: AppConfig) -> ProviderKind | None:
    for provider in PROVIDER_KINDS:
        if config["providers"][provider]["connected"]:
            return cast("ProviderKind", provider)
    return None


def ensure_selected_provider(config: AppConfig) -> ProviderKind | None:
    """Reconcile ``selectedProvider`` with the connected providers.

    Keeps the selection when it is connected, otherwise falls back to the
    first connected provider (azure, then github) or None. Updates
    ``config`` in place and returns the resulting selection.
    """
    selected = normalize_provider(config.get("selectedProvider"))
    if selected is None or not config["providers"][selected]["connected"]:
        selected = first_connected_provider(config)
    config["selectedProvider"] = selected
    return selected


class ConfigStore:
    """Owns the in-memory AppConfig and its persisted copy."""

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self.config: AppConfig = default_config()

    @property
    def selected_provider(self) -> ProviderKind | None:
        return self.config["selectedProvider"]

    async def load(self) -> AppConfig:
        stored = await self.store.get(self.key)
        self.config = normalize_config(stored)
        logger.debug(
            "Loaded configuration, selected provider: %s",
            self.config["selectedProvider"],
        )
        return self.config

    async def persist(self) -> None:
        await self.store.set(self.key, copy.deepcopy(self.config))

    def ensure_selected_provider(self) -> ProviderKind | None:
        return ensure_selected_provider(self.config)

    def provider_config(self, provider: str) -> ProviderConfig:
        return self.config["providers"][require_provider(provider)]

    def is_connected(self, provider: Any) -> bool:
        kind = normalize_provider(provider)
        return bool(kind and self.config["providers"][kind]["connected"])

    def pat_for(self, provider: str) -> str:
        kind = normalize_provider(provider)
        if kind is None:
            return ""
        return self.config["providers"][kind]["pat"]

    def providers_snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.config["providers"]))

    def _merge(
        self, provider: ProviderKind, values: Mapping[str, Any]
    ) -> ProviderConfig:
        merged = {
            **self.config["providers"][provider],
            **values,
            "connected": True,
        }
        normalized = normalize_provider_config(provider, merged)
        self.config["providers"][provider] = normalized
        return normalized

    def save_provider(
        self,
        provider: Any,
        values: Any,
        *,
        select: bool = False,
    ) -> ProviderKind:
        """Merge user-submitted values into a provider and mark it connected.

        The provider becomes selected when ``select`` is set or when nothing
        is selected yet.

        Raises:
            InvalidInputError: If ``provider`` is not a supported provider

        """
        kind = require_provider(provider)
        incoming = values if isinstance(values, Mapping) else {}
        self._merge(kind, incoming)

        if select or not self.config["selectedProvider"]:
            self.config["selectedProvider"] = kind
        self.ensure_selected_provider()
        logger.info("Saved %s provider configuration", kind)
        return kind

    def select_provider(self, provider: Any) -> ProviderKind:
        """Select a connected provider.

        Raises:
            InvalidInputError: If the provider is invalid or not connected

        """
        kind = require_provider(provider)
        if not self.config["providers"][kind]["connected"]:
            msg = "Provider is not configured yet."
            raise InvalidInputError(msg, kind)
        self.config["selectedProvider"] = kind
        return kind

    def apply_normalized(
        self, provider: ProviderKind, normalized: Mapping[str, Any]
    ) -> ProviderConfig:
        """Fold provider-confirmed canonical values back into the config."""
        return self._merge(provider, normalized)
