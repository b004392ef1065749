"""Centralized type definitions for icon-bridge.

TypedDicts describe the JSON-shaped structures that cross a boundary: the
persisted configuration blob, the settings file and UI messages. Key names
of persisted structures are camelCase because the UI peer reads them.
"""

from pathlib import Path
from typing import Any, Literal, TypedDict

ProviderKind = Literal["github", "azure"]

# =============================================================================
# Settings (settings.conf)
# =============================================================================


class NetworkSettings(TypedDict):
    """Network options. A timeout of 0 disables transport timeouts."""

    timeout_seconds: int


class DirectorySettings(TypedDict):
    """Directory paths."""

    storage: Path
    logs: Path


class Settings(TypedDict):
    """Global application settings."""

    config_version: str
    log_level: str
    console_log_level: str
    network: NetworkSettings
    directory: DirectorySettings


# =============================================================================
# Provider configuration (persisted blob)
# =============================================================================


class GitHubProviderConfig(TypedDict):
    """Normalized GitHub provider configuration."""

    connected: bool
    pat: str
    repository: str
    branch: str


class AzureProviderConfig(TypedDict):
    """Normalized Azure DevOps provider configuration."""

    connected: bool
    organizationUrl: str  # noqa: N815
    project: str
    pat: str
    repository: str
    branch: str


ProviderConfig = GitHubProviderConfig | AzureProviderConfig


class ProvidersConfig(TypedDict):
    """Configuration of every supported provider."""

    azure: AzureProviderConfig
    github: GitHubProviderConfig


class AppConfig(TypedDict):
    """Complete persisted configuration."""

    selectedProvider: ProviderKind | None  # noqa: N815
    providers: ProvidersConfig


# =============================================================================
# UI messages
# =============================================================================


class PublicState(TypedDict):
    """Snapshot carried by every outbound UI event."""

    selectedProvider: ProviderKind | None  # noqa: N815
    providers: dict[str, Any]
    icons: list[dict[str, str]]


UiMessage = dict[str, Any]
