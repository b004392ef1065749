"""Domain models for the icon index."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from icon_bridge.constants import (
    DEFAULT_BRANCH,
    DEFAULT_ICON_LABEL,
    PROVIDER_AZURE,
    PROVIDER_GITHUB,
    VARIANT_OUTLINE,
)
from icon_bridge.utils.text import (
    label_sort_key,
    normalize_lookup_key,
    normalize_string,
    strip_icon_prefix,
)


@dataclass(slots=True, frozen=True)
class IconSummary:
    """An icon as listed to the UI.

    Attributes:
        id: ``"{provider}:{repoPath}"``, unique across providers
        path: Repository path of the SVG file
        name: File-derived or metadata-provided name
        title: Human display label
        tag: Optional classification, "" when absent

    """

    id: str
    path: str
    name: str
    title: str
    tag: str = ""

    @property
    def display_label(self) -> str:
        return (
            normalize_string(self.title)
            or normalize_string(self.name)
            or DEFAULT_ICON_LABEL
        )

    def sort_key(self) -> tuple[str, str]:
        return label_sort_key(self.display_label), self.path

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class GitHubDescriptor:
    """Everything needed to fetch one icon body from GitHub."""

    owner: str
    repo: str
    path: str
    branch: str = DEFAULT_BRANCH
    sha: str = ""
    provider: str = field(default=PROVIDER_GITHUB, init=False)


@dataclass(slots=True, frozen=True)
class AzureDescriptor:
    """Everything needed to fetch one icon body from Azure DevOps."""

    organization: str
    project: str
    repository: str
    path: str
    branch: str = DEFAULT_BRANCH
    provider: str = field(default=PROVIDER_AZURE, init=False)


IconDescriptor = GitHubDescriptor | AzureDescriptor


@dataclass(slots=True, frozen=True)
class IconMetadata:
    """One sidecar record."""

    name: str
    title: str
    tag: str = ""


@dataclass(slots=True)
class IconIndex:
    """Result of listing one provider's repository."""

    icons: list[IconSummary]
    descriptors_by_id: dict[str, IconDescriptor]
    normalized_config: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class IconIdentity:
    """Family, variant and last applied size of a placed icon."""

    base_name: str
    variant: str = VARIANT_OUTLINE
    size: int = 0
    provider: str = ""
    icon_id: str = ""
    path: str = ""

    @property
    def base_key(self) -> str:
        return family_key(self.base_name)


def family_key(base_name: str) -> str:
    """Comparable key of an icon family, ignoring an ``icon`` prefix."""
    return normalize_lookup_key(strip_icon_prefix(base_name))
