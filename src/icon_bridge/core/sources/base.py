"""Provider-independent parts of building an icon index."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from icon_bridge.constants import PROVIDER_LABELS
from icon_bridge.core.metadata import MetadataLookup, find_icon_metadata
from icon_bridge.core.models import IconDescriptor, IconIndex, IconSummary
from icon_bridge.exceptions import AuthRequiredError
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import (
    humanize_icon_label,
    icon_name_from_path,
    is_icons_folder_svg_path,
    is_svg_path,
    normalize_string,
)

logger = get_logger(__name__)

T = TypeVar("T")


@runtime_checkable
class IconSource(Protocol):
    """One source-control provider able to list and read icons."""

    provider: str

    async def fetch_index(self, provider_config: Mapping[str, Any]) -> IconIndex:
        """List the repository and build its icon index."""
        ...

    async def fetch_file_text(self, descriptor: IconDescriptor, pat: str) -> str:
        """Fetch the raw body of one icon."""
        ...


def require_pat(provider: str, provider_config: Mapping[str, Any]) -> str:
    """Return the configured token or raise AuthRequiredError."""
    pat = normalize_string(provider_config.get("pat"))
    if not pat:
        label = PROVIDER_LABELS.get(provider, provider)
        msg = f"{label} PAT is required."
        raise AuthRequiredError(msg, provider)
    return pat


def select_svg_files(items: Iterable[T], path_of: Callable[[T], str]) -> list[T]:
    """Keep SVG files below an ``icons`` folder, else every SVG file."""
    listed = list(items)
    in_icons_folder = [
        item for item in listed if is_icons_folder_svg_path(path_of(item))
    ]
    if in_icons_folder:
        return in_icons_folder

    everywhere = [item for item in listed if is_svg_path(path_of(item))]
    if everywhere:
        logger.info(
            "No icons folder found, using %d SVG files from the whole "
            "repository",
            len(everywhere),
        )
    return everywhere


def build_icon_summary(
    provider: str, path: str, metadata_lookup: MetadataLookup
) -> IconSummary:
    """Create the listing entry for one SVG path."""
    file_name = icon_name_from_path(path)
    metadata = find_icon_metadata(file_name, metadata_lookup)
    return IconSummary(
        id=f"{provider}:{path}",
        path=path,
        name=metadata.name if metadata and metadata.name else file_name,
        title=(
            metadata.title
            if metadata and metadata.title
            else humanize_icon_label(file_name)
        ),
        tag=metadata.tag if metadata and metadata.tag else "",
    )


def build_icon_index(
    provider: str,
    descriptors: Iterable[IconDescriptor],
    metadata_lookup: MetadataLookup,
    normalized_config: dict[str, Any],
) -> IconIndex:
    """Assemble a sorted index from per-file descriptors."""
    icons: list[IconSummary] = []
    descriptors_by_id: dict[str, IconDescriptor] = {}
    for descriptor in descriptors:
        summary = build_icon_summary(provider, descriptor.path, metadata_lookup)
        icons.append(summary)
        descriptors_by_id[summary.id] = descriptor

    icons.sort(key=IconSummary.sort_key)
    return IconIndex(
        icons=icons,
        descriptors_by_id=descriptors_by_id,
        normalized_config=normalized_config,
    )
