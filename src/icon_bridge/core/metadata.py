"""Icon metadata sidecar loading and lookup.

A repository may ship an ``Icons.json`` next to its SVGs giving each icon a
display title, a canonical name and a tag. Hand-maintained sidecars vary
wildly in shape, so parsing is lenient: several container layouts, field
synonyms in any casing and trailing commas are all accepted.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import orjson

from icon_bridge.core.models import IconMetadata
from icon_bridge.exceptions import IconBridgeError, InvalidMetadataError
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import icon_lookup_key_variants, normalize_string

logger = get_logger(__name__)

MetadataLookup = dict[str, IconMetadata]

CONTAINER_KEYS = ("icons", "value", "items", "data", "Icon", "Icons")
NAME_KEYS = ("name", "iconName")
TITLE_KEYS = ("title", "displayName", "label")
TAG_KEYS = ("tag", "tags", "keyword")

_BOM = "\ufeff"
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def extract_metadata_rows(payload: Any) -> list[Any]:
    """Locate the list of icon rows inside a decoded sidecar."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in CONTAINER_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    for value in payload.values():
        if isinstance(value, list) and value and isinstance(value[0], dict):
            return value

    return []


def read_row_value(row: dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the first field matching one of ``keys`` case-insensitively."""
    for key in keys:
        target = key.lower()
        for row_key, value in row.items():
            if str(row_key).lower() == target:
                return value
    return ""


def _tag_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(
            text for text in (normalize_string(item) for item in value) if text
        )
    return normalize_string(value)


def _add_record(
    lookup: MetadataLookup, value: str, metadata: IconMetadata
) -> None:
    for key in icon_lookup_key_variants(value):
        lookup.setdefault(key, metadata)


def _decode(text: str) -> Any:
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        pass

    try:
        return orjson.loads(_TRAILING_COMMA_RE.sub(r"\1", text))
    except orjson.JSONDecodeError as e:
        msg = "Icons.json is not valid JSON."
        raise InvalidMetadataError(msg) from e


def parse_icons_metadata(json_text: str | bytes | None) -> MetadataLookup:
    """Parse sidecar text into a lookup keyed by normalized name variants.

    Args:
        json_text: Raw sidecar content

    Returns:
        Mapping of lookup key to metadata; first writer wins per key

    Raises:
        InvalidMetadataError: If the text is not JSON even after removing
            trailing commas

    """
    if isinstance(json_text, bytes):
        json_text = json_text.decode("utf-8", errors="replace")
    trimmed = normalize_string(json_text).lstrip(_BOM).strip()
    if not trimmed:
        return {}

    lookup: MetadataLookup = {}
    for row in extract_metadata_rows(_decode(trimmed)):
        if not isinstance(row, dict):
            continue

        raw_name = normalize_string(read_row_value(row, NAME_KEYS))
        raw_title = normalize_string(read_row_value(row, TITLE_KEYS))
        raw_tag = _tag_text(read_row_value(row, TAG_KEYS))
        if not raw_name and not raw_title:
            continue

        metadata = IconMetadata(
            name=raw_name or raw_title,
            title=raw_title or raw_name,
            tag=raw_tag,
        )
        _add_record(lookup, raw_name, metadata)
        _add_record(lookup, raw_title, metadata)

    return lookup


def find_icon_metadata(
    icon_name: str, lookup: MetadataLookup | None
) -> IconMetadata | None:
    """Return metadata for ``icon_name`` trying each key variant in order."""
    if not lookup:
        return None
    for key in icon_lookup_key_variants(icon_name):
        metadata = lookup.get(key)
        if metadata is not None:
            return metadata
    return None


async def load_metadata(
    fetch_text: Callable[[str], Awaitable[str]],
    candidates: Iterable[str],
) -> MetadataLookup:
    """Load the first sidecar candidate that fetches and parses.

    The sidecar is optional: every miss, whether a 404, a transport error
    or malformed JSON, moves on to the next candidate, and exhausting the
    list yields an empty lookup.

    Args:
        fetch_text: Provider-specific file reader
        candidates: Sidecar paths in priority order

    Returns:
        Metadata lookup, possibly empty

    """
    for path in candidates:
        try:
            text = await fetch_text(path)
            lookup = parse_icons_metadata(text)
        except IconBridgeError as e:
            logger.debug("No usable icon metadata at %s: %s", path, e)
            continue

        logger.debug("Loaded %d metadata keys from %s", len(lookup), path)
        return lookup

    return {}
