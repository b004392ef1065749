"""String normalization for icon names, labels and lookup keys.

Icon repositories are inconsistent about naming: ``IconHomeOutline.svg``,
``home-outline.svg`` and a sidecar title of ``Home`` all describe the same
icon. These helpers derive comparable keys, human labels and
family/variant splits from such names.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any, NamedTuple

from icon_bridge.constants import (
    DEFAULT_ICON_LABEL,
    VARIANT_BULK,
    VARIANT_FILL,
    VARIANT_OUTLINE,
)

_SVG_SUFFIX_RE = re.compile(r"\.svg$", re.IGNORECASE)
_ICON_PREFIX_RE = re.compile(r"^(?i:icon)(?=[A-Z0-9_ \-])")
_STYLE_SUFFIX_RE = re.compile(
    r"[_\-\s]?(outlined|outline|filled|fill|bulk)$", re.IGNORECASE
)
_NON_KEY_CHARS_RE = re.compile(r"[^a-z0-9]+")
_SEPARATOR_RUN_RE = re.compile(r"[_-]+")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_WHITESPACE_RE = re.compile(r"\s+")
_KEBAB_SEPARATOR_RE = re.compile(r"[\s_\-]+")
_TRAILING_SEPARATORS_RE = re.compile(r"[\s_\-]+$")

_VARIANT_ALIASES = {
    "outline": VARIANT_OUTLINE,
    "outlined": VARIANT_OUTLINE,
    "fill": VARIANT_FILL,
    "filled": VARIANT_FILL,
    "bulk": VARIANT_BULK,
}


class IconNameParts(NamedTuple):
    """Family name and style variant parsed from an icon name."""

    base_name: str
    variant: str


def normalize_string(value: Any) -> str:
    """Return ``value`` as a trimmed string; None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def strip_svg_extension(value: Any) -> str:
    return _SVG_SUFFIX_RE.sub("", normalize_string(value))


def strip_icon_prefix(value: Any) -> str:
    """Remove a leading "icon" word (``IconHome``, ``icon-home``)."""
    return _ICON_PREFIX_RE.sub("", normalize_string(value))


def strip_style_suffix(value: Any) -> str:
    """Remove a trailing style suffix (``home-outline``, ``HomeFilled``)."""
    return _STYLE_SUFFIX_RE.sub("", normalize_string(value))


def normalize_lookup_key(value: Any) -> str:
    """Derive a comparison key: no ``.svg``, lowercase, ``[a-z0-9]`` only."""
    raw = strip_svg_extension(value).lower()
    if not raw:
        return ""
    return _NON_KEY_CHARS_RE.sub("", raw)


def icon_lookup_key_variants(value: Any) -> list[str]:
    """Return the ordered, de-duplicated lookup keys for a name.

    The order is: raw, without prefix, without suffix, without both.
    """
    raw = strip_svg_extension(value)
    if not raw:
        return []

    candidates = (
        normalize_lookup_key(raw),
        normalize_lookup_key(strip_icon_prefix(raw)),
        normalize_lookup_key(strip_style_suffix(raw)),
        normalize_lookup_key(strip_style_suffix(strip_icon_prefix(raw))),
    )

    unique: list[str] = []
    for key in candidates:
        if key and key not in unique:
            unique.append(key)
    return unique


def humanize_icon_label(value: Any) -> str:
    """Turn a file name such as ``IconArrowLeft-outline`` into ``Arrow Left``."""
    raw = strip_svg_extension(value)
    if not raw:
        return DEFAULT_ICON_LABEL

    stripped = strip_style_suffix(strip_icon_prefix(raw))
    spaced = _SEPARATOR_RUN_RE.sub(" ", stripped)
    spaced = _CAMEL_BOUNDARY_RE.sub(r"\1 \2", spaced)
    spaced = _WHITESPACE_RE.sub(" ", spaced).strip()
    return spaced or raw


def extract_icon_base_and_variant(value: Any) -> IconNameParts:
    """Split an icon name into its family name and variant.

    The variant is normalized to outline, fill or bulk; it is empty when
    the name carries no recognized suffix (callers default to outline).

    Examples:
        >>> extract_icon_base_and_variant("home-filled")
        IconNameParts(base_name='home', variant='fill')
        >>> extract_icon_base_and_variant("settings")
        IconNameParts(base_name='settings', variant='')

    """
    raw = strip_svg_extension(value)
    match = _STYLE_SUFFIX_RE.search(raw)
    if not match:
        return IconNameParts(raw, "")

    base_name = _TRAILING_SEPARATORS_RE.sub("", raw[: match.start()])
    if not base_name:
        return IconNameParts(raw, "")

    return IconNameParts(base_name, _VARIANT_ALIASES[match.group(1).lower()])


def to_kebab_case(value: Any) -> str:
    spaced = _CAMEL_BOUNDARY_RE.sub(r"\1-\2", normalize_string(value))
    return _KEBAB_SEPARATOR_RE.sub("-", spaced).strip("-").lower()


def format_icon_name(base_name: Any, variant: Any) -> str:
    """Build a canonical node name like ``arrow-left-fill``."""
    base = to_kebab_case(base_name)
    suffix = normalize_string(variant).lower()
    if not suffix:
        return base
    return f"{base}-{suffix}" if base else suffix


def icon_name_from_path(path: Any) -> str:
    """Return the file name of a repository path without ``.svg``."""
    file_name = normalize_string(path).replace("\\", "/").split("/")[-1]
    return strip_svg_extension(file_name) or DEFAULT_ICON_LABEL


def normalize_repo_path(path: Any) -> str:
    return normalize_string(path).replace("\\", "/").lstrip("/")


def is_svg_path(path: Any) -> bool:
    return normalize_repo_path(path).lower().endswith(".svg")


def is_icons_folder_svg_path(path: Any) -> bool:
    """Whether ``path`` is an SVG file below a directory named ``icons``."""
    normalized = normalize_repo_path(path)
    if not normalized.lower().endswith(".svg"):
        return False
    directories = normalized.split("/")[:-1]
    return any(segment.lower() == "icons" for segment in directories)


def label_sort_key(value: Any) -> str:
    """Case- and diacritic-insensitive sort key for display labels."""
    decomposed = unicodedata.normalize("NFKD", normalize_string(value))
    stripped = "".join(
        char for char in decomposed if not unicodedata.combining(char)
    )
    return stripped.casefold()
