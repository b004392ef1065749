"""Placing icons and switching placed icons between variants and sizes.

A placed icon remembers its identity (provider, icon id, family name,
variant and size) as plugin data on the host node. Changing the variant or
size of a selection either relabels nodes in place or swaps them for a
freshly fetched SVG, keeping position, stacking order and visual state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from icon_bridge.constants import (
    ICON_TINT_COLOR,
    ICON_VARIANTS,
    NODE_DATA_NAMESPACE,
    NODE_KEY_BASE_NAME,
    NODE_KEY_ICON_ID,
    NODE_KEY_MANAGED,
    NODE_KEY_PATH,
    NODE_KEY_PROVIDER,
    NODE_KEY_SIZE,
    NODE_KEY_VARIANT,
    PRESERVED_NODE_PROPERTIES,
    SIZE_CHANGE_THRESHOLD,
    VARIANT_OUTLINE,
)
from icon_bridge.core.config_store import normalize_provider
from icon_bridge.core.models import IconDescriptor, IconIdentity, family_key
from icon_bridge.core.protocols import Document, DocumentNode, Paint
from icon_bridge.core.state import AppState
from icon_bridge.exceptions import (
    IconBridgeError,
    InvalidInputError,
    VariantMissingError,
)
from icon_bridge.logger import get_logger
from icon_bridge.utils.text import (
    extract_icon_base_and_variant,
    format_icon_name,
    icon_name_from_path,
    normalize_string,
)

logger = get_logger(__name__)


@dataclass(slots=True)
class VariantApplyReport:
    """Result of one apply-variant/size command.

    Attributes:
        nodes: Resulting selection, replaced nodes substituted
        replaced: Nodes swapped for a newly fetched SVG
        relabeled: Nodes updated by name and metadata only
        missing: Names of nodes whose family lacks the requested variant
        failed: ``(name, message)`` of nodes whose replacement failed
        skipped: Nodes that are not recognizable icons

    """

    nodes: list[DocumentNode] = field(default_factory=list)
    replaced: int = 0
    relabeled: int = 0
    missing: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    skipped: int = 0

    @property
    def changed(self) -> int:
        return self.replaced + self.relabeled

    def notice(self, variant: str | None) -> str | None:
        """Aggregate per-node problems into one user notice."""
        parts = []
        if self.missing:
            label = variant or "requested"
            parts.append(
                f"No {label} variant for: {', '.join(self.missing)}"
            )
        if self.failed:
            details = ", ".join(
                f"{name} ({msg})" for name, msg in self.failed
            )
            parts.append(f"Could not update: {details}")
        return ". ".join(parts) if parts else None


# =============================================================================
# Node helpers
# =============================================================================


def nominal_size(node: DocumentNode) -> int:
    """Largest side of a node, rounded to whole pixels."""
    return round(max(node.width, node.height))


def _coerce_size(value: str) -> int:
    try:
        return max(int(float(value)), 0)
    except (ValueError, OverflowError):
        return 0


def read_node_identity(node: DocumentNode) -> IconIdentity | None:
    """Return the identity stored on a managed node, else None."""
    if node.get_plugin_data(NODE_DATA_NAMESPACE, NODE_KEY_MANAGED) != "1":
        return None

    def read(key: str) -> str:
        return normalize_string(
            node.get_plugin_data(NODE_DATA_NAMESPACE, key)
        )

    base_name = read(NODE_KEY_BASE_NAME)
    if not base_name:
        return None

    variant = read(NODE_KEY_VARIANT).lower()
    return IconIdentity(
        base_name=base_name,
        variant=variant if variant in ICON_VARIANTS else VARIANT_OUTLINE,
        size=_coerce_size(read(NODE_KEY_SIZE)),
        provider=read(NODE_KEY_PROVIDER),
        icon_id=read(NODE_KEY_ICON_ID),
        path=read(NODE_KEY_PATH),
    )


def write_node_identity(node: DocumentNode, identity: IconIdentity) -> None:
    values = {
        NODE_KEY_MANAGED: "1",
        NODE_KEY_PROVIDER: identity.provider,
        NODE_KEY_ICON_ID: identity.icon_id,
        NODE_KEY_PATH: identity.path,
        NODE_KEY_BASE_NAME: identity.base_name,
        NODE_KEY_VARIANT: identity.variant,
        NODE_KEY_SIZE: str(identity.size),
    }
    for key, value in values.items():
        node.set_plugin_data(NODE_DATA_NAMESPACE, key, value)


def _tinted(paints: object) -> object:
    if not isinstance(paints, list):
        return paints
    result: list[Paint] = []
    for paint in paints:
        if isinstance(paint, dict) and paint.get("type") == "SOLID":
            paint = {**paint, "color": dict(ICON_TINT_COLOR)}
        result.append(paint)
    return result


def tint_node(node: DocumentNode) -> None:
    """Recolor every solid fill and stroke of a node tree."""
    pending = [node]
    while pending:
        current = pending.pop()
        current.fills = _tinted(current.fills)
        current.strokes = _tinted(current.strokes)
        pending.extend(current.children)


def scale_to_size(node: DocumentNode, size: int) -> None:
    """Resize so the larger side equals ``size``, keeping proportions."""
    largest = max(node.width, node.height)
    if largest <= 0:
        node.resize(size, size)
        return
    factor = size / largest
    node.resize(node.width * factor, node.height * factor)


def copy_node_properties(source: DocumentNode, target: DocumentNode) -> None:
    for name in PRESERVED_NODE_PROPERTIES:
        if hasattr(source, name):
            setattr(target, name, getattr(source, name))


def center_on(node: DocumentNode, center_x: float, center_y: float) -> None:
    node.x = center_x - node.width / 2
    node.y = center_y - node.height / 2


def parse_variant(value: object) -> str | None:
    """Validate a requested variant; None or "" means no change.

    Raises:
        InvalidInputError: If the variant is not outline, fill or bulk

    """
    variant = normalize_string(value).lower()
    if not variant:
        return None
    if variant not in ICON_VARIANTS:
        msg = f"Unknown icon variant: {variant}"
        raise InvalidInputError(msg)
    return variant


def parse_size(value: object) -> int | None:
    """Validate a requested pixel size; None or "" means no change.

    Raises:
        InvalidInputError: If the size is not a positive number

    """
    if value is None or value == "":
        return None
    try:
        size = round(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        size = 0
    if size < 1:
        msg = f"Invalid icon size: {value}"
        raise InvalidInputError(msg)
    return size


# =============================================================================
# Engine
# =============================================================================


@dataclass(slots=True, frozen=True)
class _FamilyMember:
    icon_id: str
    descriptor: IconDescriptor
    base_name: str
    raw_variant: str


class VariantSizeEngine:
    """Inserts icons and rewrites placed icons over a host document."""

    def __init__(self, state: AppState, document: Document) -> None:
        self.state = state
        self.document = document

    def _members(self, provider: str) -> list[_FamilyMember]:
        members = []
        descriptors = self.state.descriptors_by_provider.get(provider, {})
        for icon_id, descriptor in descriptors.items():
            parts = extract_icon_base_and_variant(
                icon_name_from_path(descriptor.path)
            )
            members.append(
                _FamilyMember(
                    icon_id, descriptor, parts.base_name, parts.variant
                )
            )
        return members

    def find_variant(
        self, provider: str, base_key: str, variant: str
    ) -> _FamilyMember | None:
        """Find the family member of ``base_key`` with ``variant``.

        An unsuffixed file counts as the outline variant when no explicit
        ``-outline`` file exists.
        """
        family = [
            member
            for member in self._members(provider)
            if family_key(member.base_name) == base_key
        ]
        for member in family:
            if member.raw_variant == variant:
                return member
        if variant == VARIANT_OUTLINE:
            for member in family:
                if not member.raw_variant:
                    return member
        return None

    def resolve_identity(self, node: DocumentNode) -> IconIdentity | None:
        """Identity from node metadata, else from its name.

        The name match looks only at the selected provider's families and
        adopts any coincidental match.
        """
        stored = read_node_identity(node)
        if stored is not None:
            return stored

        provider = self.state.config_store.selected_provider
        if provider is None:
            return None

        parts = extract_icon_base_and_variant(node.name)
        if not parts.base_name:
            return None
        variant = parts.variant or VARIANT_OUTLINE
        member = self.find_variant(
            provider, family_key(parts.base_name), variant
        )
        if member is None:
            return None

        return IconIdentity(
            base_name=member.base_name,
            variant=variant,
            size=0,
            provider=provider,
            icon_id=member.icon_id,
            path=member.descriptor.path,
        )

    def _current_member(self, identity: IconIdentity) -> _FamilyMember | None:
        provider = normalize_provider(identity.provider)
        if provider is None:
            return None
        descriptor = self.state.descriptors_by_provider[provider].get(
            identity.icon_id
        )
        if descriptor is not None:
            return _FamilyMember(
                identity.icon_id,
                descriptor,
                identity.base_name,
                identity.variant,
            )
        return self.find_variant(provider, identity.base_key, identity.variant)

    async def render(
        self,
        icon_id: str,
        descriptor: IconDescriptor,
        size: int | None,
    ) -> DocumentNode:
        """Fetch an icon and create a tinted, sized node from it."""
        markup = await self.state.content_cache.get_or_fetch(
            icon_id, descriptor
        )
        node = self.document.create_node_from_svg(markup)
        if size:
            scale_to_size(node, size)
        tint_node(node)
        return node

    async def _replace(
        self,
        old: DocumentNode,
        member: _FamilyMember,
        identity: IconIdentity,
        size: int | None,
    ) -> DocumentNode:
        parent = old.parent
        index = parent.children.index(old) if parent is not None else None
        center_x = old.x + old.width / 2
        center_y = old.y + old.height / 2

        new = await self.render(member.icon_id, member.descriptor, size)
        if parent is not None and index is not None:
            parent.insert_child(index, new)
        else:
            self.document.current_page.append_child(new)

        copy_node_properties(old, new)
        center_on(new, center_x, center_y)
        new.name = format_icon_name(identity.base_name, identity.variant)
        write_node_identity(new, identity)
        old.remove()
        return new

    async def apply_variant_and_size(
        self,
        variant: object = None,
        size: object = None,
    ) -> VariantApplyReport:
        """Switch the selected icons to a variant and/or pixel size.

        Args:
            variant: outline, fill or bulk; None keeps each node's variant
            size: Pixel size; None keeps each node's size

        Returns:
            Report of what happened to each selected node

        Raises:
            InvalidInputError: If variant or size is malformed

        """
        requested_variant = parse_variant(variant)
        requested_size = parse_size(size)
        report = VariantApplyReport()
        if requested_variant is None and requested_size is None:
            return report

        selection = list(self.document.get_selection())
        if not selection:
            return report

        for node in selection:
            result = await self._apply_to_node(
                node, requested_variant, requested_size, report
            )
            report.nodes.append(result)

        self.document.set_selection(report.nodes)
        notice = report.notice(requested_variant)
        if notice:
            self.document.notify(notice)

        logger.info(
            "Variant/size applied: %d replaced, %d relabeled, %d missing, "
            "%d failed, %d skipped",
            report.replaced,
            report.relabeled,
            len(report.missing),
            len(report.failed),
            report.skipped,
        )
        return report

    async def _apply_to_node(
        self,
        node: DocumentNode,
        requested_variant: str | None,
        requested_size: int | None,
        report: VariantApplyReport,
    ) -> DocumentNode:
        identity = self.resolve_identity(node)
        if identity is None:
            report.skipped += 1
            return node

        current_size = nominal_size(node)
        desired_variant = requested_variant or identity.variant
        desired_size = requested_size or current_size or identity.size or None

        if desired_variant != identity.variant:
            member = self.find_variant(
                identity.provider, identity.base_key, desired_variant
            )
        else:
            member = self._current_member(identity)

        if member is None:
            logger.debug(
                "%s has no %s variant", identity.base_name, desired_variant
            )
            report.missing.append(node.name or identity.base_name)
            return node

        target = IconIdentity(
            base_name=identity.base_name,
            variant=desired_variant,
            size=desired_size or identity.size,
            provider=identity.provider,
            icon_id=member.icon_id,
            path=member.descriptor.path,
        )
        identity_changed = (
            target.icon_id != identity.icon_id
            or target.variant != identity.variant
        )
        size_changed = (
            desired_size is not None
            and abs(desired_size - current_size) >= SIZE_CHANGE_THRESHOLD
        )

        if not identity_changed and not size_changed:
            node.name = format_icon_name(target.base_name, target.variant)
            write_node_identity(node, target)
            report.relabeled += 1
            return node

        try:
            new = await self._replace(node, member, target, desired_size)
        except IconBridgeError as e:
            logger.warning("Could not replace %s: %s", node.name, e)
            report.failed.append((node.name or identity.base_name, e.message))
            return node

        report.replaced += 1
        return new

    async def insert_icon(
        self,
        icon_id: str,
        title: object = None,
        name: object = None,
        size: object = None,
        variant: object = None,
    ) -> DocumentNode:
        """Place an icon at the viewport center of the current page.

        Args:
            icon_id: Listed icon id
            title: Preferred node name
            name: Fallback node name
            size: Optional pixel size
            variant: Optional variant of the same family to place instead

        Returns:
            The inserted node, selected and scrolled into view

        Raises:
            InvalidInputError: If the id, variant or size is malformed
            VariantMissingError: If the family lacks the requested variant
            IconBridgeError: If fetching the SVG fails

        """
        descriptor = self.state.find_descriptor(icon_id)
        if descriptor is None:
            msg = "Icon metadata not found. Please sync again."
            raise InvalidInputError(msg)

        requested_size = parse_size(size)
        parts = extract_icon_base_and_variant(
            icon_name_from_path(descriptor.path)
        )
        member = _FamilyMember(
            icon_id, descriptor, parts.base_name, parts.variant
        )
        requested_variant = parse_variant(variant)
        if requested_variant and requested_variant != (
            parts.variant or VARIANT_OUTLINE
        ):
            found = self.find_variant(
                descriptor.provider,
                family_key(parts.base_name),
                requested_variant,
            )
            if found is None:
                raise VariantMissingError(parts.base_name, requested_variant)
            member = found

        node = await self.render(
            member.icon_id, member.descriptor, requested_size
        )
        node.name = (
            normalize_string(title)
            or normalize_string(name)
            or icon_name_from_path(member.descriptor.path)
        )
        center_on(node, *self.document.viewport_center())

        page = self.document.current_page
        if node.parent is not page:
            page.append_child(node)

        write_node_identity(
            node,
            IconIdentity(
                base_name=member.base_name,
                variant=(
                    requested_variant or member.raw_variant or VARIANT_OUTLINE
                ),
                size=requested_size or nominal_size(node),
                provider=descriptor.provider,
                icon_id=member.icon_id,
                path=member.descriptor.path,
            ),
        )
        self.document.set_selection([node])
        self.document.scroll_into_view([node])
        logger.info("Inserted %s", node.name)
        return node
