"""Host collaborator protocols.

The design document, the persistent client storage and the UI peer are
owned by the host application. Core components depend on these protocols
only, so the plugin host, the command line and tests can each provide
their own implementation.

Paints are plain dicts shaped like the host's paint objects, e.g.
``{"type": "SOLID", "color": {"r": 0.0, "g": 0.0, "b": 0.0}}``. Lists of
paints are treated as immutable: callers assign a new list to change them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Paint = dict[str, Any]


@runtime_checkable
class KeyValueStore(Protocol):
    """Persistent storage with async get/set by key."""

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is unset."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        ...


@runtime_checkable
class UiChannel(Protocol):
    """Outbound half of the message channel to the UI peer."""

    def post(self, message: dict[str, Any]) -> None:
        """Deliver one event dict to the UI."""
        ...


@runtime_checkable
class DocumentNode(Protocol):
    """A node of the host document tree.

    Attributes:
        name: Layer name shown to the user
        x: Left edge relative to the parent
        y: Top edge relative to the parent
        width: Current width in pixels
        height: Current height in pixels
        parent: Containing node, None once removed
        children: Child nodes in paint order
        fills: Fill paints
        strokes: Stroke paints

    """

    name: str
    x: float
    y: float
    width: float
    height: float
    fills: list[Paint]
    strokes: list[Paint]
    visible: bool
    locked: bool
    opacity: float
    blend_mode: str
    rotation: float
    layout_align: str
    layout_grow: float
    layout_positioning: str
    constraints: dict[str, str]

    @property
    def parent(self) -> DocumentNode | None: ...

    @property
    def children(self) -> list[DocumentNode]: ...

    def get_plugin_data(self, namespace: str, key: str) -> str:
        """Return the stored value, or "" when unset."""
        ...

    def set_plugin_data(self, namespace: str, key: str, value: str) -> None: ...

    def resize(self, width: float, height: float) -> None: ...

    def insert_child(self, index: int, child: DocumentNode) -> None: ...

    def append_child(self, child: DocumentNode) -> None: ...

    def remove(self) -> None: ...


@runtime_checkable
class Document(Protocol):
    """The host document and plugin window."""

    @property
    def current_page(self) -> DocumentNode: ...

    def create_node_from_svg(self, markup: str) -> DocumentNode:
        """Parse SVG markup into a new, unattached node tree."""
        ...

    def get_selection(self) -> list[DocumentNode]: ...

    def set_selection(self, nodes: list[DocumentNode]) -> None: ...

    def viewport_center(self) -> tuple[float, float]: ...

    def scroll_into_view(self, nodes: list[DocumentNode]) -> None: ...

    def notify(self, message: str) -> None:
        """Show a transient notice to the user."""
        ...

    def resize_ui(self, width: float, height: float) -> None: ...

    def close(self) -> None: ...
