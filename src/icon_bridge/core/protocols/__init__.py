"""Core protocols for the host collaborators.

Available protocols:
    KeyValueStore: Persistent async key-value storage
    UiChannel: Outbound messages to the UI peer
    Document: Host document, selection and plugin window
    DocumentNode: One node of the document tree

Usage:
    from icon_bridge.core.protocols import Document, UiChannel

"""

from .host import (
    Document,
    DocumentNode,
    KeyValueStore,
    Paint,
    UiChannel,
)

__all__ = [
    "Document",
    "DocumentNode",
    "KeyValueStore",
    "Paint",
    "UiChannel",
]
