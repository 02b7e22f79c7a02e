"""Protocol definitions for document trees.

The transform never parses or serializes markup; it works against any tree
that satisfies these protocols, enabling both the native Node tree and
adapters over third-party parsers.
"""

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Protocol


class DocumentNode(Protocol):
    """An element node of a mutable document tree."""

    @property
    def tag_name(self) -> str:
        """Lowercase tag name, e.g. ``amp-img``."""
        ...

    @property
    def attributes(self) -> MutableMapping[str, str]:
        """Attribute map; a present attribute may have an empty value."""
        ...

    @property
    def children(self) -> Sequence["DocumentNode"]:
        """Element children in document order."""
        ...

    def append_child(self, child: "DocumentNode") -> None:
        """Append ``child`` as the last child of this node."""
        ...


class DocumentTree(Protocol):
    """A document: its root node plus a way to create new elements."""

    @property
    def root(self) -> DocumentNode:
        """The document root (the parent of ``<html>``)."""
        ...

    def create_element(
        self, tag_name: str, attributes: Mapping[str, str] | None = None
    ) -> DocumentNode:
        """Create a detached element owned by this document."""
        ...
