"""A minimal in-memory element tree."""

from collections.abc import Mapping, MutableMapping

DOCUMENT_TAG = "#document"


class Node:
    """Represents a DOM-like element node.

    - tag_name: lowercase tag, e.g. 'amp-img'; '#document' for the root
    - attributes: dict of attributes (names lowercased, first occurrence wins)
    - children: list of child Nodes
    - parent: reference to the parent Node (or None for a root/detached node)
    """

    __slots__ = ("attributes", "children", "parent", "tag_name")

    def __init__(self, tag_name: str, attributes: Mapping[str, str] | None = None) -> None:
        if not tag_name:
            raise ValueError("Empty tag_name passed to Node constructor")

        self.tag_name = tag_name.lower()
        self.attributes: MutableMapping[str, str] = {}
        for key, value in (attributes or {}).items():
            self.attributes.setdefault(key.lower(), value)
        self.children: list[Node] = []
        self.parent: Node | None = None

    def __repr__(self) -> str:
        attrs = "".join(f' {k}="{v}"' for k, v in self.attributes.items())
        return f"<{self.tag_name}{attrs}>"

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def append_child(self, child: "Node") -> None:
        """Append ``child`` as the last child, detaching it from any old parent."""
        ancestor: Node | None = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError(
                    f"Adding {child.tag_name} as child of {self.tag_name} "
                    "would create circular reference"
                )
            ancestor = ancestor.parent

        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    def first_child_by_tag(self, tag_name: str) -> "Node | None":
        """Return the first direct child with the given tag name."""
        for child in self.children:
            if child.tag_name == tag_name:
                return child
        return None

    @property
    def next_sibling(self) -> "Node | None":
        if self.parent is None:
            return None
        siblings = self.parent.children
        index = siblings.index(self)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def next_node(self) -> "Node | None":
        """Pre-order successor: first child, else the node after this subtree."""
        if self.children:
            return self.children[0]
        return self.skip_node_and_children()

    def skip_node_and_children(self) -> "Node | None":
        """The node following this node's entire subtree in document order."""
        node: Node | None = self
        while node is not None:
            sibling = node.next_sibling
            if sibling is not None:
                return sibling
            node = node.parent
        return None


class Document:
    """A document tree of Nodes."""

    def __init__(self, root: Node | None = None) -> None:
        self.root = root if root is not None else Node(DOCUMENT_TAG)

    def create_element(self, tag_name: str, attributes: Mapping[str, str] | None = None) -> Node:
        return Node(tag_name, attributes)

    @classmethod
    def with_body(cls) -> tuple["Document", Node]:
        """Create an empty ``<html><head></head><body></body></html>`` document.

        Returns:
            Tuple of (document, body node)
        """
        document = cls()
        html = Node("html")
        body = Node("body")
        html.append_child(Node("head"))
        html.append_child(body)
        document.root.append_child(html)
        return document, body
