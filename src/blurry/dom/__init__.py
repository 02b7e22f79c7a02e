"""Document tree abstractions the transform operates on."""

from blurry.dom.cursor import PreOrderCursor
from blurry.dom.node import Document, Node
from blurry.dom.protocols import DocumentNode, DocumentTree

__all__ = [
    "Document",
    "DocumentNode",
    "DocumentTree",
    "Node",
    "PreOrderCursor",
]
