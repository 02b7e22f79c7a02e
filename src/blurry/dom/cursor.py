"""Pre-order traversal with subtree skipping."""

from collections.abc import Iterator

from blurry.dom.protocols import DocumentNode


class PreOrderCursor:
    """Lazily walks ``root`` and its descendants in document order.

    Each ``iter()`` restarts from ``root``. While iterating, ``skip_subtree()``
    prevents the walk from descending into the node most recently yielded; the
    next node produced is the one following that node's subtree. Only one
    iteration per cursor should be active at a time.
    """

    def __init__(self, root: DocumentNode) -> None:
        self.root = root
        self._current: DocumentNode | None = None
        self._skip_current = False

    def __iter__(self) -> Iterator[DocumentNode]:
        stack: list[DocumentNode] = [self.root]
        try:
            while stack:
                node = stack.pop()
                self._current = node
                self._skip_current = False
                yield node
                if not self._skip_current:
                    stack.extend(reversed(list(node.children)))
        finally:
            self._current = None
            self._skip_current = False

    @property
    def current(self) -> DocumentNode | None:
        """The node most recently yielded, or None outside an iteration."""
        return self._current

    def skip_subtree(self) -> None:
        """Do not descend into the current node's children."""
        if self._current is None:
            raise RuntimeError("skip_subtree() called outside of an iteration")
        self._skip_current = True
