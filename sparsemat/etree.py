"""Elimination trees stored as the parent of each node."""

from __future__ import annotations


class Parents:
    """A forest given by each node's parent; roots have no parent."""

    __slots__ = ("_parents",)

    def __init__(self, nb_nodes: int) -> None:
        self._parents: list[int | None] = [None] * nb_nodes

    def _check(self, node: int, what: str = "node") -> None:
        if not 0 <= node < len(self._parents):
            raise IndexError(f"{what} is out of bounds")

    def get_parent(self, node: int) -> int | None:
        """The parent of ``node``, or None if it is a root."""
        self._check(node)
        return self._parents[node]

    def is_root(self, node: int) -> bool:
        self._check(node)
        return self._parents[node] is None

    def nb_nodes(self) -> int:
        return len(self._parents)

    def set_parent(self, node: int, parent: int) -> None:
        self._check(parent, "parent")
        self._check(node)
        self._parents[node] = parent

    def set_root(self, node: int) -> None:
        self._check(node)
        self._parents[node] = None

    def uproot(self, node: int, parent: int) -> None:
        """Give ``parent`` to ``node`` if it is a root; otherwise do nothing."""
        self._check(parent, "parent")
        if self.is_root(node):
            self.set_parent(node, parent)

    def __len__(self) -> int:
        return len(self._parents)