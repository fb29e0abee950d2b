"""Bandwidth-reducing orderings of symmetric sparse matrices (Cuthill-McKee)."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from sparsemat.matrix import CsMat
from sparsemat.permutation import Permutation


@dataclass
class Ordering:
    """A computed permutation and the positions delimiting connected components."""

    perm: Permutation
    connected_parts: list[int] = field(default_factory=list)


class StartStrategy(Protocol):
    """Chooses the starting vertex of each connected component."""

    def find_start_vertex(
        self, visited: Sequence[bool], degrees: Sequence[int], mat: CsMat
    ) -> int: ...


class DirectedOrdering(Protocol):
    """Collects the vertices visited by the algorithm into an :class:`Ordering`."""

    def prepare(self, nb_vertices: int) -> None: ...

    def add_transposition(self, vertex_index: int) -> None: ...

    def add_component_delimiter(self, index: int) -> None: ...

    def into_ordering(self) -> Ordering: ...


def _first_unvisited(visited: Sequence[bool]) -> int:
    for index, seen in enumerate(visited):
        if not seen:
            return index
    raise ValueError("There should always be an unvisited vertex left to choose")


class Next:
    """Start from the first unvisited vertex."""

    def find_start_vertex(
        self, visited: Sequence[bool], degrees: Sequence[int], mat: CsMat
    ) -> int:
        return _first_unvisited(visited)


class MinimumDegree:
    """Start from an unvisited vertex of minimum degree."""

    def find_start_vertex(
        self, visited: Sequence[bool], degrees: Sequence[int], mat: CsMat
    ) -> int:
        candidates = [index for index, seen in enumerate(visited) if not seen]
        if not candidates:
            raise ValueError("There should always be an unvisited vertex left to choose")
        return min(candidates, key=lambda index: degrees[index])


class PseudoPeripheral:
    """Start from a pseudoperipheral vertex, found as described by George and Liu.

    The most expensive strategy, but it usually gives the narrowest bandwidth.
    """

    @staticmethod
    def _rls_contender_and_height(
        root: int, degrees: Sequence[int], mat: CsMat
    ) -> tuple[int, int]:
        """Build the level structure rooted at ``root``.

        Returns the minimum-degree vertex of the last level and the height.
        """
        visited = [False] * len(degrees)
        visited[root] = True
        level = [root]
        height = 0
        last_level = level
        while level:
            height += 1
            next_level: list[int] = []
            for parent in level:
                for neighbor in mat.outer_view(parent).indices:
                    if not visited[neighbor]:
                        visited[neighbor] = True
                        next_level.append(neighbor)
            if next_level:
                last_level = next_level
            level = next_level
        contender = min(last_level, key=lambda vertex: degrees[vertex])
        return contender, height

    def find_start_vertex(
        self, visited: Sequence[bool], degrees: Sequence[int], mat: CsMat
    ) -> int:
        current = _first_unvisited(visited)
        # Isolated vertices are pseudoperipheral by definition.
        if degrees[current] == 0:
            return current
        contender, current_height = self._rls_contender_and_height(current, degrees, mat)
        while True:
            next_contender, contender_height = self._rls_contender_and_height(
                contender, degrees, mat
            )
            if contender_height <= current_height:
                return current
            current_height = contender_height
            current = contender
            contender = next_contender


class Forward:
    """Build the Cuthill-McKee ordering in visiting order."""

    def __init__(self) -> None:
        self._perm: list[int] = []
        self._connected_parts: list[int] = []

    def prepare(self, nb_vertices: int) -> None:
        self._perm = []
        self._connected_parts = []

    def add_transposition(self, vertex_index: int) -> None:
        self._perm.append(vertex_index)

    def add_component_delimiter(self, index: int) -> None:
        self._connected_parts.append(index)

    def into_ordering(self) -> Ordering:
        return Ordering(Permutation(self._perm), list(self._connected_parts))


class Reversed:
    """Build the Cuthill-McKee ordering in reverse visiting order."""

    def __init__(self) -> None:
        self._perm: list[int] = []
        self._connected_parts: list[int] = []
        self._nb_vertices = 0
        self._count = 0

    def prepare(self, nb_vertices: int) -> None:
        self._perm = [0] * nb_vertices
        self._connected_parts = []
        self._nb_vertices = nb_vertices
        self._count = 0

    def add_transposition(self, vertex_index: int) -> None:
        if self._count >= self._nb_vertices:
            raise IndexError("more transpositions than vertices")
        self._perm[self._nb_vertices - self._count - 1] = vertex_index
        self._count += 1

    def add_component_delimiter(self, index: int) -> None:
        self._connected_parts.append(index)

    def into_ordering(self) -> Ordering:
        parts = [self._nb_vertices - index for index in reversed(self._connected_parts)]
        return Ordering(Permutation(self._perm), parts)


def cuthill_mckee_custom(
    mat: CsMat, starting_strategy: StartStrategy, directed_ordering: DirectedOrdering
) -> Ordering:
    """Cuthill-McKee ordering of a symmetric matrix with the given strategies."""
    if mat.rows != mat.cols:
        raise ValueError("matrix must be square")
    nb_vertices = mat.cols
    degrees = mat.degrees()
    directed_ordering.prepare(nb_vertices)
    pending: deque[int] = deque()
    visited = [False] * nb_vertices

    for perm_index in range(nb_vertices):
        if pending:
            current = pending.popleft()
        else:
            directed_ordering.add_component_delimiter(perm_index)
            current = starting_strategy.find_start_vertex(visited, degrees, mat)
            if visited[current]:
                raise ValueError(
                    "Vertex returned by starting strategy should always be unvisited"
                )
        directed_ordering.add_transposition(current)
        visited[current] = True

        neighbors: list[int] = []
        for neighbor in mat.outer_view(current).indices:
            if not visited[neighbor]:
                neighbors.append(neighbor)
                visited[neighbor] = True
        neighbors.sort(key=lambda vertex: degrees[vertex])
        pending.extend(neighbors)

    directed_ordering.add_component_delimiter(nb_vertices)
    return directed_ordering.into_ordering()


def reverse_cuthill_mckee(mat: CsMat) -> Ordering:
    """Reverse Cuthill-McKee ordering starting from pseudoperipheral vertices."""
    return cuthill_mckee_custom(mat, PseudoPeripheral(), Reversed())