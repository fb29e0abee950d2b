"""Triplet (coordinate) format matrices, used to assemble compressed matrices.

A triplet matrix stores parallel lists of row indices, column indices and
values. Duplicate locations are summed when converting to a compressed
matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import Any, Iterator

from sparsemat.matrix import CompressedStorage, CsMat


@dataclass(frozen=True)
class TripletIndex:
    """Position of one entry inside a :class:`TriMat`."""

    index: int


class TriMat:
    """A sparse matrix given as a list of ``(row, col, value)`` triplets."""

    __slots__ = ("_rows", "_cols", "_row_inds", "_col_inds", "_data")

    def __init__(self, shape) -> None:
        rows, cols = (int(s) for s in shape)
        if rows < 0 or cols < 0:
            raise ValueError("shape must be non-negative")
        self._rows = rows
        self._cols = cols
        self._row_inds: list[int] = []
        self._col_inds: list[int] = []
        self._data: list = []

    @classmethod
    def from_triplets(cls, shape, row_inds, col_inds, data) -> TriMat:
        """Build a triplet matrix from three lists of equal length."""
        mat = cls(shape)
        row_inds = [int(i) for i in row_inds]
        col_inds = [int(j) for j in col_inds]
        data = list(data)
        if not len(row_inds) == len(col_inds) == len(data):
            raise ValueError("all inputs should have the same length")
        if not all(0 <= i < mat._rows for i in row_inds):
            raise IndexError("row indices should be within shape")
        if not all(0 <= j < mat._cols for j in col_inds):
            raise IndexError("col indices should be within shape")
        mat._row_inds = row_inds
        mat._col_inds = col_inds
        mat._data = data
        return mat

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def nnz(self) -> int:
        return len(self._data)

    @property
    def row_inds(self) -> list[int]:
        return self._row_inds

    @property
    def col_inds(self) -> list[int]:
        return self._col_inds

    @property
    def data(self) -> list:
        return self._data

    def _check_location(self, row: int, col: int) -> None:
        if not 0 <= row < self._rows:
            raise IndexError(f"row {row} out of bounds")
        if not 0 <= col < self._cols:
            raise IndexError(f"col {col} out of bounds")

    def add_triplet(self, row: int, col: int, val) -> None:
        """Append a non-zero entry."""
        self._check_location(row, col)
        self._row_inds.append(row)
        self._col_inds.append(col)
        self._data.append(val)

    def find_locations(self, row: int, col: int) -> list[TripletIndex]:
        """All stored entries at ``(row, col)``."""
        return [
            TripletIndex(pos)
            for pos, (i, j) in enumerate(zip(self._row_inds, self._col_inds))
            if i == row and j == col
        ]

    def set_triplet(self, index: TripletIndex, row: int, col: int, val) -> None:
        """Replace the entry at ``index`` (see :meth:`find_locations`)."""
        pos = index.index
        if not 0 <= pos < len(self._data):
            raise IndexError(f"triplet index {pos} out of bounds")
        self._check_location(row, col)
        self._row_inds[pos] = row
        self._col_inds[pos] = col
        self._data[pos] = val

    def transpose_view(self) -> TriMat:
        """The transposed matrix, sharing this matrix's lists."""
        mat = TriMat.__new__(TriMat)
        mat._rows = self._cols
        mat._cols = self._rows
        mat._row_inds = self._col_inds
        mat._col_inds = self._row_inds
        mat._data = self._data
        return mat

    def __iter__(self) -> Iterator[tuple[Any, tuple[int, int]]]:
        """Yield ``(value, (row, col))`` in insertion order."""
        for i, j, value in zip(self._row_inds, self._col_inds, self._data):
            yield value, (i, j)

    def __len__(self) -> int:
        return len(self._data)

    def _compress(self, storage: CompressedStorage) -> CsMat:
        if storage is CompressedStorage.CSR:
            outer_inds, inner_inds, outer_dim = self._row_inds, self._col_inds, self._rows
        else:
            outer_inds, inner_inds, outer_dim = self._col_inds, self._row_inds, self._cols
        sums: dict[tuple[int, int], Any] = {}
        for key, value in zip(zip(outer_inds, inner_inds), self._data):
            sums[key] = sums[key] + value if key in sums else value
        keys = sorted(sums)
        counts = [0] * (outer_dim + 1)
        for outer, _ in keys:
            counts[outer + 1] += 1
        indptr = list(accumulate(counts))
        indices = [inner for _, inner in keys]
        data = [sums[key] for key in keys]
        return CsMat(storage, self.shape, indptr, indices, data)

    def to_csc(self) -> CsMat:
        """The CSC matrix with duplicate entries summed."""
        return self._compress(CompressedStorage.CSC)

    def to_csr(self) -> CsMat:
        """The CSR matrix with duplicate entries summed."""
        return self._compress(CompressedStorage.CSR)

    def __repr__(self) -> str:
        return (
            f"TriMat(shape={self.shape}, row_inds={self._row_inds}, "
            f"col_inds={self._col_inds}, data={self._data})"
        )