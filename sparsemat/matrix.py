"""Compressed sparse vectors and matrices in CSR and CSC layouts."""

from __future__ import annotations

import bisect
import enum
from itertools import accumulate, pairwise
from typing import Any, Iterator

import numpy as np


class CompressedStorage(enum.Enum):
    """Which dimension of a matrix is compressed."""

    CSR = "CSR"
    CSC = "CSC"

    def other(self) -> CompressedStorage:
        """The opposite storage layout."""
        return CompressedStorage.CSC if self is CompressedStorage.CSR else CompressedStorage.CSR


class StructureError(ValueError):
    """Raised when index arrays do not describe a valid sparse structure."""


def _dtype(data: list) -> Any:
    return np.asarray(data).dtype if data else np.float64


def _check_segment(indices: list[int], start: int, stop: int, bound: int) -> None:
    previous = -1
    for index in indices[start:stop]:
        if index < 0 or index >= bound:
            raise StructureError(f"index {index} out of bounds for dimension {bound}")
        if index <= previous:
            raise StructureError("indices are not sorted or contain duplicates")
        previous = index


class CsVec:
    """A sparse vector holding sorted indices and their values."""

    __slots__ = ("dim", "indices", "data")

    def __init__(self, dim: int, indices, data) -> None:
        indices = [int(i) for i in indices]
        data = list(data)
        if dim < 0:
            raise StructureError("dimension must be non-negative")
        if len(indices) != len(data):
            raise StructureError("indices and data have different lengths")
        _check_segment(indices, 0, len(indices), dim)
        self.dim = dim
        self.indices = indices
        self.data = data

    @classmethod
    def _from_parts(cls, dim: int, indices: list[int], data: list) -> CsVec:
        vec = cls.__new__(cls)
        vec.dim = dim
        vec.indices = indices
        vec.data = data
        return vec

    @property
    def nnz(self) -> int:
        return len(self.indices)

    def get(self, index: int):
        """The value stored at ``index``, or None for a structural zero."""
        pos = bisect.bisect_left(self.indices, index)
        if pos < len(self.indices) and self.indices[pos] == index:
            return self.data[pos]
        return None

    def __iter__(self) -> Iterator[tuple[int, Any]]:
        return zip(self.indices, self.data)

    def to_dense(self) -> np.ndarray:
        array = np.zeros(self.dim, dtype=_dtype(self.data))
        assign_vector_to_dense(array, self)
        return array

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CsVec):
            return NotImplemented
        return (self.dim, self.indices, self.data) == (other.dim, other.indices, other.data)

    def __repr__(self) -> str:
        return f"CsVec(dim={self.dim}, indices={self.indices}, data={self.data})"


class CsMat:
    """A sparse matrix in compressed row (CSR) or column (CSC) storage."""

    __slots__ = ("_storage", "_nrows", "_ncols", "_indptr", "_indices", "_data")

    def __init__(self, storage, shape, indptr, indices, data) -> None:
        storage = CompressedStorage(storage)
        nrows, ncols = (int(s) for s in shape)
        indptr = [int(p) for p in indptr]
        indices = [int(i) for i in indices]
        data = list(data)
        if nrows < 0 or ncols < 0:
            raise StructureError("shape must be non-negative")
        outer, inner = (nrows, ncols) if storage is CompressedStorage.CSR else (ncols, nrows)
        if len(indptr) != outer + 1:
            raise StructureError("indptr length does not match the outer dimension")
        if len(indices) != len(data):
            raise StructureError("indices and data have different lengths")
        if indptr[0] != 0 or indptr[-1] != len(indices):
            raise StructureError("indptr does not span the indices")
        for start, stop in pairwise(indptr):
            if stop < start:
                raise StructureError("indptr is not non-decreasing")
            _check_segment(indices, start, stop, inner)
        self._storage = storage
        self._nrows = nrows
        self._ncols = ncols
        self._indptr = indptr
        self._indices = indices
        self._data = data

    @classmethod
    def _from_parts(cls, storage, shape, indptr, indices, data) -> CsMat:
        mat = cls.__new__(cls)
        mat._storage = storage
        mat._nrows, mat._ncols = shape
        mat._indptr = indptr
        mat._indices = indices
        mat._data = data
        return mat

    @classmethod
    def new(cls, shape, indptr, indices, data) -> CsMat:
        """Build a CSR matrix."""
        return cls(CompressedStorage.CSR, shape, indptr, indices, data)

    @classmethod
    def new_csc(cls, shape, indptr, indices, data) -> CsMat:
        """Build a CSC matrix."""
        return cls(CompressedStorage.CSC, shape, indptr, indices, data)

    @classmethod
    def eye(cls, n: int) -> CsMat:
        """The CSR identity matrix of size ``n``."""
        return cls.new((n, n), range(n + 1), range(n), [1.0] * n)

    @classmethod
    def eye_csc(cls, n: int) -> CsMat:
        """The CSC identity matrix of size ``n``."""
        return cls.new_csc((n, n), range(n + 1), range(n), [1.0] * n)

    @property
    def storage(self) -> CompressedStorage:
        return self._storage

    @property
    def rows(self) -> int:
        return self._nrows

    @property
    def cols(self) -> int:
        return self._ncols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._nrows, self._ncols)

    @property
    def nnz(self) -> int:
        return len(self._indices)

    @property
    def indptr(self) -> list[int]:
        return self._indptr

    @property
    def indices(self) -> list[int]:
        return self._indices

    @property
    def data(self) -> list:
        return self._data

    @property
    def is_csr(self) -> bool:
        return self._storage is CompressedStorage.CSR

    @property
    def is_csc(self) -> bool:
        return self._storage is CompressedStorage.CSC

    @property
    def outer_dims(self) -> int:
        return self._nrows if self.is_csr else self._ncols

    @property
    def inner_dims(self) -> int:
        return self._ncols if self.is_csr else self._nrows

    def outer_view(self, index: int) -> CsVec:
        """The sparse vector of one row (CSR) or column (CSC)."""
        if not 0 <= index < self.outer_dims:
            raise IndexError(f"outer index {index} out of bounds")
        start, stop = self._indptr[index], self._indptr[index + 1]
        return CsVec._from_parts(
            self.inner_dims, self._indices[start:stop], self._data[start:stop]
        )

    def outer_iterator(self) -> Iterator[CsVec]:
        for start, stop in pairwise(self._indptr):
            yield CsVec._from_parts(
                self.inner_dims, self._indices[start:stop], self._data[start:stop]
            )

    def get_outer_inner(self, outer: int, inner: int):
        """The value at (outer, inner), or None for a structural zero."""
        if not 0 <= outer < self.outer_dims:
            return None
        start, stop = self._indptr[outer], self._indptr[outer + 1]
        pos = bisect.bisect_left(self._indices, inner, start, stop)
        if pos < stop and self._indices[pos] == inner:
            return self._data[pos]
        return None

    def slice_outer(self, start: int, stop: int | None = None) -> CsMat:
        """The matrix restricted to outer indices in ``[start, stop)``."""
        if stop is None:
            stop = self.outer_dims
        if stop < start:
            raise ValueError("Invalid view")
        if start < 0 or stop > self.outer_dims:
            raise IndexError("slice out of bounds")
        base, end = self._indptr[start], self._indptr[stop]
        indptr = [p - base for p in self._indptr[start : stop + 1]]
        count = stop - start
        shape = (count, self._ncols) if self.is_csr else (self._nrows, count)
        return CsMat._from_parts(
            self._storage, shape, indptr, self._indices[base:end], self._data[base:end]
        )

    def transpose_view(self) -> CsMat:
        """The transposed matrix, sharing this matrix's arrays."""
        return CsMat._from_parts(
            self._storage.other(),
            (self._ncols, self._nrows),
            self._indptr,
            self._indices,
            self._data,
        )

    def to_other_storage(self) -> CsMat:
        """The same matrix in the opposite storage layout."""
        counts = [0] * (self.inner_dims + 1)
        for index in self._indices:
            counts[index + 1] += 1
        indptr = list(accumulate(counts))
        next_pos = indptr[:-1]
        indices = [0] * self.nnz
        data: list = [None] * self.nnz
        for outer, vec in enumerate(self.outer_iterator()):
            for inner, value in vec:
                pos = next_pos[inner]
                indices[pos] = outer
                data[pos] = value
                next_pos[inner] += 1
        return CsMat._from_parts(self._storage.other(), self.shape, indptr, indices, data)

    def _copy(self) -> CsMat:
        return CsMat._from_parts(
            self._storage, self.shape, list(self._indptr), list(self._indices), list(self._data)
        )

    def to_csr(self) -> CsMat:
        return self._copy() if self.is_csr else self.to_other_storage()

    def to_csc(self) -> CsMat:
        return self._copy() if self.is_csc else self.to_other_storage()

    def to_dense(self) -> np.ndarray:
        array = np.zeros(self.shape, dtype=_dtype(self._data))
        assign_to_dense(array, self)
        return array

    def degrees(self) -> list[int]:
        """Number of off-diagonal non-zeros in each outer dimension."""
        if self._nrows != self._ncols:
            raise ValueError("degrees are only defined for square matrices")
        return [
            sum(1 for inner in vec.indices if inner != outer)
            for outer, vec in enumerate(self.outer_iterator())
        ]

    def max_outer_nnz(self) -> int:
        return max((stop - start for start, stop in pairwise(self._indptr)), default=0)

    def __iter__(self) -> Iterator[tuple[Any, tuple[int, int]]]:
        """Yield ``(value, (row, col))`` in storage order."""
        for outer, vec in enumerate(self.outer_iterator()):
            for inner, value in vec:
                yield value, ((outer, inner) if self.is_csr else (inner, outer))

    def to_dict(self) -> dict:
        """A plain representation suitable for serialisation."""
        return {
            "storage": self._storage.value,
            "nrows": self._nrows,
            "ncols": self._ncols,
            "indptr": list(self._indptr),
            "indices": list(self._indices),
            "data": list(self._data),
        }

    @classmethod
    def from_dict(cls, data: dict) -> CsMat:
        """Rebuild a matrix from :meth:`to_dict` output, checking its structure."""
        try:
            storage = CompressedStorage(data["storage"])
            shape = (data["nrows"], data["ncols"])
            parts = (data["indptr"], data["indices"], data["data"])
        except (KeyError, ValueError) as exc:
            raise StructureError(f"invalid matrix description: {exc}") from exc
        return cls(storage, shape, *parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CsMat):
            return NotImplemented
        return (
            self._storage is other._storage
            and self.shape == other.shape
            and self._indptr == other._indptr
            and self._indices == other._indices
            and self._data == other._data
        )

    def __repr__(self) -> str:
        return (
            f"CsMat({self._storage.value}, shape={self.shape}, indptr={self._indptr}, "
            f"indices={self._indices}, data={self._data})"
        )


def assign_to_dense(array: np.ndarray, spmat: CsMat) -> None:
    """Write the non-zeros of ``spmat`` into ``array``; other entries are kept."""
    if tuple(array.shape) != spmat.shape:
        raise ValueError("Dimension mismatch")
    for outer, vec in enumerate(spmat.outer_iterator()):
        for inner, value in vec:
            if spmat.is_csr:
                array[outer, inner] = value
            else:
                array[inner, outer] = value


def assign_vector_to_dense(array: np.ndarray, spvec: CsVec) -> None:
    """Write the non-zeros of ``spvec`` into ``array``; other entries are kept."""
    if len(array) != spvec.dim:
        raise ValueError("Dimension mismatch")
    for index, value in spvec:
        array[index] = value


def is_symmetric(mat: CsMat) -> bool:
    """Whether the matrix equals its transpose."""
    if mat.rows != mat.cols:
        return False
    for outer, vec in enumerate(mat.outer_iterator()):
        for inner, value in vec:
            transposed = mat.get_outer_inner(inner, outer)
            if transposed is None or transposed != value:
                return False
    return True