"""Permutation matrices and their application to sparse matrices.

A permutation stores both its forward and inverse index arrays, or nothing
at all when it is the identity.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from sparsemat.matrix import CsMat


def perm_is_valid(perm: Sequence[int]) -> bool:
    """Whether ``perm`` holds each of ``0..len(perm)`` exactly once."""
    n = len(perm)
    seen = [False] * n
    for value in perm:
        index = int(value)
        if index < 0 or index >= n or seen[index]:
            return False
        seen[index] = True
    return True


class Permutation:
    """A permutation of ``dim`` elements, kept together with its inverse."""

    __slots__ = ("_dim", "_perm", "_perm_inv")

    def __init__(self, perm: Sequence[int]) -> None:
        perm = [int(p) for p in perm]
        if not perm_is_valid(perm):
            raise ValueError("not a valid permutation")
        perm_inv = [0] * len(perm)
        for position, value in enumerate(perm):
            perm_inv[value] = position
        self._dim = len(perm)
        self._perm: list[int] | None = perm
        self._perm_inv: list[int] | None = perm_inv

    @classmethod
    def _from_parts(
        cls, dim: int, perm: list[int] | None, perm_inv: list[int] | None
    ) -> Permutation:
        result = cls.__new__(cls)
        result._dim = dim
        result._perm = perm
        result._perm_inv = perm_inv
        return result

    @classmethod
    def identity(cls, dim: int) -> Permutation:
        """The identity permutation of ``dim`` elements."""
        if dim < 0:
            raise ValueError("dimension must be non-negative")
        return cls._from_parts(dim, None, None)

    @property
    def dim(self) -> int:
        return self._dim

    def inv(self) -> Permutation:
        """The inverse permutation, sharing this permutation's arrays."""
        return Permutation._from_parts(self._dim, self._perm_inv, self._perm)

    def is_identity(self) -> bool:
        """Whether this permutation leaves every index in place."""
        if self._perm is None:
            return True
        return all(position == value for position, value in enumerate(self._perm))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._dim:
            raise IndexError(f"index {index} out of bounds for dimension {self._dim}")

    def at(self, index: int) -> int:
        """The image of ``index``."""
        self._check_index(index)
        return index if self._perm is None else self._perm[index]

    def at_inv(self, index: int) -> int:
        """The image of ``index`` under the inverse permutation."""
        self._check_index(index)
        return index if self._perm_inv is None else self._perm_inv[index]

    def vec(self) -> list[int]:
        """The permutation as a list of indices."""
        return list(range(self._dim)) if self._perm is None else list(self._perm)

    def inv_vec(self) -> list[int]:
        """The inverse permutation as a list of indices."""
        return list(range(self._dim)) if self._perm_inv is None else list(self._perm_inv)

    def __mul__(self, rhs):
        """Apply the permutation to a dense vector: ``result[i] = rhs[p[i]]``."""
        if len(rhs) != self._dim:
            raise ValueError("Dimension mismatch")
        if isinstance(rhs, np.ndarray):
            if self._perm is None:
                return rhs.copy()
            return rhs[np.asarray(self._perm, dtype=np.intp)]
        if self._perm is None:
            return list(rhs)
        return [rhs[p] for p in self._perm]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._dim == other._dim and self.vec() == other.vec()

    def __repr__(self) -> str:
        if self._perm is None:
            return f"Permutation.identity({self._dim})"
        return f"Permutation({self._perm})"


def _copy_matrix(mat: CsMat) -> CsMat:
    return CsMat(mat.storage, mat.shape, list(mat.indptr), list(mat.indices), list(mat.data))


def _rebuild(
    mat: CsMat, outer_order: Sequence[int], inner_map: Sequence[int] | None
) -> CsMat:
    """Reassemble ``mat`` taking outer slices in ``outer_order``, renaming inner indices."""
    indptr = [0]
    indices: list[int] = []
    data: list = []
    for outer in outer_order:
        vec = mat.outer_view(outer)
        entries = [
            (inner if inner_map is None else inner_map[inner], value) for inner, value in vec
        ]
        entries.sort(key=lambda entry: entry[0])
        indices.extend(inner for inner, _ in entries)
        data.extend(value for _, value in entries)
        indptr.append(len(indices))
    return CsMat(mat.storage, mat.shape, indptr, indices, data)


def _permute_outer(mat: CsMat, perm: Permutation) -> CsMat:
    if mat.outer_dims != perm.dim:
        raise ValueError("Dimension mismatch")
    if mat.rows == 0 or mat.cols == 0:
        return _copy_matrix(mat)
    return _rebuild(mat, perm.vec(), None)


def _permute_inner(mat: CsMat, perm: Permutation) -> CsMat:
    if mat.inner_dims != perm.dim:
        raise ValueError("Dimension mismatch")
    if mat.rows == 0 or mat.cols == 0:
        return _copy_matrix(mat)
    return _rebuild(mat, range(mat.outer_dims), perm.inv_vec())


def permute_rows(mat: CsMat, perm: Permutation) -> CsMat:
    """The product ``P * A``."""
    return _permute_outer(mat, perm) if mat.is_csr else _permute_inner(mat, perm)


def permute_cols(mat: CsMat, perm: Permutation) -> CsMat:
    """The product ``A * P``."""
    return _permute_inner(mat, perm) if mat.is_csr else _permute_outer(mat, perm)


def transform_mat_papt(mat: CsMat, perm: Permutation) -> CsMat:
    """The square matrix ``P * A * P^T``."""
    if mat.rows != mat.cols:
        raise ValueError("matrix must be square")
    if mat.rows != perm.dim:
        raise ValueError("Dimension mismatch")
    if perm.is_identity() or mat.rows == 0:
        return _copy_matrix(mat)
    # (PAP^T)^T = PA^TP^T, so the same walk serves both storage layouts.
    return _rebuild(mat, perm.vec(), perm.inv_vec())


def transform_mat_paq(mat: CsMat, row_perm: Permutation, col_perm: Permutation) -> CsMat:
    """The product ``P * A * Q`` computed in a single pass."""
    if mat.rows != row_perm.dim or mat.cols != col_perm.dim:
        raise ValueError("Dimension mismatch")
    row_identity = row_perm.is_identity()
    col_identity = col_perm.is_identity()
    if (row_identity and col_identity) or mat.rows == 0 or mat.cols == 0:
        return _copy_matrix(mat)
    if row_identity:
        return permute_cols(mat, col_perm)
    if col_identity:
        return permute_rows(mat, row_perm)
    if mat.is_csr:
        outer_order, inner_map = row_perm.vec(), col_perm.inv_vec()
    else:
        outer_order, inner_map = col_perm.vec(), row_perm.inv_vec()
    return _rebuild(mat, outer_order, inner_map)