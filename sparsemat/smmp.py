"""Sparse matrix product of CSR matrices in two passes.

The symbolic pass works out the non-zero structure of the product and the
numeric pass fills in its values.
"""

from __future__ import annotations

from itertools import pairwise
from typing import Sequence

from sparsemat.matrix import CompressedStorage, CsMat


def _require_csr(*mats: CsMat) -> None:
    if not all(mat.is_csr for mat in mats):
        raise ValueError("Storage mismatch")


def _require_compatible(a: CsMat, b: CsMat) -> None:
    if a.cols != b.rows:
        raise ValueError("Dimension mismatch")


def symbolic(a: CsMat, b: CsMat) -> tuple[list[int], list[int]]:
    """The structure of ``C = A * B`` for CSR matrices.

    Returns ``(indptr, indices)`` of the product, with the column indices of
    each row sorted.
    """
    _require_csr(a, b)
    _require_compatible(a, b)
    indptr = [0]
    indices: list[int] = []
    for a_row in a.outer_iterator():
        row_cols: set[int] = set()
        for a_col in a_row.indices:
            row_cols.update(b.outer_view(a_col).indices)
        indices.extend(sorted(row_cols))
        indptr.append(len(indices))
    return indptr, indices


def numeric(
    a: CsMat, b: CsMat, c_indptr: Sequence[int], c_indices: Sequence[int]
) -> list:
    """The values of ``C = A * B`` for the structure given by :func:`symbolic`.

    Entries of the structure that receive no contribution are zero.
    """
    _require_csr(a, b)
    _require_compatible(a, b)
    if len(c_indptr) != a.rows + 1:
        raise ValueError("Dimension mismatch")
    if c_indptr[-1] != len(c_indices):
        raise ValueError("indptr does not span the indices")
    data: list = []
    for a_row, (start, stop) in zip(a.outer_iterator(), pairwise(c_indptr)):
        acc: dict = {}
        for a_col, a_val in a_row:
            for b_col, b_val in b.outer_view(a_col):
                if b_col in acc:
                    acc[b_col] = acc[b_col] + a_val * b_val
                else:
                    acc[b_col] = a_val * b_val
        for c_col in c_indices[start:stop]:
            if not 0 <= c_col < b.cols:
                raise IndexError(f"column {c_col} out of bounds")
            data.append(acc.pop(c_col, 0))
    return data


def mul_csr_csr(lhs: CsMat, rhs: CsMat) -> CsMat:
    """The CSR product ``lhs * rhs`` of two CSR matrices."""
    indptr, indices = symbolic(lhs, rhs)
    data = numeric(lhs, rhs, indptr, indices)
    return CsMat(CompressedStorage.CSR, (lhs.rows, rhs.cols), indptr, indices, data)