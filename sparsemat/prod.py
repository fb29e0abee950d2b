"""Products of sparse matrices and vectors with sparse or dense operands.

The ``*_mulacc_*`` and ``mul_acc_*`` functions add the product into the
given output, which is updated in place.
"""

from __future__ import annotations

import bisect
from typing import Any, MutableSequence, Sequence

import numpy as np

from sparsemat.matrix import CsMat, CsVec


def _dot_sorted(vec1: CsVec, vec2: CsVec) -> Any:
    """Dot product where ``vec1`` has no more non-zeros than ``vec2``.

    Each term is computed as ``vec1_value * vec2_value``.
    """
    total: Any = 0
    idx2 = vec2.indices
    lo = 0
    for index, value in vec1:
        if lo >= len(idx2):
            break
        pos = bisect.bisect_left(idx2, index, lo)
        if pos < len(idx2) and idx2[pos] == index:
            total = total + value * vec2.data[pos]
        lo = pos
    return total


def csvec_dot_by_binary_search(vec1: CsVec, vec2: CsVec) -> Any:
    """Dot product of two sparse vectors, searching the larger one.

    Runs in O(M log N) where M and N are the non-zero counts of the vectors.
    Each product keeps the operand order ``vec1 * vec2``.
    """
    if vec1.nnz > vec2.nnz:
        total: Any = 0
        idx1 = vec1.indices
        lo = 0
        for index, value in vec2:
            if lo >= len(idx1):
                break
            pos = bisect.bisect_left(idx1, index, lo)
            if pos < len(idx1) and idx1[pos] == index:
                total = total + vec1.data[pos] * value
            lo = pos
        return total
    return _dot_sorted(vec1, vec2)


def _check_mat_vec(mat: CsMat, in_vec: Sequence, res_vec: Sequence) -> None:
    if mat.cols != len(in_vec) or mat.rows != len(res_vec):
        raise ValueError("Dimension mismatch")


def mul_acc_mat_vec_csc(mat: CsMat, in_vec: Sequence, res_vec: MutableSequence) -> None:
    """Add ``mat * in_vec`` into ``res_vec`` for a CSC matrix."""
    _check_mat_vec(mat, in_vec, res_vec)
    if not mat.is_csc:
        raise ValueError("Storage mismatch")
    for col_ind, column in enumerate(mat.outer_iterator()):
        vec_elem = in_vec[col_ind]
        for row_ind, mtx_elem in column:
            res_vec[row_ind] = res_vec[row_ind] + mtx_elem * vec_elem


def mul_acc_mat_vec_csr(mat: CsMat, in_vec: Sequence, res_vec: MutableSequence) -> None:
    """Add ``mat * in_vec`` into ``res_vec`` for a CSR matrix."""
    _check_mat_vec(mat, in_vec, res_vec)
    if not mat.is_csr:
        raise ValueError("Storage mismatch")
    for row_ind, row in enumerate(mat.outer_iterator()):
        acc = res_vec[row_ind]
        for col_ind, mtx_elem in row:
            acc = acc + mtx_elem * in_vec[col_ind]
        res_vec[row_ind] = acc


def csr_mul_csvec(lhs: CsMat, rhs: CsVec) -> CsVec:
    """The sparse vector ``lhs * rhs``; zero results are not stored.

    A CSC ``lhs`` is converted to CSR first.
    """
    if rhs.dim == 0:
        return CsVec(0, [], [])
    if lhs.cols != rhs.dim:
        raise ValueError("Dimension mismatch")
    if not lhs.is_csr:
        lhs = lhs.to_csr()
    indices: list[int] = []
    data: list = []
    for row_ind, row in enumerate(lhs.outer_iterator()):
        value = csvec_dot_by_binary_search(row, rhs)
        if value != 0:
            indices.append(row_ind)
            data.append(value)
    return CsVec(lhs.rows, indices, data)


def _check_dense(lhs: CsMat, rhs: np.ndarray, out: np.ndarray) -> None:
    if rhs.ndim != 2 or out.ndim != 2:
        raise ValueError("Dimension mismatch")
    if lhs.cols != rhs.shape[0] or lhs.rows != out.shape[0] or rhs.shape[1] != out.shape[1]:
        raise ValueError("Dimension mismatch")


def csr_mulacc_dense_rowmaj(lhs: CsMat, rhs: np.ndarray, out: np.ndarray) -> None:
    """Add ``lhs * rhs`` into ``out``, walking rows; suits wide ``rhs``."""
    _check_dense(lhs, rhs, out)
    if not lhs.is_csr:
        raise ValueError("Storage mismatch")
    for row_ind, line in enumerate(lhs.outer_iterator()):
        for col_ind, lval in line:
            out[row_ind, :] += lval * rhs[col_ind, :]


def csc_mulacc_dense_rowmaj(lhs: CsMat, rhs: np.ndarray, out: np.ndarray) -> None:
    """Add ``lhs * rhs`` into ``out``, walking rows; suits wide ``rhs``."""
    _check_dense(lhs, rhs, out)
    if not lhs.is_csc:
        raise ValueError("Storage mismatch")
    for col_ind, lcol in enumerate(lhs.outer_iterator()):
        rline = rhs[col_ind, :]
        for orow, lval in lcol:
            out[orow, :] += lval * rline


def csc_mulacc_dense_colmaj(lhs: CsMat, rhs: np.ndarray, out: np.ndarray) -> None:
    """Add ``lhs * rhs`` into ``out``, walking columns; suits narrow ``rhs``."""
    _check_dense(lhs, rhs, out)
    if not lhs.is_csc:
        raise ValueError("Storage mismatch")
    columns = list(lhs.outer_iterator())
    for j in range(rhs.shape[1]):
        for rrow, lcol in enumerate(columns):
            rval = rhs[rrow, j]
            for orow, lval in lcol:
                out[orow, j] += lval * rval


def csr_mulacc_dense_colmaj(lhs: CsMat, rhs: np.ndarray, out: np.ndarray) -> None:
    """Add ``lhs * rhs`` into ``out``, walking columns; suits narrow ``rhs``."""
    _check_dense(lhs, rhs, out)
    if not lhs.is_csr:
        raise ValueError("Storage mismatch")
    rows = list(lhs.outer_iterator())
    for j in range(rhs.shape[1]):
        for orow, lrow in enumerate(rows):
            acc = out[orow, j]
            for rrow, lval in lrow:
                acc = acc + lval * rhs[rrow, j]
            out[orow, j] = acc