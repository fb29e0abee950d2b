import numpy as np
import pytest

from sparsemat.matrix import CsMat
from sparsemat.smmp import mul_csr_csr, numeric, symbolic


def mat1():
    # | 0 0 3 4 0 |
    # | 0 0 0 2 5 |
    # | 0 0 5 0 0 |
    # | 0 8 0 0 0 |
    # | 0 0 0 7 0 |
    return CsMat.new(
        (5, 5),
        [0, 2, 4, 5, 6, 7],
        [2, 3, 3, 4, 2, 1, 3],
        [3.0, 4.0, 2.0, 5.0, 5.0, 8.0, 7.0],
    )


def mat2_structure():
    # | x x x   x |
    # | x     x   |
    # |           |
    # |     x x   |
    # |   x x     |
    return CsMat.new(
        (5, 5),
        [0, 4, 6, 6, 8, 10],
        [0, 1, 2, 4, 0, 3, 2, 3, 1, 2],
        [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0],
    )


def test_mat1_dense_layout():
    expected = np.array(
        [
            [0.0, 0.0, 3.0, 4.0, 0.0],
            [0.0, 0.0, 0.0, 2.0, 5.0],
            [0.0, 0.0, 5.0, 0.0, 0.0],
            [0.0, 8.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 7.0, 0.0],
        ]
    )
    assert np.array_equal(mat1().to_dense(), expected)


def test_symbolic_structure_mat1_mat2():
    indptr, indices = symbolic(mat1(), mat2_structure())
    assert indptr == [0, 2, 5, 5, 7, 9]
    assert indices == [2, 3, 1, 2, 3, 0, 3, 2, 3]


def test_symbolic_and_numeric_match_dense_product():
    a = mat1()
    b = mat2_structure()
    indptr, indices = symbolic(a, b)
    data = numeric(a, b, indptr, indices)
    c = CsMat.new((5, 5), indptr, indices, data)
    assert np.allclose(c.to_dense(), a.to_dense() @ b.to_dense())


def test_mul_csr_csr_self_product():
    a = mat1()
    res = mul_csr_csr(a, a)
    assert res.is_csr
    assert res.shape == (5, 5)
    assert np.allclose(res.to_dense(), a.to_dense() @ a.to_dense())
    dense_nonzero = np.count_nonzero(a.to_dense() @ a.to_dense())
    assert res.nnz == dense_nonzero


def test_mul_zero_rows():
    a = CsMat.new((0, 11), [0], [], [])
    b = CsMat.new((11, 11), [0] * 12, [], [])
    c = mul_csr_csr(a, b)
    assert c.rows == 0
    assert c.cols == 11
    assert c.nnz == 0


def test_mul_complex():
    # | 0  1 0   0  |
    # | 0  0 0   0  |
    # | i  0 0  1+i |
    # | 0  0 2i  0  |
    a = CsMat.new(
        (4, 4),
        [0, 1, 1, 3, 4],
        [1, 0, 3, 2],
        [complex(1, 0), complex(0, 1), complex(1, 1), complex(0, 2)],
    )
    expected = CsMat.new(
        (4, 4),
        [0, 0, 0, 2, 4],
        [1, 2, 0, 3],
        [complex(0, 1), complex(-2, 2), complex(-2, 0), complex(-2, 2)],
    )
    assert mul_csr_csr(a, a) == expected


def test_dimension_mismatch():
    a = CsMat.new((2, 3), [0, 0, 0], [], [])
    b = CsMat.new((2, 2), [0, 0, 0], [], [])
    with pytest.raises(ValueError, match="Dimension mismatch"):
        mul_csr_csr(a, b)


def test_storage_mismatch():
    a = mat1()
    with pytest.raises(ValueError, match="Storage mismatch"):
        mul_csr_csr(a, a.to_csc())


def test_numeric_rejects_wrong_indptr_length():
    a = mat1()
    with pytest.raises(ValueError):
        numeric(a, a, [0, 0], [])


def test_product_with_identity_is_unchanged():
    a = mat1()
    assert mul_csr_csr(a, CsMat.eye(5)) == a
    assert mul_csr_csr(CsMat.eye(5), a) == a


def test_rectangular_product_shape_and_values():
    a = CsMat.new((2, 3), [0, 2, 3], [0, 2, 1], [1.0, 2.0, 3.0])
    b = CsMat.new((3, 4), [0, 1, 2, 4], [3, 0, 1, 2], [4.0, 5.0, 6.0, 7.0])
    c = mul_csr_csr(a, b)
    assert c.shape == (2, 4)
    assert np.allclose(c.to_dense(), a.to_dense() @ b.to_dense())
    for vec in c.outer_iterator():
        assert vec.indices == sorted(vec.indices)