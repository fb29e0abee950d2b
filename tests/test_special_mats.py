import numpy as np
import pytest

from sparsemat.matrix import CsMat, is_symmetric
from sparsemat.special_mats import tri_mesh_graph_laplacian

TRIANGLES = np.array([[0, 3, 4], [0, 4, 1], [1, 4, 5], [1, 5, 2]])


def test_tri_mesh_graph_laplacian():
    x = -1.0
    expected = CsMat.new(
        (6, 6),
        [0, 4, 9, 12, 15, 20, 24],
        [0, 1, 3, 4,
         0, 1, 2, 4, 5,
         1, 2, 5,
         0, 3, 4,
         0, 1, 3, 4, 5,
         1, 2, 4, 5],
        [3.0, x, x, x,
         x, 4.0, x, x, x,
         x, 2.0, x,
         x, 2.0, x,
         x, x, x, 4.0, x,
         x, x, x, 3.0],
    )
    lap_mat = tri_mesh_graph_laplacian(6, TRIANGLES)
    assert lap_mat == expected


def test_laplacian_invariants():
    lap = tri_mesh_graph_laplacian(6, TRIANGLES.tolist())
    assert is_symmetric(lap)
    assert np.allclose(lap.to_dense().sum(axis=1), 0.0)


def test_isolated_vertex():
    lap = tri_mesh_graph_laplacian(1, [])
    assert np.array_equal(lap.to_dense(), np.array([[0.0]]))


def test_bad_triangle_width():
    with pytest.raises(ValueError):
        tri_mesh_graph_laplacian(3, [[0, 1]])