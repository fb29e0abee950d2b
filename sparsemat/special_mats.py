"""Commonly used sparse matrices."""

from __future__ import annotations

import bisect

from sparsemat.matrix import CsMat


def tri_mesh_graph_laplacian(nb_vertices: int, triangles) -> CsMat:
    """The CSR graph laplacian of a triangle mesh.

    ``triangles`` is a sequence of vertex index triples, such as an array of
    shape ``(n, 3)``.
    """
    neighbors: list[list[int]] = [[] for _ in range(nb_vertices)]

    def insert_edge(v0: int, v1: int) -> None:
        vert_neighbs = neighbors[v0]
        pos = bisect.bisect_left(vert_neighbs, v1)
        if pos == len(vert_neighbs) or vert_neighbs[pos] != v1:
            vert_neighbs.insert(pos, v1)

    for triangle in triangles:
        if len(triangle) != 3:
            raise ValueError("triangles must have exactly 3 vertices")
        v0, v1, v2 = (int(v) for v in triangle)
        for a, b in ((v0, v1), (v1, v0), (v0, v2), (v2, v0), (v1, v2), (v2, v1)):
            insert_edge(a, b)

    indptr = [0]
    indices: list[int] = []
    data: list[float] = []
    for vert_ind, vert_neighbs in enumerate(neighbors):
        degree = len(vert_neighbs)
        indptr.append(indptr[-1] + degree + 1)
        below_diag = True
        for neighbor in vert_neighbs:
            if below_diag and neighbor > vert_ind:
                data.append(float(degree))
                indices.append(vert_ind)
                below_diag = False
            data.append(-1.0)
            indices.append(neighbor)
        if below_diag:
            data.append(float(degree))
            indices.append(vert_ind)
    return CsMat.new((nb_vertices, nb_vertices), indptr, indices, data)