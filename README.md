# sparsemat

Compressed sparse matrices for Python, with the tools commonly needed
around them:

- `sparsemat.matrix`: `CsMat` (CSR or CSC storage, chosen with
  `CompressedStorage`) and `CsVec`. Matrices support outer slicing
  (`slice_outer`), transposition (`transpose_view`), storage conversion
  (`to_csr`, `to_csc`, `to_other_storage`), conversion to NumPy arrays
  (`to_dense`), and a plain dictionary form (`to_dict` / `from_dict`).
  `from_dict` checks the structure it is given. The module also provides
  `assign_to_dense`, `assign_vector_to_dense` and `is_symmetric`.
  A malformed structure raises `StructureError`.
- `sparsemat.triplet`: `TriMat`, a triplet (coordinate) builder. Duplicate
  entries are summed when it is converted with `to_csr` or `to_csc`.
  `find_locations` returns `TripletIndex` values that `set_triplet` accepts.
- `sparsemat.permutation`: `Permutation` (with `identity`, `inv`, `at`,
  `at_inv`, `vec`, `inv_vec`, and `*` applied to a dense vector),
  `perm_is_valid`, and the products `permute_rows` (P A), `permute_cols`
  (A P), `transform_mat_papt` (P A P^T) and `transform_mat_paq` (P A Q).
- `sparsemat.smmp`: the product of two CSR matrices in two passes.
  `symbolic` computes the structure and `numeric` computes the values.
  `mul_csr_csr` runs both passes.
- `sparsemat.prod`: sparse vector dot products
  (`csvec_dot_by_binary_search`) and matrix-vector products
  (`mul_acc_mat_vec_csr`, `mul_acc_mat_vec_csc`, `csr_mul_csvec`). It also
  has sparse-dense products that add their result into an output array
  (`csr_mulacc_dense_rowmaj`, `csc_mulacc_dense_rowmaj`,
  `csr_mulacc_dense_colmaj`, `csc_mulacc_dense_colmaj`).
- `sparsemat.ordering`: Cuthill-McKee orderings. `cuthill_mckee_custom`
  takes a starting strategy (`Next`, `MinimumDegree` or `PseudoPeripheral`)
  and a direction (`Forward` or `Reversed`). `reverse_cuthill_mckee` uses
  `PseudoPeripheral` with `Reversed`. The result is an `Ordering`, which
  holds a permutation and the positions that delimit connected components.
- `sparsemat.special_mats`: `tri_mesh_graph_laplacian`, the graph Laplacian
  of a triangle mesh.
- `sparsemat.etree`: `Parents`, an elimination tree or forest stored as the
  parent of each node.

## Installation

```
pip install .
```

## Example

```python
from sparsemat.triplet import TriMat
from sparsemat.permutation import Permutation, permute_rows
from sparsemat.ordering import reverse_cuthill_mckee
from sparsemat.smmp import mul_csr_csr

tri = TriMat((3, 3))
tri.add_triplet(0, 0, 2.0)
tri.add_triplet(1, 1, 3.0)
tri.add_triplet(2, 2, 4.0)
tri.add_triplet(0, 2, 1.0)
tri.add_triplet(2, 0, 1.0)
mat = tri.to_csr()

print(mat.to_dense())

perm = Permutation([2, 1, 0])
print(permute_rows(mat, perm).to_dense())

print(mul_csr_csr(mat, mat).to_dense())

ordering = reverse_cuthill_mckee(mat)
print(ordering.perm.vec(), ordering.connected_parts)
```

Invalid input raises an exception. This covers a malformed matrix
structure, mismatched dimensions, or the wrong storage layout for a
product function. Such errors are never reported through a return value.

## What the package does not do

- It has no linear solvers and no factorizations. There are no triangular
  solves, no iterative methods and no Cholesky or LU. `Parents` only stores
  a tree; nothing in the package computes one from a matrix.
- Matrices do not overload arithmetic operators. Products are computed with
  the functions in `sparsemat.smmp` and `sparsemat.prod`.
- Storage is limited to `to_dict` / `from_dict`. The package reads and
  writes no files and no file formats.

## Running the tests

```
pip install .[test]
pytest
```