"""Compressed sparse matrices, triplet builders, permutations, products and orderings."""

__version__ = "0.1.0"

__all__ = [
    "matrix",
    "etree",
    "special_mats",
    "triplet",
    "permutation",
    "smmp",
    "prod",
    "ordering",
]