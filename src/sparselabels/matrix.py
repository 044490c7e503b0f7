# src/sparselabels/matrix.py

"""
Boolean membership matrices stored as canonical SciPy CSC matrices.

Column ``j`` of a membership matrix is the indicator vector of catalog entry
``j``: row ``r`` is stored (``True``) iff row ``r`` carries that label.

All helpers here accept and return *canonical* matrices:

- format ``csc_matrix`` with dtype ``bool``;
- no explicitly stored ``False`` values;
- row indices sorted within each column, no duplicates.

Under that invariant the structure arrays are the data: the stored rows of
column ``j`` are ``m.indices[m.indptr[j]:m.indptr[j + 1]]``, the number of
true rows per column is ``np.diff(m.indptr)``, and two matrices are equal iff
their shapes, ``indptr`` and ``indices`` are equal. The helpers below build
new matrices directly from those arrays; they never modify their inputs.

Examples
--------
>>> import numpy as np
>>> from sparselabels import matrix as mx
>>> m = mx.from_columns([np.array([0, 1]), np.array([2])], n_rows=3)
>>> m.shape, mx.column_counts(m).tolist()
((3, 2), [2, 1])
>>> mx.column_mask(m, 1).tolist()
[False, False, True]
>>> mx.take_rows(m, np.array([1, 2])).toarray().tolist()
[[True, False], [False, True]]
"""

from __future__ import annotations
from typing import Iterable, Sequence

import numpy as np
import scipy.sparse as sp

__all__ = [
    "canonical",
    "empty",
    "from_columns",
    "from_masks",
    "from_dense",
    "to_dense",
    "column_rows",
    "column_mask",
    "column_counts",
    "select_columns",
    "add_columns",
    "take_rows",
    "mask_rows",
    "scatter_rows",
    "stack_rows",
    "union",
    "same_matrix",
]

_INDEX_DTYPE = np.int64


# ──────────────────────────────────────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────────────────────────────────────

def _build(indices: np.ndarray, indptr: np.ndarray, n_rows: int) -> sp.csc_matrix:
    indices = np.asarray(indices, dtype=_INDEX_DTYPE)
    indptr = np.asarray(indptr, dtype=_INDEX_DTYPE)
    data = np.ones(indices.shape[0], dtype=bool)
    n_cols = indptr.shape[0] - 1
    return sp.csc_matrix((data, indices, indptr), shape=(int(n_rows), int(n_cols)))


def canonical(m) -> sp.csc_matrix:
    """
    Convert any SciPy sparse matrix/array (or dense 2-D array) to canonical form.
    """
    if not sp.issparse(m):
        return from_dense(m)
    out = sp.csc_matrix(m, copy=True)
    out.sum_duplicates()
    out = out.astype(bool)
    out.eliminate_zeros()
    out.sort_indices()
    return _build(out.indices, out.indptr, out.shape[0])


def empty(n_rows: int, n_cols: int = 0) -> sp.csc_matrix:
    """All-false matrix of the given shape."""
    return _build(np.zeros(0), np.zeros(n_cols + 1), n_rows)


def from_columns(columns: Sequence[np.ndarray], n_rows: int) -> sp.csc_matrix:
    """
    Build a matrix from per-column arrays of true row positions.

    Each array must hold unique positions in ``[0, n_rows)``; they are sorted here.
    """
    indptr = np.zeros(len(columns) + 1, dtype=_INDEX_DTYPE)
    parts = []
    for j, rows in enumerate(columns):
        rows = np.unique(np.asarray(rows, dtype=_INDEX_DTYPE))
        if rows.size and (rows[0] < 0 or rows[-1] >= n_rows):
            raise IndexError(f"Row position out of range for {n_rows} rows.")
        parts.append(rows)
        indptr[j + 1] = indptr[j] + rows.size
    indices = np.concatenate(parts) if parts else np.zeros(0, dtype=_INDEX_DTYPE)
    return _build(indices, indptr, n_rows)


def from_masks(masks: Iterable[np.ndarray], n_rows: int) -> sp.csc_matrix:
    """Build a matrix from boolean row vectors, one per column."""
    return from_columns([np.flatnonzero(m) for m in masks], n_rows)


def from_dense(arr) -> sp.csc_matrix:
    """Build a matrix from a dense 2-D boolean array."""
    a = np.asarray(arr)
    if a.ndim != 2:
        raise ValueError(f"Membership must be 2-D; got shape {a.shape}.")
    a = a.astype(bool, copy=False)
    return from_masks([a[:, j] for j in range(a.shape[1])], a.shape[0])


def to_dense(m: sp.csc_matrix) -> np.ndarray:
    """Dense ``(rows, cols)`` boolean array."""
    return m.toarray().astype(bool, copy=False)


# ──────────────────────────────────────────────────────────────────────────────
# Column access
# ──────────────────────────────────────────────────────────────────────────────

def column_rows(m: sp.csc_matrix, j: int) -> np.ndarray:
    """Sorted positions of the true rows of column ``j``."""
    return m.indices[m.indptr[j]:m.indptr[j + 1]]


def column_mask(m: sp.csc_matrix, j: int) -> np.ndarray:
    """Column ``j`` as a boolean row vector."""
    out = np.zeros(m.shape[0], dtype=bool)
    out[column_rows(m, j)] = True
    return out


def column_counts(m: sp.csc_matrix) -> np.ndarray:
    """Number of true rows in every column."""
    return np.diff(m.indptr)


def select_columns(m: sp.csc_matrix, positions: Sequence[int]) -> sp.csc_matrix:
    """
    New matrix whose column ``k`` is column ``positions[k]`` of ``m``.

    A negative position yields an all-false column, which is how merges align
    two matrices whose catalogs only partially overlap.
    """
    positions = np.asarray(positions, dtype=_INDEX_DTYPE).reshape(-1)
    indptr = np.zeros(positions.shape[0] + 1, dtype=_INDEX_DTYPE)
    parts = []
    for k, p in enumerate(positions):
        seg = column_rows(m, p) if p >= 0 else np.zeros(0, dtype=_INDEX_DTYPE)
        parts.append(seg)
        indptr[k + 1] = indptr[k] + seg.size
    indices = np.concatenate(parts) if parts else np.zeros(0, dtype=_INDEX_DTYPE)
    return _build(indices, indptr, m.shape[0])


def add_columns(m: sp.csc_matrix, columns: Sequence[np.ndarray]) -> sp.csc_matrix:
    """Append columns, given as arrays of true row positions, to the right of ``m``."""
    extra = from_columns(columns, m.shape[0])
    indptr = np.concatenate([m.indptr[:-1], extra.indptr + m.indptr[-1]])
    indices = np.concatenate([m.indices, extra.indices])
    return _build(indices, indptr, m.shape[0])


# ──────────────────────────────────────────────────────────────────────────────
# Row operations
# ──────────────────────────────────────────────────────────────────────────────

def _rebuild_from_mapping(m: sp.csc_matrix, new_index: np.ndarray, n_rows: int) -> sp.csc_matrix:
    """
    Relabel every stored row through ``new_index`` (``-1`` drops the entry).

    ``new_index`` must be increasing on the rows it keeps so that sorted
    columns stay sorted.
    """
    n_cols = m.shape[1]
    mapped = new_index[m.indices] if m.indices.size else np.zeros(0, dtype=_INDEX_DTYPE)
    keep = mapped >= 0
    col_of = np.repeat(np.arange(n_cols, dtype=_INDEX_DTYPE), np.diff(m.indptr))
    counts = np.bincount(col_of[keep], minlength=n_cols)
    indptr = np.concatenate([[0], np.cumsum(counts)])
    return _build(mapped[keep], indptr, n_rows)


def take_rows(m: sp.csc_matrix, rows: np.ndarray) -> sp.csc_matrix:
    """
    Sub-matrix made of the given rows, renumbered ``0..len(rows)-1``.

    ``rows`` must be strictly increasing (e.g. ``np.flatnonzero(mask)``).
    """
    rows = np.asarray(rows, dtype=_INDEX_DTYPE)
    new_index = np.full(m.shape[0], -1, dtype=_INDEX_DTYPE)
    new_index[rows] = np.arange(rows.shape[0], dtype=_INDEX_DTYPE)
    return _rebuild_from_mapping(m, new_index, rows.shape[0])


def mask_rows(m: sp.csc_matrix, keep: np.ndarray) -> sp.csc_matrix:
    """Same shape as ``m`` with every row outside ``keep`` cleared."""
    new_index = np.where(keep, np.arange(m.shape[0], dtype=_INDEX_DTYPE), -1)
    return _rebuild_from_mapping(m, new_index, m.shape[0])


def scatter_rows(m: sp.csc_matrix, targets: np.ndarray, n_rows: int) -> sp.csc_matrix:
    """
    Move row ``i`` of ``m`` to row ``targets[i]`` of a taller ``n_rows`` matrix.

    ``targets`` must be strictly increasing.
    """
    targets = np.asarray(targets, dtype=_INDEX_DTYPE)
    if targets.shape[0] != m.shape[0]:
        raise ValueError("targets must have one entry per row of the matrix")
    return _rebuild_from_mapping(m, targets, n_rows)


def stack_rows(top: sp.csc_matrix, bottom: sp.csc_matrix) -> sp.csc_matrix:
    """Row-wise concatenation ``[top; bottom]``; column counts must agree."""
    if top.shape[1] != bottom.shape[1]:
        raise ValueError("Cannot stack matrices with different column counts")
    n_cols = top.shape[1]
    offset = top.shape[0]
    parts = []
    indptr = np.zeros(n_cols + 1, dtype=_INDEX_DTYPE)
    for j in range(n_cols):
        a = column_rows(top, j)
        b = column_rows(bottom, j) + offset
        parts.extend((a, b))
        indptr[j + 1] = indptr[j] + a.size + b.size
    indices = np.concatenate(parts) if parts else np.zeros(0, dtype=_INDEX_DTYPE)
    return _build(indices, indptr, top.shape[0] + bottom.shape[0])


def union(a: sp.csc_matrix, b: sp.csc_matrix) -> sp.csc_matrix:
    """Elementwise logical OR of two same-shaped matrices."""
    if a.shape != b.shape:
        raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")
    return canonical(a.astype(np.int8) + b.astype(np.int8))


def same_matrix(a: sp.csc_matrix, b: sp.csc_matrix) -> bool:
    """Exact equality of two canonical matrices."""
    return (
        a.shape == b.shape
        and np.array_equal(a.indptr, b.indptr)
        and np.array_equal(a.indices, b.indices)
    )
