# src/sparselabels/codec.py

"""
Conversions between label representations.

- :func:`to_bitmap`: dense table (``DataFrame``, ``{category: labels}``
  mapping or :class:`~sparselabels.dense.DenseLabels`) -> :class:`SparseLabels`.
- :func:`to_dense`: any index -> ``DataFrame`` with one column per category.
  Raises :class:`~sparselabels.errors.LossyConversion` when a row carries two
  labels of one category, since a cell can hold only one.
- :func:`construct`: build either representation from a dense table.
- :func:`to_record` / :func:`from_record`: the interchange record
  ``{"labels": [...], "categories": [...], "membership": <rows x labels bool>}``.

Examples
--------
>>> from sparselabels.codec import construct, to_dense, to_record, from_record
>>> idx = construct({"cities": ["NY", "LA", None]})
>>> to_dense(idx)["cities"].tolist()
['NY', 'LA', None]
>>> rec = to_record(idx)
>>> rec["labels"], rec["membership"].shape
(['NY', 'LA'], (3, 2))
>>> from_record(rec).eq(idx)
True
"""

from __future__ import annotations

from typing import Dict, Mapping

import numpy as np
import pandas as pd
import scipy.sparse as sp

from . import matrix as mx
from .arrays import label_rows
from .base import CategoricalIndex
from .catalog import Catalog
from .dense import DenseLabels
from .errors import InvalidRecord, LossyConversion
from .sparse import SparseLabels

__all__ = [
    "construct",
    "to_bitmap",
    "to_dense",
    "to_record",
    "from_record",
]

_RECORD_KEYS = ("labels", "categories", "membership")


# ──────────────────────────────────────────────────────────────────────────────
# Dense <-> bitmap
# ──────────────────────────────────────────────────────────────────────────────

def to_bitmap(table) -> SparseLabels:
    """
    Bitmap index of a dense table.

    For each column, the distinct non-empty cells become catalog entries (in
    order of first appearance) and each entry's column marks the rows holding
    that value.

    Raises
    ------
    DuplicateLabel
        If a label appears under two categories.
    ShapeMismatch
        If a mapping's sequences differ in length.
    """
    if isinstance(table, SparseLabels):
        return table
    dense = DenseLabels.from_table(table)
    labels, cats, columns = [], [], []
    for c in dense.frame.columns:
        labs, rows = label_rows(dense.frame[c].tolist())
        labels.extend(labs)
        cats.extend([c] * len(labs))
        columns.extend(rows)
    return SparseLabels(Catalog(tuple(labels), tuple(cats)), mx.from_columns(columns, dense.n_rows))


def to_dense(index) -> pd.DataFrame:
    """
    Dense table of an index: one column per category, ``None`` where a row has
    no label in that category.

    Raises
    ------
    LossyConversion
        If some row carries more than one label of the same category.
    """
    if isinstance(index, DenseLabels):
        return index.to_dense()
    if not isinstance(index, CategoricalIndex):
        raise TypeError(f"Expected a label index; got {type(index).__name__}")
    index = index.to_sparse()

    n_rows = index.n_rows
    names = index.category_names()
    data = {c: np.full(n_rows, None, dtype=object) for c in names}
    taken = {c: np.zeros(n_rows, dtype=bool) for c in names}
    for j, (lab, cat) in enumerate(index.catalog):
        rows = mx.column_rows(index.membership, j)
        clash = rows[taken[cat][rows]]
        if clash.size:
            r = int(clash[0])
            raise LossyConversion(
                f"Row {r} carries both {data[cat][r]!r} and {lab!r} in category {cat!r}; "
                f"the dense form holds one label per row and category"
            )
        data[cat][rows] = lab
        taken[cat][rows] = True
    return pd.DataFrame(data, index=pd.RangeIndex(n_rows), columns=names)


def construct(table, *, sparse: bool = True) -> CategoricalIndex:
    """Bitmap (default) or dense index from a dense table."""
    if sparse:
        return to_bitmap(table)
    return DenseLabels.from_table(table)


# ──────────────────────────────────────────────────────────────────────────────
# Interchange record
# ──────────────────────────────────────────────────────────────────────────────

def to_record(index) -> Dict[str, object]:
    """
    ``{"labels", "categories", "membership"}`` of an index.

    ``membership`` is a fresh canonical ``scipy.sparse.csc_matrix``.
    """
    if not isinstance(index, CategoricalIndex):
        raise TypeError(f"Expected a label index; got {type(index).__name__}")
    s = index.to_sparse()
    return {
        "labels": list(s.catalog.labels),
        "categories": list(s.catalog.categories),
        "membership": s.membership.copy(),
    }


def from_record(record: Mapping) -> SparseLabels:
    """
    Bitmap index from an interchange record, after checking every invariant.

    ``membership`` may be any SciPy sparse matrix or a dense 2-D array-like of
    booleans (or 0/1).

    Raises
    ------
    InvalidRecord
        Missing keys, a non-string label or category, a membership that is
        not 2-D, lengths that disagree, or a label with no true row.
    DuplicateLabel
        If a label is listed twice.
    """
    if not isinstance(record, Mapping):
        raise InvalidRecord(f"A record must be a mapping; got {type(record).__name__}")
    missing = [k for k in _RECORD_KEYS if k not in record]
    if missing:
        raise InvalidRecord(f"Record is missing key(s) {missing}")

    labels = list(record["labels"])
    categories = list(record["categories"])
    odd = [v for v in labels + categories if not isinstance(v, str)]
    if odd:
        raise InvalidRecord(f"Labels and categories must be strings; got {odd[:3]}")
    membership = record["membership"]
    if not sp.issparse(membership):
        membership = np.asarray(membership)
    if membership.ndim != 2:
        raise InvalidRecord(f"membership must be 2-D; got shape {membership.shape}")
    m = mx.canonical(membership)

    if not (len(labels) == len(categories) == m.shape[1]):
        raise InvalidRecord(
            f"labels ({len(labels)}), categories ({len(categories)}) and membership "
            f"columns ({m.shape[1]}) must agree"
        )
    dead = [labels[j] for j in np.flatnonzero(mx.column_counts(m) == 0)]
    if dead:
        raise InvalidRecord(f"Label(s) {dead} have no true row")
    return SparseLabels(Catalog(tuple(labels), tuple(categories)), m)
