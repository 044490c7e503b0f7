# src/sparselabels/merge.py

"""
Merging two ``(Catalog, membership matrix)`` pairs.

Two indexes are *category-compatible* when their sets of category names are
equal (order and number of labels per category do not matter). Both merges
below require it, and both require every label the operands share to live in
the same category on each side. All checks run before anything is built.

- :func:`append` stacks B's rows under A's rows.
- :func:`overwrite` replaces a subset of A's rows, given by a boolean index,
  with B's rows.

Examples
--------
>>> from sparselabels.catalog import Catalog
>>> from sparselabels import matrix as mx
>>> a_cat = Catalog(("NY", "high"), ("cities", "income"))
>>> a_m = mx.from_columns([[0], [0]], n_rows=1)
>>> b_cat = Catalog(("LA", "high"), ("cities", "income"))
>>> b_m = mx.from_columns([[0], [0]], n_rows=1)
>>> cat, m = append(a_cat, a_m, b_cat, b_m)
>>> cat.labels, m.toarray().tolist()
(('NY', 'high', 'LA'), [[True, True, False], [False, True, True]])
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
import scipy.sparse as sp

from . import matrix as mx
from .arrays import as_row_vector
from .catalog import Catalog
from .diagnostics import Sink, log_event
from .errors import CategoryConflict, CategoryMismatch, ShapeMismatch

__all__ = [
    "categories_match",
    "assert_categories_match",
    "shared_labels",
    "append",
    "overwrite",
]


# ──────────────────────────────────────────────────────────────────────────────
# Compatibility checks
# ──────────────────────────────────────────────────────────────────────────────

def categories_match(a: Catalog, b: Catalog) -> bool:
    """``True`` iff both catalogs define the same set of category names."""
    return set(a.categories) == set(b.categories)


def assert_categories_match(a: Catalog, b: Catalog) -> None:
    if categories_match(a, b):
        return
    only_a = sorted(set(a.categories) - set(b.categories))
    only_b = sorted(set(b.categories) - set(a.categories))
    raise CategoryMismatch(
        f"The categories do not match between objects "
        f"(only in first: {only_a}; only in second: {only_b})"
    )


def shared_labels(a: Catalog, b: Catalog) -> List[str]:
    """
    Labels of ``b`` that also exist in ``a``, in ``b``'s order.

    Raises :class:`CategoryConflict` if any of them is filed under a different
    category on each side.
    """
    shared = [lab for lab in b.labels if a.contains_label(lab)]
    for lab in shared:
        ca, cb = a.category_of(lab), b.category_of(lab)
        if ca != cb:
            raise CategoryConflict(
                f"Label {lab!r} is in category {ca!r} in the first object "
                f"but in {cb!r} in the second"
            )
    return shared


def _merged_catalog(a: Catalog, b: Catalog) -> Tuple[Catalog, List[int], List[int]]:
    """
    Catalog of ``a`` followed by b-exclusive entries, plus per-output-column
    source positions in ``a`` and in ``b`` (``-1`` where absent).
    """
    exclusive = [i for i, lab in enumerate(b.labels) if not a.contains_label(lab)]
    merged = Catalog(
        a.labels + tuple(b.labels[i] for i in exclusive),
        a.categories + tuple(b.categories[i] for i in exclusive),
    )
    from_a = list(range(len(a))) + [-1] * len(exclusive)
    in_b = [b.find(lab) for lab in a.labels]
    from_b = [-1 if p is None else p for p in in_b] + exclusive
    return merged, from_a, from_b


# ──────────────────────────────────────────────────────────────────────────────
# append
# ──────────────────────────────────────────────────────────────────────────────

def append(
    a_cat: Catalog,
    a_m: sp.csc_matrix,
    b_cat: Catalog,
    b_m: sp.csc_matrix,
    *,
    sink: Optional[Sink] = None,
) -> Tuple[Catalog, sp.csc_matrix]:
    """
    Stack B under A.

    If A has no catalog entries, B is returned unchanged. Otherwise the result
    has ``rows(A) + rows(B)`` rows; a shared label's column is A's column over
    the first block and B's column over the second; a label only A has is
    false over B's block and vice versa.

    Raises
    ------
    CategoryMismatch
        If the category sets differ.
    CategoryConflict
        If a shared label is in different categories.
    """
    if a_cat.is_empty():
        return b_cat, b_m
    assert_categories_match(a_cat, b_cat)
    shared = shared_labels(a_cat, b_cat)

    merged, from_a, from_b = _merged_catalog(a_cat, b_cat)
    top = mx.select_columns(a_m, from_a)
    bottom = mx.select_columns(b_m, from_b)
    log_event(
        f"append: {a_m.shape[0]} + {b_m.shape[0]} rows; "
        f"{len(shared)} shared label(s), {len(merged) - len(a_cat)} new",
        sink,
    )
    return merged, mx.stack_rows(top, bottom)


# ──────────────────────────────────────────────────────────────────────────────
# overwrite
# ──────────────────────────────────────────────────────────────────────────────

def overwrite(
    a_cat: Catalog,
    a_m: sp.csc_matrix,
    b_cat: Catalog,
    b_m: sp.csc_matrix,
    index,
    *,
    sink: Optional[Sink] = None,
) -> Tuple[Catalog, sp.csc_matrix]:
    """
    Replace the rows of A selected by ``index`` with the rows of B, in order.

    ``index`` is a boolean vector over A's rows whose true-count equals
    ``rows(B)``. At the selected rows every column takes B's value (false for
    labels B does not have); B-exclusive labels become new columns that are
    false outside the selected rows. The result is *not* pruned; callers
    rehash afterwards, since A-only labels may have lost all their rows.

    Raises
    ------
    ShapeMismatch
        If ``index`` is not a boolean vector over A's rows, or its true-count
        differs from ``rows(B)``.
    CategoryMismatch, CategoryConflict
        As for :func:`append`.
    """
    n_rows = a_m.shape[0]
    index = as_row_vector(index, n_rows)
    targets = np.flatnonzero(index)
    if targets.shape[0] != b_m.shape[0]:
        raise ShapeMismatch(
            f"The index selects {targets.shape[0]} row(s) but the incoming "
            f"object has {b_m.shape[0]}"
        )
    assert_categories_match(a_cat, b_cat)
    shared = shared_labels(a_cat, b_cat)

    merged, from_a, from_b = _merged_catalog(a_cat, b_cat)
    kept = mx.select_columns(mx.mask_rows(a_m, ~index), from_a)
    incoming = mx.select_columns(mx.scatter_rows(b_m, targets, n_rows), from_b)
    log_event(
        f"overwrite: {targets.shape[0]} row(s) replaced; "
        f"{len(shared)} shared label(s), {len(merged) - len(a_cat)} new",
        sink,
    )
    return merged, mx.union(kept, incoming)
