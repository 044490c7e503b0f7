# src/sparselabels/query.py

"""
Stateless query algorithms over a ``(Catalog, membership matrix)`` pair.

- :func:`where`: rows matching a set of selectors. WITHIN a category the
  selected labels are OR'ed; ACROSS categories they are AND'ed. If any
  selector is absent from the catalog the whole result is all-false, although
  every selector still gets its category (or :data:`NOT_FOUND`) reported.
- :func:`cartesian` / :func:`combs_frame`: every *possible* combination of
  the labels of some categories (present in the data or not).
- :func:`narrowing_enumeration`: every *present* combination, with its rows,
  computed by successively restricting the row subset category by category
  instead of calling :func:`where` once per possible combination.

Nothing in this module holds state; all functions are safe to call from
several threads on the same inputs.

Examples
--------
>>> import numpy as np
>>> from sparselabels.catalog import Catalog
>>> from sparselabels import matrix as mx
>>> cat = Catalog(("NY", "LA", "high", "low"), ("cities", "cities", "income", "income"))
>>> m = mx.from_columns([[0, 1], [2, 3], [0, 2], [1, 3]], n_rows=4)
>>> where(cat, m, ["NY", "high"])[0].tolist()
[True, False, False, False]
>>> where(cat, m, ["NY", "LA"])[0].tolist()
[True, True, True, True]
>>> mask, cats = where(cat, m, ["NY", "Boston"])
>>> bool(mask.any()), cats
(False, ['cities', NOT_FOUND])
>>> [labs for _, labs in narrowing_enumeration(cat, m, ["cities", "income"])]
[('NY', 'high'), ('NY', 'low'), ('LA', 'high'), ('LA', 'low')]
"""

from __future__ import annotations

from itertools import product
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import scipy.sparse as sp

from . import matrix as mx
from .arrays import ensure_list, rep_logic, unique_in_order
from .catalog import Catalog
from .diagnostics import Sink, log_event
from .errors import NOT_FOUND

__all__ = [
    "where",
    "cartesian",
    "combs_frame",
    "narrowing_enumeration",
    "prune_empty",
    "Group",
]

Group = Tuple[np.ndarray, Tuple[str, ...]]


# ──────────────────────────────────────────────────────────────────────────────
# where
# ──────────────────────────────────────────────────────────────────────────────

def where(catalog: Catalog, m: sp.csc_matrix, selectors) -> Tuple[np.ndarray, list]:
    """
    Row index of the rows matching ``selectors``.

    Parameters
    ----------
    catalog : Catalog
    m : scipy.sparse.csc_matrix
        Canonical membership matrix paired with ``catalog``.
    selectors : str or sequence of str
        Labels to match. Duplicates are ignored (first occurrence kept).

    Returns
    -------
    (numpy.ndarray, list)
        The boolean row index, and for every de-duplicated selector its
        category or :data:`NOT_FOUND`.

    Notes
    -----
    A single unknown selector makes the returned index all-false, whatever the
    other selectors match. An empty selector list matches every row.
    """
    n_rows = m.shape[0]
    selectors = unique_in_order(ensure_list(selectors))
    cats: list = []
    positions: List[int] = []
    missing = False
    for s in selectors:
        pos = catalog.find(s)
        if pos is None:
            missing = True
            cats.append(NOT_FOUND)
            continue
        positions.append(pos)
        cats.append(catalog.categories[pos])

    if missing:
        return rep_logic(n_rows, False), cats

    # fast path: no category repeated -> a plain AND over the columns
    found = [catalog.categories[p] for p in positions]
    if len(set(found)) == len(found):
        full = rep_logic(n_rows, True)
        for p in positions:
            full &= mx.column_mask(m, p)
            if not full.any():
                break
        return full, cats

    by_category: Dict[str, List[int]] = {}
    for p, c in zip(positions, found):
        by_category.setdefault(c, []).append(p)

    full = rep_logic(n_rows, True)
    for group in by_category.values():
        within = rep_logic(n_rows, False)
        for p in group:
            within[mx.column_rows(m, p)] = True
        full &= within
        if not full.any():
            break
    return full, cats


# ──────────────────────────────────────────────────────────────────────────────
# combinations
# ──────────────────────────────────────────────────────────────────────────────

def cartesian(uniques: Sequence[Sequence[str]]) -> List[Tuple[str, ...]]:
    """
    Cartesian product of label lists, first list varying slowest.

    >>> cartesian([["a", "b"], ["x"]])
    [('a', 'x'), ('b', 'x')]
    """
    return list(product(*uniques))


def combs_frame(categories: Sequence[str], uniques: Sequence[Sequence[str]]) -> pd.DataFrame:
    """
    Table of every possible combination; one column per category.
    """
    rows = cartesian(uniques) if categories else []
    return pd.DataFrame(rows, columns=list(categories), dtype=object)


# ──────────────────────────────────────────────────────────────────────────────
# narrowing enumeration
# ──────────────────────────────────────────────────────────────────────────────

def prune_empty(catalog: Catalog, m: sp.csc_matrix) -> Tuple[Catalog, sp.csc_matrix]:
    """Drop the entries whose column has no true row."""
    live = np.flatnonzero(mx.column_counts(m) > 0)
    if live.shape[0] == len(catalog):
        return catalog, m
    return catalog.take(live.tolist()), mx.select_columns(m, live)


def _narrow(
    catalog: Catalog,
    m: sp.csc_matrix,
    rows: np.ndarray,
    remaining: Tuple[str, ...],
    accumulated: Tuple[str, ...],
    out: List[Group],
) -> None:
    """
    Partition ``rows`` by the present labels of ``remaining[0]`` and recurse.

    ``m`` holds only the rows in ``rows`` (renumbered) and only non-empty
    columns, so every label left in ``catalog`` is present in the subset.
    """
    if not remaining:
        out.append((rows, accumulated))
        return
    category, rest = remaining[0], remaining[1:]
    if not catalog.contains_category(category):
        return
    for pos in catalog.positions_in(category):
        hits = mx.column_rows(m, pos)
        if hits.size == 0:
            continue
        label = catalog.labels[pos]
        if not rest:
            out.append((rows[hits], accumulated + (label,)))
            continue
        sub_catalog, sub = prune_empty(catalog, mx.take_rows(m, hits))
        _narrow(sub_catalog, sub, rows[hits], rest, accumulated + (label,), out)


def narrowing_enumeration(
    catalog: Catalog,
    m: sp.csc_matrix,
    categories,
    *,
    sink: Optional[Sink] = None,
) -> List[Group]:
    """
    Every present label combination of ``categories`` with its row index.

    Categories are de-duplicated and visited in catalog order; labels within a
    category in catalog order. Only combinations with at least one row are
    returned, so callers never need to test an index for emptiness.

    Parameters
    ----------
    catalog : Catalog
    m : scipy.sparse.csc_matrix
    categories : str or sequence of str
        Must all exist (:class:`~sparselabels.errors.UnknownCategory` otherwise).
    sink : callable, optional
        Receives a one-line summary.

    Returns
    -------
    list of (numpy.ndarray, tuple of str)
        ``(row_index, labels)`` pairs; ``labels[k]`` belongs to the ``k``-th
        category in catalog order.
    """
    n_rows = m.shape[0]
    ordered = tuple(catalog.normalize_categories(categories))

    if not ordered:
        groups = [(rep_logic(n_rows, True), ())] if n_rows else []
        log_event(f"get_indices: {len(groups)} group(s) for no categories", sink)
        return groups

    out: List[Group] = []
    if len(ordered) == 1:
        for pos in catalog.positions_in(ordered[0]):
            if mx.column_rows(m, pos).size:
                out.append((mx.column_mask(m, pos), (catalog.labels[pos],)))
        log_event(f"get_indices: {len(out)} group(s) in {ordered[0]!r}", sink)
        return out

    # restrict the matrix to the requested categories before narrowing
    wanted = set(ordered)
    cols = [i for i, c in enumerate(catalog.categories) if c in wanted]
    sub_catalog, sub = prune_empty(catalog.take(cols), mx.select_columns(m, cols))
    found: List[Group] = []
    _narrow(sub_catalog, sub, np.arange(n_rows), ordered, (), found)

    for rows, labels in found:
        mask = rep_logic(n_rows, False)
        mask[rows] = True
        out.append((mask, labels))
    log_event(
        f"get_indices: {len(out)} present combination(s) across {list(ordered)}",
        sink,
    )
    return out
