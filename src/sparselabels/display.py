# src/sparselabels/display.py

from __future__ import annotations
from typing import List, Optional

import pandas as pd

from .config import LabelsConfig, resolve_config

"""
Human-readable views of a label index.

- :func:`counts` returns a tidy ``DataFrame`` (``label, category, count``)
  with one row per label.
- :func:`describe` renders the categories and their labels as text::

    SparseLabels: 4 rows, 2 categories
     * cities
         - NY (2)
         - LA (2)
     * income
         - high (2)
         - low (2)

Both accept either representation; dense indexes are counted through their
bitmap form.
"""

__all__ = [
    "counts",
    "describe",
]


# ────────────────────────────── Internals ────────────────────────────── #

def _plural(n: int, one: str, many: str) -> str:
    return f"{n} {one}" if n == 1 else f"{n} {many}"


# ─────────────────────────────── Tables ─────────────────────────────── #

def counts(index, categories=None) -> pd.DataFrame:
    """
    Number of rows carrying each label.

    Parameters
    ----------
    index : CategoricalIndex
    categories : str or sequence of str, optional
        Restrict to these categories (all by default). Unknown names raise
        :class:`~sparselabels.errors.UnknownCategory`.

    Returns
    -------
    pandas.DataFrame
        Columns ``label``, ``category``, ``count``; rows in catalog order.
    """
    s = index.to_sparse()
    wanted = set(s.category_names() if categories is None else s._require_categories(categories))
    rows = [
        (lab, cat, int(n))
        for (lab, cat), n in zip(s.catalog, s.column_counts())
        if cat in wanted
    ]
    out = pd.DataFrame(rows, columns=["label", "category", "count"])
    out["count"] = out["count"].astype(int)
    return out


# ─────────────────────────────── Text ─────────────────────────────── #

def describe(index, *, config: Optional[LabelsConfig] = None) -> str:
    """
    Multi-line text listing of categories and labels with their row counts.

    At most ``config.max_display_items`` labels are listed per category unless
    ``config.verbose_display`` is set; the rest are summarized as
    ``"... and N others"``.
    """
    cfg = resolve_config(config)
    table = counts(index)
    names = index.category_names()
    lines: List[str] = [
        f"{type(index).__name__}: {_plural(index.n_rows, 'row', 'rows')}, "
        f"{_plural(len(names), 'category', 'categories')}"
    ]
    for c in names:
        lines.append(f" * {c}")
        sub = table[table["category"] == c]
        limit = len(sub) if cfg.verbose_display else cfg.max_display_items
        for lab, n in zip(sub["label"].head(limit), sub["count"].head(limit)):
            lines.append(f"\t - {lab} ({n})")
        hidden = len(sub) - min(limit, len(sub))
        if hidden:
            lines.append(f"\t ... and {hidden} others")
    return "\n".join(lines)
