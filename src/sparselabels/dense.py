# src/sparselabels/dense.py

"""
Dense label index: a pandas ``DataFrame`` with one column per category.

Each cell holds the single label a row carries in that category, or ``None``
when the row has none. Labels are unique across columns (a label string
cannot appear under two categories). This form is simple and readable but
cannot express a row with two labels in one category; the bitmap form
(:class:`~sparselabels.sparse.SparseLabels`) can.

Operations mirror :class:`SparseLabels`; combination enumeration uses the
slower scan over every possible combination.

Examples
--------
>>> from sparselabels import DenseLabels
>>> d = DenseLabels.from_table({"cities": ["NY", "LA"], "income": ["high", None]})
>>> d.shape
(2, 2)
>>> d.where(["LA"])[0].tolist()
[False, True]
>>> d.labels_in("income")
['high']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from . import merge
from .arrays import as_row_vector, common_length, ensure_list, is_empty_cell, rep_logic, unique_in_order
from .base import CategoricalIndex
from .catalog import Catalog
from .config import LabelsConfig, resolve_config
from .diagnostics import Sink, log_event
from .errors import (
    NOT_FOUND,
    CategoryConflict,
    CategoryMismatch,
    DuplicateCategory,
    DuplicateLabel,
    ShapeMismatch,
)
from .query import Group

if TYPE_CHECKING:  # pragma: no cover
    from .sparse import SparseLabels

__all__ = ["DenseLabels", "normalize_table"]


# ──────────────────────────────────────────────────────────────────────────────
# Table normalization
# ──────────────────────────────────────────────────────────────────────────────

def normalize_table(table) -> pd.DataFrame:
    """
    Coerce a dense table to the canonical frame layout.

    Accepts a ``DataFrame`` or a ``{category: per-row labels}`` mapping. The
    result has a ``RangeIndex``, string column names, dtype ``object`` and
    ``None`` in every empty cell (``None``, ``NaN`` or ``""`` on input).

    Raises
    ------
    ShapeMismatch
        If the mapping's sequences differ in length.
    TypeError
        If a column name or a non-empty cell is not a string.
    """
    if isinstance(table, pd.DataFrame):
        if len(set(table.columns)) != len(table.columns):
            raise DuplicateCategory("Column names of a dense table must be unique")
        n_rows = len(table)
        source = {c: table[c].tolist() for c in table.columns}
    elif isinstance(table, Mapping):
        n_rows = common_length(table)
        source = {c: list(v) for c, v in table.items()}
    else:
        raise TypeError(f"Expected a DataFrame or a mapping; got {type(table).__name__}")

    data = {}
    for name, values in source.items():
        if not isinstance(name, str):
            raise TypeError(f"Category names must be strings; got {name!r}")
        cells = [None if is_empty_cell(v) else v for v in values]
        for v in cells:
            if v is not None and not isinstance(v, str):
                raise TypeError(f"Labels must be strings; got {type(v).__name__}: {v!r}")
        data[name] = cells
    return pd.DataFrame(data, index=pd.RangeIndex(n_rows), columns=list(data), dtype=object)


def _label_owners(frame: pd.DataFrame) -> Dict[str, str]:
    """Map every label to its column; :class:`DuplicateLabel` if one appears in two."""
    owners: Dict[str, str] = {}
    for c in frame.columns:
        for lab in frame[c].dropna().unique():
            if lab in owners:
                raise DuplicateLabel(
                    f"Label {lab!r} appears in categories {owners[lab]!r} and {c!r}; "
                    f"labels must be unique across categories"
                )
            owners[lab] = c
    return owners


# ──────────────────────────────────────────────────────────────────────────────
# DenseLabels
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class DenseLabels(CategoricalIndex):
    """
    Immutable, DataFrame-backed label index.

    Parameters
    ----------
    frame : pandas.DataFrame or mapping
        One column per category. Normalized with :func:`normalize_table`.
    """

    frame: pd.DataFrame
    _owners: Dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        frame = normalize_table(self.frame)
        object.__setattr__(self, "frame", frame)
        object.__setattr__(self, "_owners", _label_owners(frame))

    @classmethod
    def from_table(cls, table) -> "DenseLabels":
        if isinstance(table, DenseLabels):
            return table
        return cls(table)

    @classmethod
    def empty(cls, n_rows: int = 0) -> "DenseLabels":
        return cls(pd.DataFrame(index=pd.RangeIndex(n_rows)))

    def _with(self, frame: pd.DataFrame) -> "DenseLabels":
        return DenseLabels(frame)

    # ── shape & introspection ────────────────────────────────────────────────

    @property
    def n_rows(self) -> int:
        return int(len(self.frame))

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, int(self.frame.shape[1]))

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self.frame.columns)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self.all_labels())

    @property
    def catalog(self) -> Catalog:
        """Catalog of the labels present in the table, in column then first-appearance order."""
        labs = self.all_labels()
        return Catalog(tuple(labs), tuple(self._owners[lab] for lab in labs))

    def is_empty(self) -> bool:
        return self.frame.shape[1] == 0

    def category_names(self) -> List[str]:
        return list(self.frame.columns)

    def labels_in(self, category: str) -> List[str]:
        self._require_categories([category])
        return unique_in_order(self.frame[category].dropna().tolist())

    def all_labels(self) -> List[str]:
        return [lab for c in self.frame.columns for lab in self.labels_in(c)]

    def contains_label(self, label: str) -> bool:
        return label in self._owners

    def __repr__(self) -> str:
        return f"DenseLabels(rows={self.n_rows}, categories={self.category_names()})"

    # ── querying ─────────────────────────────────────────────────────────────

    def where(self, selectors) -> Tuple[np.ndarray, list]:
        """Same semantics as :meth:`SparseLabels.where <sparselabels.sparse.SparseLabels.where>`."""
        selectors = unique_in_order(ensure_list(selectors))
        cats = [self._owners.get(s, NOT_FOUND) for s in selectors]
        if any(c is NOT_FOUND for c in cats):
            return rep_logic(self.n_rows, False), cats

        by_category: Dict[str, List[str]] = {}
        for s, c in zip(selectors, cats):
            by_category.setdefault(c, []).append(s)
        full = rep_logic(self.n_rows, True)
        for c, labs in by_category.items():
            full &= self.frame[c].isin(labs).to_numpy(dtype=bool)
        return full, cats

    def get_indices(self, categories, *, sink: Optional[Sink] = None) -> List[Group]:
        """Present combinations, found by testing every possible one."""
        return self._scan_indices(categories, sink=sink)

    # ── row selection ────────────────────────────────────────────────────────

    def keep(self, ind, *, sink: Optional[Sink] = None) -> "DenseLabels":
        ind = as_row_vector(ind, self.n_rows)
        log_event(f"keep: {int(ind.sum())} of {self.n_rows} row(s)", sink)
        return self._with(self.frame[ind])

    def rehash(self, *, sink: Optional[Sink] = None) -> "DenseLabels":
        """No-op: dense labels exist exactly as long as some cell holds them."""
        return self

    # ── category lifecycle ───────────────────────────────────────────────────

    def add_category(self, name: str, labels=None, *, config: Optional[LabelsConfig] = None) -> "DenseLabels":
        self._check_new_category(name)
        if labels is None:
            labels = resolve_config(config).collapsed_label(name)
        if isinstance(labels, str):
            values = [labels] * self.n_rows
        else:
            values = list(labels)
            if len(values) != self.n_rows:
                raise ShapeMismatch(
                    f"Category {name!r} has {len(values)} label(s) for {self.n_rows} row(s)"
                )
        for lab in unique_in_order([v for v in values if not is_empty_cell(v)]):
            if lab in self._owners:
                raise DuplicateLabel(f"Label {lab!r} already exists in category {self._owners[lab]!r}")
        frame = self.frame.copy()
        frame[name] = pd.Series(values, index=frame.index, dtype=object)
        return self._with(frame)

    def rm_category(self, names) -> "DenseLabels":
        names = self._require_categories(names)
        return self._with(self.frame.drop(columns=unique_in_order(names)))

    def rename_category(self, old: str, new: str) -> "DenseLabels":
        self._require_categories([old])
        if new == old:
            return self
        if self.contains_category(new):
            raise DuplicateCategory(f"The name {new!r} is already a category in the object")
        return self._with(self.frame.rename(columns={old: new}))

    def rename_label(self, old: str, new: str) -> "DenseLabels":
        if old not in self._owners:
            raise KeyError(f"Label {old!r} is not in the object")
        if new == old:
            return self
        if new in self._owners:
            raise DuplicateLabel(f"Label {new!r} already exists in category {self._owners[new]!r}")
        return self._substitute(self._owners[old], [old], new)

    def _substitute(self, category: str, search: List[str], new: str) -> "DenseLabels":
        frame = self.frame.copy()
        col = frame[category]
        frame[category] = col.where(~col.isin(search), new)
        return self._with(frame)

    def replace(self, search_for, with_: str, *, sink: Optional[Sink] = None) -> "DenseLabels":
        """Same semantics as :meth:`SparseLabels.replace <sparselabels.sparse.SparseLabels.replace>`."""
        terms = unique_in_order(ensure_list(search_for))
        found = [t for t in terms if t in self._owners]
        missing = [t for t in terms if t not in self._owners]
        if missing:
            log_event(f"replace: could not find {missing}", sink)
        if not found:
            log_event("replace: could not find any of the search terms; made 0 replacements", sink)
            return self

        owners = unique_in_order([self._owners[t] for t in found])
        if len(owners) > 1:
            raise CategoryConflict(
                f"It is an error to replace labels across multiple categories; {found} span {owners}"
            )
        category = owners[0]
        if with_ in self._owners and self._owners[with_] != category:
            raise DuplicateLabel(f"Label {with_!r} already exists in category {self._owners[with_]!r}")
        col = self.frame[category]
        for t in found:
            log_event(f"replace: {t!r} -> {with_!r} on {int((col == t).sum())} row(s)", sink)
        return self._substitute(category, found, with_)

    def collapse(self, categories, *, config: Optional[LabelsConfig] = None) -> "DenseLabels":
        cfg = resolve_config(config)
        names = unique_in_order(self._require_categories(categories))
        for c in names:
            sentinel = cfg.collapsed_label(c)
            if sentinel in self._owners and self._owners[sentinel] != c:
                raise DuplicateLabel(
                    f"Label {sentinel!r} already exists in category {self._owners[sentinel]!r}"
                )
        frame = self.frame.copy()
        for c in names:
            col = frame[c]
            frame[c] = col.where(col.isna(), cfg.collapsed_label(c))
        return self._with(frame)

    # ── merging ──────────────────────────────────────────────────────────────

    def _check_mergeable(self, other: "DenseLabels") -> None:
        mine, theirs = set(self.frame.columns), set(other.frame.columns)
        if mine != theirs:
            raise CategoryMismatch(
                f"The categories do not match between objects "
                f"(only in first: {sorted(mine - theirs)}; only in second: {sorted(theirs - mine)})"
            )
        merge.shared_labels(self.catalog, other.catalog)

    def append(self, other: CategoricalIndex, *, sink: Optional[Sink] = None) -> "DenseLabels":
        other = other.to_dense_labels()
        if self.is_empty():
            return other
        self._check_mergeable(other)
        log_event(f"append: {self.n_rows} + {other.n_rows} rows", sink)
        frame = pd.concat(
            [self.frame, other.frame[list(self.frame.columns)]],
            ignore_index=True,
        )
        return self._with(frame)

    def overwrite(self, other: CategoricalIndex, index, *, sink: Optional[Sink] = None) -> "DenseLabels":
        index = as_row_vector(index, self.n_rows)
        targets = np.flatnonzero(index)
        other = other.to_dense_labels()
        if targets.shape[0] != other.n_rows:
            raise ShapeMismatch(
                f"The index selects {targets.shape[0]} row(s) but the incoming "
                f"object has {other.n_rows}"
            )
        self._check_mergeable(other)
        log_event(f"overwrite: {targets.shape[0]} row(s) replaced", sink)
        frame = self.frame.copy()
        for c in frame.columns:
            values = frame[c].to_numpy(dtype=object).copy()
            values[targets] = other.frame[c].to_numpy(dtype=object)
            frame[c] = values
        return self._with(frame)

    # ── conversion ───────────────────────────────────────────────────────────

    def to_sparse(self) -> "SparseLabels":
        from .codec import to_bitmap
        return to_bitmap(self)

    def to_dense(self) -> pd.DataFrame:
        return self.frame.copy()

    def to_dense_labels(self) -> "DenseLabels":
        return self
