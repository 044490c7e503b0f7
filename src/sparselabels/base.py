# src/sparselabels/base.py

"""
The interface shared by the bitmap and the dense label representations.

:class:`CategoricalIndex` names every operation a caller may rely on. The two
implementations, :class:`~sparselabels.sparse.SparseLabels` (bitmap, fast)
and :class:`~sparselabels.dense.DenseLabels` (one label per row and
category, slower), provide the representation-specific primitives; the
operations that can be expressed on top of those primitives live here once.

All operations return new objects. Nothing overloads ``==``: use
:meth:`CategoricalIndex.eq` / :meth:`CategoricalIndex.eq_non_uniform`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .arrays import ensure_list, rep_logic, unique_in_order
from .config import LabelsConfig
from .diagnostics import Sink, log_event
from .errors import DuplicateCategory, UnknownCategory
from .query import combs_frame, Group

if TYPE_CHECKING:  # pragma: no cover
    from .dense import DenseLabels
    from .sparse import SparseLabels

__all__ = ["CategoricalIndex"]


class CategoricalIndex(ABC):
    """
    Rows tagged with string labels, each label belonging to one named category.

    Subclasses implement the primitives marked abstract. Row vectors are
    boolean NumPy arrays of length :attr:`n_rows`.
    """

    # ── primitives ───────────────────────────────────────────────────────────

    @property
    @abstractmethod
    def n_rows(self) -> int: ...

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]: ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def category_names(self) -> List[str]:
        """Unique category names in catalog order."""

    @abstractmethod
    def labels_in(self, category: str) -> List[str]:
        """Labels of ``category`` in catalog order; :class:`UnknownCategory` if absent."""

    @abstractmethod
    def all_labels(self) -> List[str]: ...

    @abstractmethod
    def where(self, selectors) -> Tuple[np.ndarray, list]: ...

    @abstractmethod
    def keep(self, ind, *, sink: Optional[Sink] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def rehash(self, *, sink: Optional[Sink] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def get_indices(self, categories, *, sink: Optional[Sink] = None) -> List[Group]: ...

    @abstractmethod
    def append(self, other: "CategoricalIndex", *, sink: Optional[Sink] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def overwrite(self, other: "CategoricalIndex", index, *, sink: Optional[Sink] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def add_category(self, name: str, labels=None, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def rm_category(self, names) -> "CategoricalIndex": ...

    @abstractmethod
    def rename_category(self, old: str, new: str) -> "CategoricalIndex": ...

    @abstractmethod
    def rename_label(self, old: str, new: str) -> "CategoricalIndex": ...

    @abstractmethod
    def replace(self, search_for, with_: str, *, sink: Optional[Sink] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def collapse(self, categories, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex": ...

    @abstractmethod
    def to_sparse(self) -> "SparseLabels": ...

    @abstractmethod
    def to_dense(self) -> pd.DataFrame: ...

    @abstractmethod
    def to_dense_labels(self) -> "DenseLabels": ...

    # ── membership tests ─────────────────────────────────────────────────────

    def __len__(self) -> int:
        return self.n_rows

    def contains_label(self, label: str) -> bool:
        return label in set(self.all_labels())

    def contains(self, labels) -> np.ndarray:
        """Per-label presence, one boolean for each element of ``labels``."""
        present = set(self.all_labels())
        return np.array([lab in present for lab in ensure_list(labels)], dtype=bool)

    def contains_category(self, category: str) -> bool:
        return category in self.category_names()

    def contains_categories(self, categories) -> np.ndarray:
        present = set(self.category_names())
        return np.array([c in present for c in ensure_list(categories)], dtype=bool)

    def _require_categories(self, categories) -> List[str]:
        names = ensure_list(categories)
        present = set(self.category_names())
        for c in names:
            if c not in present:
                raise UnknownCategory(f"The requested category {c!r} is not in the object")
        return names

    def _ordered_categories(self, categories) -> List[str]:
        """De-duplicate, validate and sort ``categories`` into catalog order."""
        wanted = set(self._require_categories(unique_in_order(ensure_list(categories))))
        return [c for c in self.category_names() if c in wanted]

    def get_index(self, label: str) -> np.ndarray:
        """Row vector of a single label; ``KeyError`` if the label is absent."""
        if not self.contains_label(label):
            raise KeyError(f"Label {label!r} is not in the object")
        return self.where([label])[0]

    # ── label listing ────────────────────────────────────────────────────────

    def uniques(self, categories=None) -> List[List[str]]:
        """
        Labels of each requested category (all categories if omitted).

        The result follows the order of ``categories`` as given.
        """
        cats = self.category_names() if categories is None else self._require_categories(categories)
        return [self.labels_in(c) for c in cats]

    def combs(self, categories=None) -> pd.DataFrame:
        """
        Every *possible* combination of the labels of ``categories``.

        Columns follow catalog order regardless of the argument order; rows
        enumerate the Cartesian product, first column varying slowest.
        Combinations need not be present in any row.
        """
        cats = self.category_names() if categories is None else self._ordered_categories(categories)
        return combs_frame(cats, [self.labels_in(c) for c in cats])

    def uniform_categories(self) -> List[str]:
        """Categories with exactly one label that is true on every row."""
        out = []
        for c in self.category_names():
            labs = self.labels_in(c)
            if len(labs) == 1 and self.n_rows and bool(self.where(labs)[0].all()):
                out.append(c)
        return out

    def non_uniform_categories(self) -> List[str]:
        """Categories holding more than one label."""
        return [c for c in self.category_names() if len(self.labels_in(c)) > 1]

    # ── row selection ────────────────────────────────────────────────────────

    def only(self, selectors, *, sink: Optional[Sink] = None) -> Tuple["CategoricalIndex", np.ndarray]:
        """Keep the rows matching ``selectors`` (see :meth:`where`); also return the index used."""
        ind, _ = self.where(selectors)
        return self.keep(ind, sink=sink), ind

    def remove(self, selectors, *, sink: Optional[Sink] = None) -> Tuple["CategoricalIndex", np.ndarray]:
        """
        Drop every row that carries ANY of ``selectors``.

        Unknown selectors match nothing. Returns the new object and the index of
        the removed rows relative to this object.
        """
        removed = rep_logic(self.n_rows, False)
        for s in unique_in_order(ensure_list(selectors)):
            removed |= self.where([s])[0]
        log_event(f"remove: removed {int(removed.sum())} row(s)", sink)
        return self.keep(~removed, sink=sink), removed

    def _scan_indices(self, categories, *, sink: Optional[Sink] = None) -> List[Group]:
        """
        Present combinations by scanning every possible one with :meth:`where`.

        Same output as the bitmap narrowing enumeration, at a cost proportional
        to (possible combinations × rows).
        """
        cats = self._ordered_categories(categories)
        if not cats:
            groups = [(rep_logic(self.n_rows, True), ())] if self.n_rows else []
            log_event(f"get_indices: {len(groups)} group(s) for no categories", sink)
            return groups
        out: List[Group] = []
        table = self.combs(cats)
        for labels in table.itertuples(index=False, name=None):
            ind, _ = self.where(list(labels))
            if ind.any():
                out.append((ind, tuple(labels)))
        log_event(f"get_indices: {len(out)} of {len(table)} combination(s) present", sink)
        return out

    # ── category lifecycle built on the primitives ───────────────────────────

    def require_categories(self, names, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex":
        """Add each missing category with its default (collapsed) label."""
        obj = self
        for name in unique_in_order(ensure_list(names)):
            if not obj.contains_category(name):
                obj = obj.add_category(name, config=config)
        return obj

    def collapse_except(self, categories, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex":
        """Collapse every category except ``categories``."""
        keep = set(self._require_categories(categories))
        return self.collapse([c for c in self.category_names() if c not in keep], config=config)

    def collapse_uniform(self, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex":
        return self.collapse(self.uniform_categories(), config=config)

    def collapse_non_uniform(self, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex":
        return self.collapse(self.non_uniform_categories(), config=config)

    def collapse_if_non_uniform(self, categories, *, config: Optional[LabelsConfig] = None) -> "CategoricalIndex":
        """Collapse those of ``categories`` that hold more than one label."""
        cats = self._require_categories(categories)
        return self.collapse([c for c in cats if len(self.labels_in(c)) > 1], config=config)

    def _check_new_category(self, name: str) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Category names must be strings; got {type(name).__name__}")
        if self.contains_category(name):
            raise DuplicateCategory(f"The category {name!r} already exists in the object")

    # ── merging & equality ───────────────────────────────────────────────────

    def categories_match(self, other: "CategoricalIndex") -> bool:
        """``True`` iff ``other`` is an index with the same set of categories."""
        if not isinstance(other, CategoricalIndex):
            return False
        return set(self.category_names()) == set(other.category_names())

    def eq(self, other) -> bool:
        """Structural equality, independent of representation and column order."""
        if not isinstance(other, CategoricalIndex):
            return False
        return self.to_sparse().eq(other.to_sparse())

    def eq_non_uniform(self, other) -> bool:
        """Equality after both sides drop their uniform categories."""
        if not isinstance(other, CategoricalIndex):
            return False
        return self.to_sparse().eq_non_uniform(other.to_sparse())

    # ── conversion & display ─────────────────────────────────────────────────

    def to_record(self) -> Dict[str, object]:
        from .codec import to_record
        return to_record(self)

    def counts(self, categories=None) -> pd.DataFrame:
        from .display import counts
        return counts(self, categories)

    def describe(self, *, config: Optional[LabelsConfig] = None) -> str:
        from .display import describe
        return describe(self, config=config)

    def summary(self) -> Dict[str, object]:
        """Small dict summary useful in logs/demos."""
        return {
            "rows": int(self.n_rows),
            "categories": self.category_names(),
            "labels": int(len(self.all_labels())),
            "uniform_categories": self.uniform_categories(),
        }
