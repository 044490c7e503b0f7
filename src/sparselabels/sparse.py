# src/sparselabels/sparse.py

"""
Bitmap label index: a :class:`~sparselabels.catalog.Catalog` paired with a
canonical boolean ``scipy.sparse.csc_matrix``.

Column ``i`` of the membership matrix holds the rows carrying label
``catalog.labels[i]``. After every public operation:

1. the matrix has ``n_rows`` rows and one column per catalog entry;
2. no column is all-false (the constructor rejects one; operations that
   can empty a column end with :meth:`SparseLabels.rehash`);
3. every label is unique across the whole catalog.

Examples
--------
>>> from sparselabels import SparseLabels
>>> idx = SparseLabels.from_mapping({
...     "cities": ["NY", "NY", "LA", "LA"],
...     "income": ["high", "low", "high", "low"],
... })
>>> idx.shape
(4, 4)
>>> idx.where(["NY", "high"])[0].tolist()
[True, False, False, False]
>>> [labs for _, labs in idx.get_indices(["income", "cities"])]
[('NY', 'high'), ('NY', 'low'), ('LA', 'high'), ('LA', 'low')]
>>> idx.collapse("cities").labels_in("cities")
['all__cities']
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import scipy.sparse as sp

from . import matrix as mx
from . import merge
from . import query
from .arrays import as_row_vector, common_length, ensure_list, label_rows, unique_in_order
from .base import CategoricalIndex
from .catalog import Catalog
from .config import LabelsConfig, resolve_config
from .diagnostics import Sink, log_event
from .errors import CategoryConflict, DuplicateLabel, InvalidRecord, ShapeMismatch

if TYPE_CHECKING:  # pragma: no cover
    from .dense import DenseLabels

__all__ = ["SparseLabels"]


def _checked_membership(catalog, membership) -> sp.csc_matrix:
    if not isinstance(catalog, Catalog):
        raise TypeError(f"catalog must be a Catalog; got {type(catalog).__name__}")
    m = mx.canonical(membership)
    if m.shape[1] != len(catalog):
        raise ShapeMismatch(
            f"The membership matrix has {m.shape[1]} column(s) but the catalog "
            f"has {len(catalog)} entries"
        )
    return m


@dataclass(frozen=True, eq=False)
class SparseLabels(CategoricalIndex):
    """
    Immutable bitmap index.

    Parameters
    ----------
    catalog : Catalog
        ``(label, category)`` entries, one per matrix column.
    membership : scipy.sparse matrix or 2-D boolean array
        ``(n_rows, len(catalog))``. Stored in canonical CSC form.

    Raises
    ------
    ShapeMismatch
        If the matrix does not have one column per catalog entry.
    InvalidRecord
        If some entry's column has no true row.
    """

    catalog: Catalog
    membership: sp.csc_matrix

    def __post_init__(self):
        m = _checked_membership(self.catalog, self.membership)
        dead = [self.catalog.labels[j] for j in np.flatnonzero(mx.column_counts(m) == 0)]
        if dead:
            raise InvalidRecord(f"Label(s) {dead} have no true row")
        object.__setattr__(self, "membership", m)

    @classmethod
    def _unpruned(cls, catalog: Catalog, membership) -> "SparseLabels":
        """Instance that may still hold all-false columns; only ever passed to :meth:`rehash`."""
        obj = object.__new__(cls)
        object.__setattr__(obj, "catalog", catalog)
        object.__setattr__(obj, "membership", _checked_membership(catalog, membership))
        return obj

    # ── constructors ─────────────────────────────────────────────────────────

    @classmethod
    def empty(cls, n_rows: int = 0) -> "SparseLabels":
        """Index with ``n_rows`` rows and no catalog entries."""
        return cls(Catalog(), mx.empty(n_rows))

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Sequence], *, n_rows: Optional[int] = None) -> "SparseLabels":
        """
        Build from ``{category: per-row labels}``.

        Each value holds one label (or an empty cell) per row. Equivalent to
        ``to_bitmap(pandas.DataFrame(mapping))``.
        """
        obj = cls.empty(n_rows if n_rows is not None else common_length(mapping))
        for name, values in mapping.items():
            obj = obj.add_category(name, list(values))
        return obj

    # ── shape & introspection ────────────────────────────────────────────────

    @property
    def n_rows(self) -> int:
        return int(self.membership.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, len(self.catalog))

    @property
    def labels(self) -> Tuple[str, ...]:
        return self.catalog.labels

    @property
    def categories(self) -> Tuple[str, ...]:
        return self.catalog.categories

    def is_empty(self) -> bool:
        return self.catalog.is_empty()

    def category_names(self) -> List[str]:
        return self.catalog.category_names()

    def labels_in(self, category: str) -> List[str]:
        return self.catalog.labels_in(category)

    def all_labels(self) -> List[str]:
        return list(self.catalog.labels)

    def contains_label(self, label: str) -> bool:
        return self.catalog.contains_label(label)

    def contains_category(self, category: str) -> bool:
        return self.catalog.contains_category(category)

    def get_index(self, label: str) -> np.ndarray:
        return mx.column_mask(self.membership, self.catalog.position(label))

    def column_counts(self) -> np.ndarray:
        """Number of rows carrying each catalog entry, in catalog order."""
        return mx.column_counts(self.membership)

    def __repr__(self) -> str:
        return (
            f"SparseLabels(rows={self.n_rows}, labels={len(self.catalog)}, "
            f"categories={self.category_names()})"
        )

    # ── querying ─────────────────────────────────────────────────────────────

    def where(self, selectors) -> Tuple[np.ndarray, list]:
        """
        Rows matching ``selectors``: OR within a category, AND across categories.

        Any selector that is not in the catalog makes the index all-false; its
        slot in the returned category list holds :data:`~sparselabels.errors.NOT_FOUND`.
        """
        return query.where(self.catalog, self.membership, selectors)

    def rget_indices(self, categories, *, sink: Optional[Sink] = None) -> List[query.Group]:
        """Present label combinations of ``categories`` by narrowing enumeration."""
        return query.narrowing_enumeration(self.catalog, self.membership, categories, sink=sink)

    def get_indices(self, categories, *, sink: Optional[Sink] = None) -> List[query.Group]:
        """
        Every present combination of labels of ``categories``, with its rows.

        Returns
        -------
        list of (numpy.ndarray, tuple of str)
            Each row index has at least one true row. Label tuples follow
            catalog category order.
        """
        return self.rget_indices(categories, sink=sink)

    # ── row selection & pruning ──────────────────────────────────────────────

    def keep(self, ind, *, sink: Optional[Sink] = None) -> "SparseLabels":
        """Rows where ``ind`` is true, in order; labels left without rows are pruned."""
        ind = as_row_vector(ind, self.n_rows)
        rows = np.flatnonzero(ind)
        log_event(f"keep: {rows.shape[0]} of {self.n_rows} row(s)", sink)
        return SparseLabels._unpruned(self.catalog, mx.take_rows(self.membership, rows)).rehash(sink=sink)

    def rehash(self, *, sink: Optional[Sink] = None) -> "SparseLabels":
        """Drop every catalog entry whose column has no true row."""
        catalog, m = query.prune_empty(self.catalog, self.membership)
        if catalog is self.catalog:
            return self
        gone = [lab for lab in self.catalog.labels if not catalog.contains_label(lab)]
        log_event(f"rehash: pruned {len(gone)} label(s): {gone}", sink)
        return SparseLabels(catalog, m)

    # ── category lifecycle ───────────────────────────────────────────────────

    def add_category(self, name: str, labels=None, *, config: Optional[LabelsConfig] = None) -> "SparseLabels":
        """
        Add the category ``name``.

        Parameters
        ----------
        name : str
        labels : None, str or sequence, optional
            ``None`` tags every row with ``collapse_prefix + name``; a string tags
            every row with that label; a sequence gives one label per row
            (empty cells leave the row without a label in ``name``).
        config : LabelsConfig, optional

        Raises
        ------
        DuplicateCategory
            If ``name`` exists.
        DuplicateLabel
            If a new label exists anywhere in the catalog.
        ShapeMismatch
            If a per-row sequence does not have ``n_rows`` entries.
        """
        self._check_new_category(name)
        if labels is None:
            labels = resolve_config(config).collapsed_label(name)

        if isinstance(labels, str):
            new_labels = [labels]
            columns = [np.arange(self.n_rows)]
        else:
            values = list(labels)
            if len(values) != self.n_rows:
                raise ShapeMismatch(
                    f"Category {name!r} has {len(values)} label(s) for {self.n_rows} row(s)"
                )
            new_labels, columns = label_rows(values)

        catalog = self.catalog.extend(new_labels, name)
        return SparseLabels._unpruned(catalog, mx.add_columns(self.membership, columns)).rehash()

    def rm_category(self, names) -> "SparseLabels":
        """Remove every entry of the named categories; all names must exist."""
        names = ensure_list(names)
        self.catalog.require_categories(names)
        gone = set(names)
        keep = [i for i, c in enumerate(self.catalog.categories) if c not in gone]
        return SparseLabels(self.catalog.take(keep), mx.select_columns(self.membership, keep))

    def rename_category(self, old: str, new: str) -> "SparseLabels":
        return SparseLabels(self.catalog.rename_category(old, new), self.membership)

    def rename_label(self, old: str, new: str) -> "SparseLabels":
        return SparseLabels(self.catalog.rename_label(old, new), self.membership)

    def _fold(self, positions: Sequence[int], label: str, category: str) -> "SparseLabels":
        """
        Replace the entries at ``positions`` with one entry ``label`` whose
        column is their union; it takes the slot of the first of them.
        """
        positions = sorted(positions)
        gone = set(positions)
        rows = np.unique(np.concatenate([mx.column_rows(self.membership, p) for p in positions]))
        labels, cats, columns = [], [], []
        for i, (lab, cat) in enumerate(self.catalog):
            if i == positions[0]:
                labels.append(label)
                cats.append(category)
                columns.append(rows)
            elif i not in gone:
                labels.append(lab)
                cats.append(cat)
                columns.append(mx.column_rows(self.membership, i))
        return SparseLabels(Catalog(tuple(labels), tuple(cats)), mx.from_columns(columns, self.n_rows))

    def replace(self, search_for, with_: str, *, sink: Optional[Sink] = None) -> "SparseLabels":
        """
        Merge the labels ``search_for`` into the single label ``with_``.

        Search terms that are not in the catalog are skipped (and reported to
        ``sink``). If none is found the index is returned unchanged.

        Raises
        ------
        CategoryConflict
            If the found terms span more than one category.
        DuplicateLabel
            If ``with_`` already exists in a different category.
        """
        terms = unique_in_order(ensure_list(search_for))
        found = [t for t in terms if self.catalog.contains_label(t)]
        missing = [t for t in terms if not self.catalog.contains_label(t)]
        if missing:
            log_event(f"replace: could not find {missing}", sink)
        if not found:
            log_event("replace: could not find any of the search terms; made 0 replacements", sink)
            return self

        owners = unique_in_order([self.catalog.category_of(t) for t in found])
        if len(owners) > 1:
            raise CategoryConflict(
                f"It is an error to replace labels across multiple categories; {found} span {owners}"
            )
        category = owners[0]
        if self.catalog.contains_label(with_) and self.catalog.category_of(with_) != category:
            raise DuplicateLabel(
                f"Label {with_!r} already exists in category {self.catalog.category_of(with_)!r}"
            )

        positions = [self.catalog.position(t) for t in found]
        if self.catalog.contains_label(with_):
            positions.append(self.catalog.position(with_))
        counts = self.column_counts()
        for t in found:
            log_event(f"replace: {t!r} -> {with_!r} on {int(counts[self.catalog.position(t)])} row(s)", sink)
        return self._fold(unique_in_order(positions), with_, category)

    def collapse(self, categories, *, config: Optional[LabelsConfig] = None) -> "SparseLabels":
        """
        Replace all labels of each category by ``collapse_prefix + category``.

        The sentinel is true on exactly the rows that had any label of the
        category. Collapsing an already-collapsed category changes nothing.
        """
        cfg = resolve_config(config)
        names = unique_in_order(ensure_list(categories))
        self.catalog.require_categories(names)
        for c in names:
            sentinel = cfg.collapsed_label(c)
            if self.catalog.contains_label(sentinel) and self.catalog.category_of(sentinel) != c:
                raise DuplicateLabel(
                    f"Label {sentinel!r} already exists in category {self.catalog.category_of(sentinel)!r}"
                )
        obj = self
        for c in names:
            obj = obj._fold(obj.catalog.positions_in(c), cfg.collapsed_label(c), c)
        return obj

    # ── merging ──────────────────────────────────────────────────────────────

    def append(self, other: CategoricalIndex, *, sink: Optional[Sink] = None) -> "SparseLabels":
        """
        Stack ``other``'s rows under this index's rows.

        An empty index (no catalog entries) appended to returns ``other``.
        """
        other = other.to_sparse()
        catalog, m = merge.append(self.catalog, self.membership, other.catalog, other.membership, sink=sink)
        if catalog is other.catalog:
            return other
        return SparseLabels(catalog, m)

    def overwrite(self, other: CategoricalIndex, index, *, sink: Optional[Sink] = None) -> "SparseLabels":
        """
        Replace the rows selected by the boolean ``index`` with ``other``'s rows.

        ``index`` must select exactly ``other.n_rows`` rows. The result is
        rehashed, so labels that no longer tag any row disappear.
        """
        other = other.to_sparse()
        catalog, m = merge.overwrite(
            self.catalog, self.membership, other.catalog, other.membership, index, sink=sink
        )
        return SparseLabels._unpruned(catalog, m).rehash(sink=sink)

    # ── equality ─────────────────────────────────────────────────────────────

    def eq(self, other) -> bool:
        """
        Same rows, categories, labels and membership, regardless of column order.
        """
        if not isinstance(other, CategoricalIndex):
            return False
        other = other.to_sparse()
        if self.shape != other.shape:
            return False
        if set(self.catalog.categories) != set(other.catalog.categories):
            return False
        if set(self.catalog.labels) != set(other.catalog.labels):
            return False
        for lab in self.catalog.labels:
            if self.catalog.category_of(lab) != other.catalog.category_of(lab):
                return False
        a = mx.select_columns(self.membership, self.catalog.order_by_label())
        b = mx.select_columns(other.membership, other.catalog.order_by_label())
        return mx.same_matrix(a, b)

    def eq_non_uniform(self, other) -> bool:
        if not isinstance(other, CategoricalIndex):
            return False
        other = other.to_sparse()
        return self.rm_category(self.uniform_categories()).eq(
            other.rm_category(other.uniform_categories())
        )

    # ── conversion ───────────────────────────────────────────────────────────

    def to_sparse(self) -> "SparseLabels":
        return self

    def to_dense(self) -> pd.DataFrame:
        """One column per category; raises ``LossyConversion`` if a row has two labels in one."""
        from .codec import to_dense
        return to_dense(self)

    def to_dense_labels(self) -> "DenseLabels":
        from .dense import DenseLabels
        return DenseLabels(self.to_dense())

