# src/sparselabels/catalog.py

"""
The label catalog: an ordered registry of ``(label, category)`` entries.

Entry ``i`` of a catalog names column ``i`` of the membership matrix it is
paired with. The catalog enforces the one invariant that does not depend on
row data: **every label string is unique across the whole catalog**, even
across categories. A category may own any number of entries.

Catalogs are immutable. Every "mutation" returns a new catalog, and the
caller applies the matching column operation to its matrix.

Examples
--------
>>> from sparselabels.catalog import Catalog
>>> cat = Catalog(("NY", "LA", "high"), ("cities", "cities", "income"))
>>> cat.category_names()
['cities', 'income']
>>> cat.labels_in("cities")
['NY', 'LA']
>>> cat.position("high"), cat.category_of("LA")
(2, 'cities')
>>> Catalog(("NY", "NY"), ("cities", "regions"))
Traceback (most recent call last):
...
sparselabels.errors.DuplicateLabel: Label 'NY' is already in the catalog (category 'cities').
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .arrays import ensure_list, unique_in_order
from .errors import DuplicateCategory, DuplicateLabel, UnknownCategory

__all__ = ["Catalog"]


@dataclass(frozen=True)
class Catalog:
    """
    Immutable, ordered ``(label, category)`` registry with global label uniqueness.

    Parameters
    ----------
    labels : sequence of str
        Label of each entry.
    categories : sequence of str
        Category of each entry; same length as ``labels``.

    Raises
    ------
    DuplicateLabel
        If any label appears twice.
    ValueError
        If the two sequences differ in length.
    """

    labels: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()
    _positions: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        labels = tuple(self.labels)
        categories = tuple(self.categories)
        if len(labels) != len(categories):
            raise ValueError(
                f"labels ({len(labels)}) and categories ({len(categories)}) must have equal length"
            )
        positions: Dict[str, int] = {}
        for i, (lab, cat) in enumerate(zip(labels, categories)):
            if not isinstance(lab, str) or not isinstance(cat, str):
                raise TypeError(f"Labels and categories must be strings; got {lab!r} / {cat!r}")
            if lab in positions:
                owner = categories[positions[lab]]
                raise DuplicateLabel(f"Label {lab!r} is already in the catalog (category {owner!r}).")
            positions[lab] = i
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "categories", categories)
        object.__setattr__(self, "_positions", positions)

    # ── size & iteration ─────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(zip(self.labels, self.categories))

    def is_empty(self) -> bool:
        return not self.labels

    # ── lookups ──────────────────────────────────────────────────────────────

    def contains_label(self, label: str) -> bool:
        return label in self._positions

    def contains_category(self, category: str) -> bool:
        return category in self.categories

    def position(self, label: str) -> int:
        """Column position of ``label``; ``KeyError`` if absent."""
        try:
            return self._positions[label]
        except KeyError as e:
            raise KeyError(f"Label {label!r} is not in the catalog") from e

    def find(self, label: str) -> Optional[int]:
        """Column position of ``label`` or ``None``."""
        return self._positions.get(label)

    def category_of(self, label: str) -> str:
        return self.categories[self.position(label)]

    def category_names(self) -> List[str]:
        """Unique categories in order of first appearance."""
        return unique_in_order(self.categories)

    def require_categories(self, categories: Iterable[str]) -> None:
        """Raise :class:`UnknownCategory` naming the first absent category."""
        present = set(self.categories)
        for c in categories:
            if c not in present:
                raise UnknownCategory(f"The requested category {c!r} is not in the object")

    def positions_in(self, category: str) -> List[int]:
        self.require_categories([category])
        return [i for i, c in enumerate(self.categories) if c == category]

    def labels_in(self, category: str) -> List[str]:
        """Labels of ``category`` in catalog order; :class:`UnknownCategory` if absent."""
        return [self.labels[i] for i in self.positions_in(category)]

    def normalize_categories(self, categories) -> List[str]:
        """
        De-duplicate, validate and re-order requested categories into catalog order.
        """
        requested = unique_in_order(ensure_list(categories))
        self.require_categories(requested)
        wanted = set(requested)
        return [c for c in self.category_names() if c in wanted]

    # ── derivation (all return new catalogs) ─────────────────────────────────

    def take(self, positions: Sequence[int]) -> "Catalog":
        """Catalog made of the entries at ``positions``, in that order."""
        return Catalog(
            tuple(self.labels[i] for i in positions),
            tuple(self.categories[i] for i in positions),
        )

    def drop(self, positions: Iterable[int]) -> "Catalog":
        gone = set(positions)
        return self.take([i for i in range(len(self)) if i not in gone])

    def extend(self, labels: Sequence[str], category: str) -> "Catalog":
        """Append entries for ``labels`` under ``category``; :class:`DuplicateLabel` on collision."""
        for lab in labels:
            if lab in self._positions:
                raise DuplicateLabel(
                    f"Label {lab!r} already exists in category {self.category_of(lab)!r}"
                )
        return Catalog(self.labels + tuple(labels), self.categories + (category,) * len(labels))

    def rename_category(self, old: str, new: str) -> "Catalog":
        self.require_categories([old])
        if new == old:
            return self
        if self.contains_category(new):
            raise DuplicateCategory(f"The name {new!r} is already a category in the object")
        return Catalog(self.labels, tuple(new if c == old else c for c in self.categories))

    def rename_label(self, old: str, new: str) -> "Catalog":
        pos = self.position(old)
        if new == old:
            return self
        if new in self._positions:
            raise DuplicateLabel(
                f"Label {new!r} already exists in category {self.category_of(new)!r}"
            )
        labels = list(self.labels)
        labels[pos] = new
        return Catalog(tuple(labels), self.categories)

    def order_by_label(self) -> List[int]:
        """Positions sorted by label text."""
        return sorted(range(len(self)), key=lambda i: self.labels[i])
