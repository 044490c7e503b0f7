# src/sparselabels/arrays.py

from __future__ import annotations
from typing import Any, Iterable, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import ShapeMismatch

"""
Row-vector and selector helpers used across the package.

Design goals
------------
- Every row vector returned or consumed is a boolean NumPy array of shape
  ``(n_rows,)``. Pandas Series and lists of bools are accepted on input and
  normalized here, once.
- String-or-sequence arguments (``"NY"`` vs ``["NY", "LA"]``) are normalized
  by :func:`ensure_list`, so a lone string is never iterated character-wise.

Examples
--------
>>> import numpy as np
>>> from sparselabels.arrays import as_row_vector, rep_logic, ensure_list, unique_in_order
>>> as_row_vector([True, False, True], 3)
array([ True, False,  True])
>>> rep_logic(2, True)
array([ True,  True])
>>> ensure_list("NY"), ensure_list(("NY", "LA"))
(['NY'], ['NY', 'LA'])
>>> unique_in_order(["b", "a", "b"])
['b', 'a']
"""

__all__ = [
    "as_row_vector",
    "rep_logic",
    "support",
    "same_mask",
    "ensure_list",
    "unique_in_order",
    "is_empty_cell",
    "label_rows",
    "common_length",
]


def as_row_vector(ind: Any, n_rows: int) -> np.ndarray:
    """
    Normalize a boolean row selector to a NumPy ``bool`` array of length ``n_rows``.

    Parameters
    ----------
    ind : array-like of bool or pandas.Series
        The selector. Series are taken by position, not aligned by index.
    n_rows : int
        Expected length.

    Returns
    -------
    numpy.ndarray
        Boolean array of shape ``(n_rows,)``. Always a fresh copy.

    Raises
    ------
    TypeError
        If the input is not boolean (integer positions are not accepted).
    ShapeMismatch
        If the input is not 1-D or its length differs from ``n_rows``.

    Examples
    --------
    >>> as_row_vector(np.array([True, False]), 2).tolist()
    [True, False]
    """
    if isinstance(ind, pd.Series):
        ind = ind.to_numpy()
    a = np.asarray(ind)
    if a.dtype != bool:
        if a.size == 0 and n_rows == 0:
            return np.zeros(0, dtype=bool)
        raise TypeError(f"Row index must be boolean; got dtype {a.dtype}.")
    if a.ndim != 1 or a.shape[0] != n_rows:
        raise ShapeMismatch(
            f"The index must be a 1-D boolean vector with the same number of rows "
            f"as the object ({n_rows}). The given index had shape {a.shape}."
        )
    return a.copy()


def rep_logic(n_rows: int, value: bool) -> np.ndarray:
    """All-``value`` boolean vector of length ``n_rows``."""
    return np.full(n_rows, bool(value), dtype=bool)


def support(mask: np.ndarray) -> int:
    """
    Count ``True`` values in a boolean mask.

    >>> support(np.array([True, False, True]))
    2
    """
    return int(np.count_nonzero(mask))


def same_mask(a: np.ndarray, b: np.ndarray) -> bool:
    """``True`` iff two boolean masks are equal elementwise."""
    return bool(np.array_equal(a, b))


def ensure_list(value: Union[str, Iterable[str], None]) -> List[str]:
    """
    Wrap a lone string into a list; copy any other iterable into a list.

    ``None`` becomes the empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    out = list(value)
    for v in out:
        if not isinstance(v, str):
            raise TypeError(f"Expected strings; got {type(v).__name__}: {v!r}")
    return out


def unique_in_order(values: Sequence[str]) -> List[str]:
    """De-duplicate while keeping the first occurrence order."""
    return list(dict.fromkeys(values))


def is_empty_cell(value: Any) -> bool:
    """
    ``True`` for cells of a dense table that carry no label.

    ``None``, ``NaN``/``pd.NA`` and the empty string all count as empty.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def label_rows(values: Sequence[Any]) -> Tuple[List[str], List[np.ndarray]]:
    """
    Unique non-empty values of a per-row label sequence, with the rows holding each.

    Values are returned in order of first appearance.

    >>> labs, rows = label_rows(["NY", None, "LA", "NY"])
    >>> labs, [r.tolist() for r in rows]
    (['NY', 'LA'], [[0, 3], [2]])
    """
    rows_of: dict = {}
    for r, v in enumerate(values):
        if is_empty_cell(v):
            continue
        if not isinstance(v, str):
            raise TypeError(f"Labels must be strings; got {type(v).__name__}: {v!r}")
        rows_of.setdefault(v, []).append(r)
    return list(rows_of), [np.asarray(rows, dtype=np.int64) for rows in rows_of.values()]


def common_length(mapping) -> int:
    """Shared length of the per-category sequences of a ``{category: labels}`` mapping."""
    lengths = {name: len(values) for name, values in mapping.items()}
    distinct = set(lengths.values())
    if len(distinct) > 1:
        raise ShapeMismatch(f"All categories must have the same number of rows; got {lengths}")
    return distinct.pop() if distinct else 0
