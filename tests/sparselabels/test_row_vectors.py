import numpy as np
import pandas as pd
import pytest

from sparselabels.arrays import (
    as_row_vector,
    common_length,
    ensure_list,
    is_empty_cell,
    label_rows,
    rep_logic,
    unique_in_order,
)
from sparselabels.errors import ShapeMismatch


def test_as_row_vector_accepts_lists_and_series():
    assert as_row_vector([True, False], 2).tolist() == [True, False]
    s = pd.Series([False, True], index=[10, 20])
    assert as_row_vector(s, 2).tolist() == [False, True]


def test_as_row_vector_returns_copy():
    a = np.array([True, True])
    b = as_row_vector(a, 2)
    b[0] = False
    assert a[0]


def test_as_row_vector_rejects_bad_input():
    with pytest.raises(TypeError):
        as_row_vector([1, 0], 2)
    with pytest.raises(ShapeMismatch):
        as_row_vector([True], 2)
    with pytest.raises(ShapeMismatch):
        as_row_vector(np.ones((2, 1), dtype=bool), 2)


def test_selector_helpers():
    assert ensure_list(None) == []
    assert ensure_list("NY") == ["NY"]
    assert ensure_list(("NY", "LA")) == ["NY", "LA"]
    with pytest.raises(TypeError):
        ensure_list(["NY", 3])
    assert unique_in_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
    assert rep_logic(3, False).tolist() == [False, False, False]


def test_empty_cells_and_label_rows():
    assert is_empty_cell(None) and is_empty_cell("") and is_empty_cell(np.nan)
    assert not is_empty_cell("NY")
    labs, rows = label_rows(["NY", None, "LA", "NY", ""])
    assert labs == ["NY", "LA"]
    assert [r.tolist() for r in rows] == [[0, 3], [2]]
    with pytest.raises(TypeError):
        label_rows(["NY", 5])


def test_common_length():
    assert common_length({"a": [1, 2], "b": "xy"}) == 2
    assert common_length({}) == 0
    with pytest.raises(ShapeMismatch):
        common_length({"a": [1], "b": [1, 2]})
