import numpy as np
import pytest

from sparselabels import NOT_FOUND, SparseLabels, UnknownCategory
from sparselabels.diagnostics import collecting_sink
from sparselabels.query import cartesian, combs_frame


# ── where ────────────────────────────────────────────────────────────────────

def test_where_and_across_categories(city_index):
    ind, cats = city_index.where(["NY", "high"])
    assert ind.tolist() == [True, False, False, False]
    assert cats == ["cities", "income"]


def test_where_or_within_category(city_index):
    ind, cats = city_index.where(["NY", "LA"])
    assert ind.tolist() == [True, True, True, True]
    assert cats == ["cities", "cities"]

    ind, _ = city_index.where(["NY", "LA", "low"])
    assert ind.tolist() == [False, True, False, True]


def test_where_unknown_selector_nullifies_everything(city_index):
    ind, cats = city_index.where(["NY", "Boston", "high"])
    assert not ind.any()
    assert cats == ["cities", NOT_FOUND, "income"]


def test_where_deduplicates_and_accepts_a_string(city_index):
    ind, cats = city_index.where(["LA", "LA"])
    assert cats == ["cities"]
    assert ind.tolist() == city_index.where("LA")[0].tolist()


def test_where_empty_selectors_match_all(city_index):
    ind, cats = city_index.where([])
    assert ind.all() and cats == []


# ── combs ────────────────────────────────────────────────────────────────────

def test_cartesian_first_list_slowest():
    assert cartesian([["a", "b"], ["x", "y"]]) == [("a", "x"), ("a", "y"), ("b", "x"), ("b", "y")]
    assert combs_frame([], []).empty


def test_combs_single_category(city_index):
    table = city_index.combs(["cities"])
    assert list(table.columns) == ["cities"]
    assert table.values.tolist() == [["NY"], ["LA"]]


def test_combs_uses_catalog_order(city_index):
    table = city_index.combs(["income", "cities"])
    assert list(table.columns) == ["cities", "income"]
    assert len(table) == 4
    assert tuple(table.iloc[0]) == ("NY", "high")
    assert list(city_index.combs().columns) == ["cities", "income"]


def test_combs_lists_absent_combinations():
    idx = SparseLabels.from_mapping({"a": ["x", "y"], "b": ["p", "q"]})
    assert len(idx.combs()) == 4
    assert len(idx.get_indices(["a", "b"])) == 2


def test_combs_unknown_category(city_index):
    with pytest.raises(UnknownCategory):
        city_index.combs(["regions"])


# ── get_indices / narrowing enumeration ──────────────────────────────────────

def test_get_indices_one_group_per_row(city_index):
    groups = city_index.get_indices(["cities", "income"])
    assert [labs for _, labs in groups] == [
        ("NY", "high"), ("NY", "low"), ("LA", "high"), ("LA", "low")
    ]
    for row, (ind, _) in enumerate(groups):
        assert np.flatnonzero(ind).tolist() == [row]


def test_get_indices_single_category_fast_path(city_index):
    groups = city_index.get_indices("income")
    assert [labs for _, labs in groups] == [("high",), ("low",)]
    assert groups[0][0].tolist() == [True, False, True, False]


def test_get_indices_no_categories(city_index):
    groups = city_index.get_indices([])
    assert len(groups) == 1
    ind, labs = groups[0]
    assert ind.all() and labs == ()
    assert SparseLabels.empty(0).get_indices([]) == []


def test_get_indices_skips_rows_without_labels():
    idx = SparseLabels.from_mapping({
        "a": ["x", "x", None, "y"],
        "b": ["p", None, "q", "q"],
    })
    groups = idx.get_indices(["a", "b"])
    assert [labs for _, labs in groups] == [("x", "p"), ("y", "q")]
    assert all(ind.any() for ind, _ in groups)


def test_get_indices_reports_to_sink(city_index):
    sink, lines = collecting_sink()
    city_index.get_indices(["cities", "income"], sink=sink)
    assert len(lines) == 1 and lines[0].startswith("get_indices:")


def test_rget_indices_matches_scan(wide_table):
    idx = SparseLabels.from_mapping({c: wide_table[c].tolist() for c in wide_table.columns})
    for cats in (["color"], ["color", "size"], ["size", "shape", "color"]):
        fast = idx.rget_indices(cats)
        slow = idx._scan_indices(cats)
        assert [labs for _, labs in fast] == [labs for _, labs in slow]
        for (a, _), (b, _) in zip(fast, slow):
            assert np.array_equal(a, b)


def test_get_indices_unknown_category(city_index):
    with pytest.raises(UnknownCategory):
        city_index.get_indices(["cities", "regions"])
