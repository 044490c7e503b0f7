import numpy as np
import pytest

from sparselabels import (
    CategoryConflict,
    CategoryMismatch,
    ShapeMismatch,
    SparseLabels,
)
from sparselabels.diagnostics import collecting_sink


@pytest.fixture
def other_cities():
    return SparseLabels.from_mapping({
        "cities": ["SF", "NY"],
        "income": ["mid", "high"],
    })


# ── append ───────────────────────────────────────────────────────────────────

def test_append_stacks_rows(city_index, other_cities):
    sink, lines = collecting_sink()
    out = city_index.append(other_cities, sink=sink)
    assert out.n_rows == 6
    assert out.labels_in("cities") == ["NY", "LA", "SF"]
    assert out.labels_in("income") == ["high", "low", "mid"]
    assert out.get_index("NY").tolist() == [True, True, False, False, False, True]
    assert out.get_index("SF").tolist() == [False] * 4 + [True, False]
    assert out.get_index("low").tolist() == [False, True, False, True, False, False]
    assert "2 shared label(s), 2 new" in lines[0]


def test_append_to_empty_returns_other(city_index):
    assert SparseLabels.empty().append(city_index) is city_index
    assert SparseLabels.empty(5).append(city_index) is city_index


def test_append_requires_same_categories(city_index):
    other = SparseLabels.from_mapping({"cities": ["NY"]})
    with pytest.raises(CategoryMismatch):
        city_index.append(other)


def test_append_rejects_label_in_other_category(city_index):
    other = SparseLabels.from_mapping({
        "cities": ["SF"],
        "income": ["NY"],
    })
    with pytest.raises(CategoryConflict):
        city_index.append(other)


def test_append_conflict_with_extra_category():
    a = SparseLabels.from_mapping({"cities": ["NY"], "regions": ["east"]})
    b = SparseLabels.from_mapping({"cities": ["LA"], "regions": ["NY"]})
    with pytest.raises(CategoryConflict):
        a.append(b)


def test_append_accepts_dense_operand(city_index, city_dense):
    out = city_index.append(city_dense)
    assert out.n_rows == 8
    assert out.get_index("NY").sum() == 4


# ── overwrite ────────────────────────────────────────────────────────────────

def test_overwrite_splices_rows(city_index, other_cities):
    index = np.array([False, True, False, True])
    out = city_index.overwrite(other_cities, index)
    assert out.n_rows == 4
    assert out.get_index("SF").tolist() == [False, True, False, False]
    assert out.get_index("NY").tolist() == [True, False, False, True]
    assert out.get_index("mid").tolist() == [False, True, False, False]
    # "low" tagged only rows 1 and 3, both replaced
    assert not out.contains_label("low")
    assert out.labels_in("income") == ["high", "mid"]


def test_overwrite_checks_count(city_index, other_cities):
    with pytest.raises(ShapeMismatch):
        city_index.overwrite(other_cities, np.array([True, False, False, False]))
    with pytest.raises(ShapeMismatch):
        city_index.overwrite(other_cities, np.array([True, True]))


def test_overwrite_checks_categories(city_index):
    other = SparseLabels.from_mapping({"cities": ["NY"]})
    with pytest.raises(CategoryMismatch):
        city_index.overwrite(other, np.array([True, False, False, False]))


def test_overwrite_does_not_touch_operands(city_index, other_cities):
    city_index.overwrite(other_cities, np.array([True, True, False, False]))
    assert city_index.labels_in("income") == ["high", "low"]
    assert city_index.get_index("LA").tolist() == [False, False, True, True]


def test_categories_match(city_index, other_cities, city_dense):
    assert city_index.categories_match(other_cities)
    assert city_index.categories_match(city_dense)
    assert not city_index.categories_match(city_index.rm_category("income"))
    assert not city_index.categories_match(None)
