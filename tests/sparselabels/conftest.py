import numpy as np
import pandas as pd
import pytest

from sparselabels import SparseLabels, DenseLabels, from_record


@pytest.fixture
def city_table():
    # every (city, income) combination appears exactly once
    return pd.DataFrame({
        "cities": ["NY", "NY", "LA", "LA"],
        "income": ["high", "low", "high", "low"],
    })


@pytest.fixture
def city_index(city_table):
    return SparseLabels.from_mapping({c: city_table[c].tolist() for c in city_table.columns})


@pytest.fixture
def city_dense(city_table):
    return DenseLabels(city_table)


@pytest.fixture
def wide_table():
    # 60 rows, three categories, some empty cells
    rng = np.random.default_rng(7)
    n = 60
    colors = rng.choice(["red", "green", "blue", None], size=n, p=[0.3, 0.3, 0.3, 0.1])
    shapes = rng.choice(["circle", "square"], size=n)
    sizes = rng.choice(["S", "M", "L", "XL"], size=n)
    return pd.DataFrame({"color": colors, "shape": shapes, "size": sizes})


def _random_table(rng, n_rows, n_categories=3, max_labels=4, p_empty=0.1):
    """Random dense table with labels unique across categories."""
    data = {}
    for k in range(n_categories):
        n_labels = int(rng.integers(1, max_labels + 1))
        pool = [f"c{k}_l{j}" for j in range(n_labels)]
        cells = rng.choice(pool, size=n_rows).astype(object)
        cells[rng.random(n_rows) < p_empty] = None
        data[f"cat{k}"] = list(cells)
    return pd.DataFrame(data)


def _random_overlapping(rng, n_rows, n_categories=3, max_labels=4, p_true=0.35):
    """Random bitmap index whose rows may carry several labels of one category."""
    labels, categories, columns = [], [], []
    for k in range(n_categories):
        n_labels = int(rng.integers(1, max_labels + 1))
        for j in range(n_labels):
            col = rng.random(n_rows) < p_true
            col[rng.integers(n_rows)] = True
            labels.append(f"c{k}_l{j}")
            categories.append(f"cat{k}")
            columns.append(col)
    return from_record({
        "labels": labels,
        "categories": categories,
        "membership": np.column_stack(columns),
    })


def _assert_invariants(idx):
    """Row count, no dead column, global label uniqueness."""
    m = idx.membership
    assert m.shape == (idx.n_rows, len(idx.catalog))
    assert (np.diff(m.indptr) > 0).all()
    assert len(set(idx.labels)) == len(idx.labels)


@pytest.fixture
def random_table():
    return _random_table


@pytest.fixture
def assert_invariants():
    return _assert_invariants


@pytest.fixture
def random_overlapping():
    return _random_overlapping
