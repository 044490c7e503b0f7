import numpy as np
import pytest

from sparselabels import SparseLabels, to_bitmap, to_dense

SEEDS = list(range(8))


@pytest.fixture(params=["table", "overlapping"])
def make_index(request, random_table, random_overlapping):
    # "overlapping" rows may carry several labels of one category
    def make(rng, n_rows=None):
        n = int(rng.integers(5, 40)) if n_rows is None else n_rows
        if request.param == "table":
            return to_bitmap(random_table(rng, n))
        return random_overlapping(rng, n)
    return make


def _index(random_table, rng, n_rows=None):
    n = int(rng.integers(5, 40)) if n_rows is None else n_rows
    return to_bitmap(random_table(rng, n))


@pytest.mark.parametrize("seed", SEEDS)
def test_invariants_hold_after_mutations(seed, make_index, assert_invariants):
    rng = np.random.default_rng(seed)
    idx = make_index(rng)
    assert_invariants(idx)

    ind = rng.random(idx.n_rows) < 0.5
    assert_invariants(idx.keep(ind))

    labs = list(idx.labels)
    assert_invariants(idx.remove(list(rng.choice(labs, size=2)))[0])

    cat = idx.category_names()[0]
    assert_invariants(idx.collapse(cat))
    assert_invariants(idx.rm_category(cat))
    assert_invariants(idx.replace(idx.labels_in(cat), "merged"))

    other = make_index(rng)
    assert_invariants(idx.append(other))

    sel = np.zeros(idx.n_rows, dtype=bool)
    sel[: min(idx.n_rows, other.n_rows)] = True
    piece = other.keep(np.arange(other.n_rows) < sel.sum())
    if piece.categories_match(idx):
        assert_invariants(idx.overwrite(piece, sel))


@pytest.mark.parametrize("seed", SEEDS)
def test_collapse_is_idempotent(seed, make_index):
    rng = np.random.default_rng(seed)
    idx = make_index(rng)
    for cat in idx.category_names():
        once = idx.collapse(cat)
        assert once.collapse(cat).eq(once)


@pytest.mark.parametrize("seed", SEEDS)
def test_collapse_covers_rows_with_any_label(seed, make_index):
    rng = np.random.default_rng(seed)
    idx = make_index(rng)
    for cat in idx.category_names():
        out = idx.collapse(cat)
        expected = idx.where(idx.labels_in(cat))[0]
        assert np.array_equal(out.get_index(f"all__{cat}"), expected)
        assert out.labels_in(cat) == [f"all__{cat}"]


@pytest.mark.parametrize("seed", SEEDS)
def test_dense_roundtrip(seed, random_table):
    rng = np.random.default_rng(seed)
    idx = _index(random_table, rng)
    assert to_bitmap(to_dense(idx)).eq(idx)


@pytest.mark.parametrize("seed", SEEDS)
def test_append_row_counts(seed, make_index):
    rng = np.random.default_rng(seed)
    a = make_index(rng)
    b = make_index(rng)
    out = a.append(b)
    assert out.n_rows == a.n_rows + b.n_rows
    for lab in b.labels:
        assert np.array_equal(out.get_index(lab)[a.n_rows:], b.get_index(lab))
    assert SparseLabels.empty().append(b).eq(b)


@pytest.mark.parametrize("seed", SEEDS)
def test_narrowing_matches_scan(seed, make_index):
    rng = np.random.default_rng(seed)
    idx = make_index(rng, n_rows=50)
    cats = idx.category_names()
    for chosen in (cats, cats[::-1], cats[1:]):
        fast = idx.rget_indices(chosen)
        slow = idx._scan_indices(chosen)
        assert [labs for _, labs in fast] == [labs for _, labs in slow]
        for (a, _), (b, _) in zip(fast, slow):
            assert np.array_equal(a, b)


@pytest.mark.parametrize("seed", SEEDS)
def test_get_indices_covers_labelled_rows(seed, make_index):
    rng = np.random.default_rng(seed)
    idx = make_index(rng, n_rows=50)
    cats = idx.category_names()
    groups = idx.get_indices(cats)
    assert all(ind.any() for ind, _ in groups)

    covered = np.zeros(idx.n_rows, dtype=int)
    for ind, labs in groups:
        covered += ind
        assert np.array_equal(ind, idx.where(list(labs))[0])

    # a row is in some group iff it has a label in every category
    in_all = np.ones(idx.n_rows, dtype=bool)
    for c in cats:
        in_all &= idx.where(idx.labels_in(c))[0]
    assert np.array_equal(covered > 0, in_all)


@pytest.mark.parametrize("seed", SEEDS)
def test_get_indices_groups_disjoint_for_dense_tables(seed, random_table):
    rng = np.random.default_rng(seed)
    idx = _index(random_table, rng, n_rows=50)
    covered = np.zeros(idx.n_rows, dtype=int)
    for ind, _ in idx.get_indices(idx.category_names()):
        covered += ind
    # each row carries at most one label per category
    assert covered.max() <= 1


@pytest.mark.parametrize("seed", SEEDS)
def test_unknown_selector_nullifies(seed, make_index):
    rng = np.random.default_rng(seed)
    idx = make_index(rng)
    picks = list(rng.choice(list(idx.labels), size=2)) + ["never-a-label"]
    rng.shuffle(picks)
    ind, cats = idx.where(picks)
    assert not ind.any()
    assert len(cats) == len(dict.fromkeys(picks))
