import pytest

from sparselabels.catalog import Catalog
from sparselabels.errors import DuplicateCategory, DuplicateLabel, UnknownCategory


@pytest.fixture
def cat():
    return Catalog(("NY", "LA", "high", "low"), ("cities", "cities", "income", "income"))


def test_lookups(cat):
    assert len(cat) == 4
    assert cat.category_names() == ["cities", "income"]
    assert cat.labels_in("income") == ["high", "low"]
    assert cat.position("LA") == 1
    assert cat.find("Boston") is None
    assert cat.category_of("low") == "income"
    with pytest.raises(KeyError):
        cat.position("Boston")
    with pytest.raises(UnknownCategory):
        cat.labels_in("regions")


def test_labels_unique_across_categories():
    with pytest.raises(DuplicateLabel):
        Catalog(("NY", "NY"), ("cities", "regions"))
    with pytest.raises(ValueError):
        Catalog(("NY",), ())


def test_normalize_categories_follows_catalog_order(cat):
    assert cat.normalize_categories(["income", "cities", "income"]) == ["cities", "income"]
    assert cat.normalize_categories("income") == ["income"]
    with pytest.raises(UnknownCategory):
        cat.normalize_categories(["regions"])


def test_derivations_return_new_catalogs(cat):
    assert cat.take([2, 0]).labels == ("high", "NY")
    assert cat.drop([0, 1]).category_names() == ["income"]
    ext = cat.extend(["SF"], "cities")
    assert ext.labels[-1] == "SF" and len(cat) == 4
    with pytest.raises(DuplicateLabel):
        cat.extend(["high"], "regions")


def test_renames(cat):
    assert cat.rename_category("cities", "town").category_names() == ["town", "income"]
    assert cat.rename_category("cities", "cities") is cat
    with pytest.raises(DuplicateCategory):
        cat.rename_category("cities", "income")
    assert cat.rename_label("NY", "NYC").labels[0] == "NYC"
    with pytest.raises(DuplicateLabel):
        cat.rename_label("NY", "LA")
    with pytest.raises(KeyError):
        cat.rename_label("Boston", "B")


def test_order_by_label(cat):
    assert [cat.labels[i] for i in cat.order_by_label()] == ["LA", "NY", "high", "low"]
