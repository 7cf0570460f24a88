# tests/test_catalog.py
from snapshop.catalog import PRODUCTS, categories, get_product, visible_products
from snapshop.models import FilterState


def test_all_with_empty_query_is_whole_catalog():
    assert visible_products(PRODUCTS, FilterState()) == PRODUCTS


def test_category_filter_keeps_catalog_order():
    out = visible_products(PRODUCTS, FilterState(category="fashion"))
    assert [p.id for p in out] == [3, 4, 8]


def test_query_matches_title_or_description_case_insensitively():
    # "GPS" only appears in the smart watch description
    assert [p.id for p in visible_products(PRODUCTS, FilterState(query="gps"))] == [2]
    assert [p.id for p in visible_products(PRODUCTS, FilterState(query="LAMP"))] == [6]


def test_category_and_query_compose():
    out = visible_products(PRODUCTS, FilterState(category="home", query="modern"))
    # the leather jacket also says "modern" but is fashion
    assert [p.id for p in out] == [6]


def test_no_match_is_empty_not_error():
    assert visible_products(PRODUCTS, FilterState(query="submarine")) == ()
    assert visible_products(PRODUCTS, FilterState(category="toys")) == ()


def test_result_is_always_an_ordered_subset():
    ids = [p.id for p in PRODUCTS]
    for category in ("all", "electronics", "fashion", "home"):
        for query in ("", "e", "wireless", "xyz"):
            out = [p.id for p in visible_products(PRODUCTS, FilterState(category=category, query=query))]
            assert out == [i for i in ids if i in out]


def test_lookup_and_categories():
    assert get_product(PRODUCTS, 1).price == 12499
    assert get_product(PRODUCTS, 99) is None
    assert categories(PRODUCTS) == ("electronics", "fashion", "home")
