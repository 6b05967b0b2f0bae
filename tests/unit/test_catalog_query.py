"""
Unit tests for the catalog query engine.
"""

from datetime import datetime, timedelta

import pytest

from enchantedtome.catalog import (
    CatalogQuery,
    PriceBracket,
    SortKey,
    collation_key,
    facet_categories,
    query,
)
from enchantedtome.storage.book_repository import StoredBook


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def book(id, title, author="Anon", price=0.0, category="Fiction", description=None, age_days=0):
    return StoredBook(
        id=id,
        title=title,
        author=author,
        price=price,
        category=category,
        description=description,
        created_at=BASE_TIME - timedelta(days=age_days),
        updated_at=BASE_TIME - timedelta(days=age_days),
    )


@pytest.fixture
def catalog():
    return [
        book("1", "Dracula", "Bram Stoker", 9.99, "Classic", "A count in Transylvania", age_days=3),
        book("2", "emma", "Jane Austen", 25.00, "Romance", age_days=1),
        book("3", "Ulysses", "James Joyce", 50.00, "Fiction", "One day in Dublin", age_days=2),
        book("4", "Éclair Tales", "Zoë Writer", 75.00, "Poetry", age_days=0),
        book("5", "Beowulf", "Unknown", 10.00, "Classic", age_days=4),
    ]


class TestPriceBracket:
    """Tests for price bracket predicates."""

    @pytest.mark.parametrize("price,expected", [
        (0.0, {"under10"}),
        (9.99, {"under10"}),
        (10.0, {"10to25"}),
        (25.0, {"10to25", "25to50"}),
        (50.0, {"25to50"}),
        (50.01, {"over50"}),
    ])
    def test_boundaries(self, price, expected):
        """Brackets are inclusive at 10/25/50, so 25.00 sits in two of them."""
        matched = {
            b.value for b in PriceBracket
            if b is not PriceBracket.ALL and b.matches(price)
        }
        assert matched == expected

    def test_unknown_value_means_all(self):
        assert PriceBracket.parse("cheap") is PriceBracket.ALL
        assert PriceBracket.parse(None) is PriceBracket.ALL

    def test_every_result_satisfies_bracket(self, catalog):
        for bracket in PriceBracket:
            result = query(catalog, CatalogQuery(price_bracket=bracket))
            assert all(bracket.matches(b.price) for b in result.results)
            expected = [b for b in catalog if bracket.matches(b.price)]
            assert len(result.results) == len(expected)

    def test_overlapping_brackets_end_to_end(self):
        books = [
            book("a", "Cheap", price=9.99),
            book("b", "Middle", price=25.00),
            book("c", "Dear", price=50.00),
        ]

        def titles(bracket):
            params = CatalogQuery.from_params(price_bracket=bracket)
            return {b.title for b in query(books, params).results}

        assert "Middle" in titles("10to25")
        assert "Middle" in titles("25to50")
        assert titles("under10") == {"Cheap"}


class TestSorting:
    """Tests for result ordering."""

    def test_default_sort_is_title(self, catalog):
        result = query(catalog)
        assert [b.id for b in result.results] == ["5", "1", "4", "2", "3"]

    def test_title_sort_ignores_case_and_accents(self):
        assert collation_key("Éclair") == collation_key("eclair")
        books = [book("1", "zebra"), book("2", "Éclair"), book("3", "apple")]
        result = query(books, CatalogQuery(sort_key=SortKey.TITLE))
        assert [b.title for b in result.results] == ["apple", "Éclair", "zebra"]

    def test_author_sort(self, catalog):
        result = query(catalog, CatalogQuery(sort_key=SortKey.AUTHOR))
        assert [b.author for b in result.results] == [
            "Bram Stoker", "James Joyce", "Jane Austen", "Unknown", "Zoë Writer",
        ]

    def test_price_sorts(self, catalog):
        low = query(catalog, CatalogQuery(sort_key=SortKey.PRICE_LOW))
        high = query(catalog, CatalogQuery(sort_key=SortKey.PRICE_HIGH))
        assert [b.price for b in low.results] == [9.99, 10.0, 25.0, 50.0, 75.0]
        assert [b.price for b in high.results] == [75.0, 50.0, 25.0, 10.0, 9.99]

    def test_newest_first(self, catalog):
        result = query(catalog, CatalogQuery(sort_key=SortKey.NEWEST))
        assert [b.id for b in result.results] == ["4", "2", "3", "1", "5"]

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_ties_keep_input_order(self, sort_key):
        """Books with identical sort keys stay in input order."""
        books = [book(str(i), "Same", "Same", 12.0) for i in range(6)]
        result = query(books, CatalogQuery(sort_key=sort_key))
        assert [b.id for b in result.results] == [str(i) for i in range(6)]

    def test_unknown_sort_falls_back_to_title(self, catalog):
        params = CatalogQuery.from_params(sort_key="popularity")
        assert params.sort_key is SortKey.TITLE


class TestSearchAndFilters:
    """Tests for text search and category filtering."""

    def test_search_is_case_insensitive_substring(self, catalog):
        params = CatalogQuery.from_params(text="AUSTEN")
        assert [b.id for b in query(catalog, params).results] == ["2"]

    def test_search_matches_description(self, catalog):
        params = CatalogQuery.from_params(text="dublin")
        assert [b.id for b in query(catalog, params).results] == ["3"]

    def test_missing_description_does_not_match_or_fail(self, catalog):
        params = CatalogQuery.from_params(text="transylvania")
        assert [b.id for b in query(catalog, params).results] == ["1"]

    def test_empty_text_matches_everything(self, catalog):
        params = CatalogQuery.from_params(text="")
        assert query(catalog, params).total == len(catalog)
        assert len(query(catalog, params).results) == len(catalog)

    def test_category_filter(self, catalog):
        params = CatalogQuery.from_params(category="Classic")
        assert {b.id for b in query(catalog, params).results} == {"1", "5"}

    def test_all_category_disables_filter(self, catalog):
        params = CatalogQuery.from_params(category="all")
        assert len(query(catalog, params).results) == len(catalog)

    def test_no_matches(self, catalog):
        params = CatalogQuery.from_params(text="no such book")
        result = query(catalog, params)
        assert result.results == []
        assert result.total == len(catalog)


class TestFacets:
    """Tests for category facets."""

    def test_facets_ignore_filters(self, catalog):
        params = CatalogQuery.from_params(text="austen", category="Romance", price_bracket="10to25")
        result = query(catalog, params)
        assert len(result.results) == 1
        assert result.facet_categories == ["Classic", "Fiction", "Poetry", "Romance"]

    def test_facets_are_sorted_and_distinct(self, catalog):
        assert facet_categories(catalog) == sorted({b.category for b in catalog})

    def test_empty_catalog(self):
        result = query([])
        assert result.results == []
        assert result.facet_categories == []
        assert result.total == 0
