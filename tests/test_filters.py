from __future__ import annotations

import pytest

from pubmed_api.models.schemas import SearchFilters
from pubmed_api.services.articles import normalize_filters, parse_search_filters


@pytest.mark.parametrize("page", [0, -1, -100])
def test_page_below_one_becomes_one(page):
    assert normalize_filters(SearchFilters(page=page)).page == 1


@pytest.mark.parametrize("page_size, expected", [
    (0, 10),
    (-5, 10),
    (51, 50),
    (1000, 50),
    (1, 1),
    (25, 25),
    (50, 50),
])
def test_page_size_clamped_into_range(page_size, expected):
    assert normalize_filters(SearchFilters(page_size=page_size)).page_size == expected


@pytest.mark.parametrize("sort", ["", "newest", "YEAR_DESC", "relevance "])
def test_unknown_sort_falls_back_to_relevance(sort):
    assert normalize_filters(SearchFilters(sort=sort)).sort == "relevance"


@pytest.mark.parametrize("sort", ["relevance", "year_desc", "year_asc"])
def test_known_sort_kept(sort):
    assert normalize_filters(SearchFilters(sort=sort)).sort == sort


def test_other_fields_pass_through_untouched():
    raw = SearchFilters(query="  IbuProfen ", year=0, journal="Medical Journal", author="Smith",
                        page=3, page_size=7, sort="year_asc")
    normalized = normalize_filters(raw)
    assert normalized == raw
    # year=0 is a real value, not "absent"
    assert normalized.year == 0


def test_parse_defaults_on_empty_params():
    filters = parse_search_filters({})
    assert filters == SearchFilters()
    assert filters.year is None
    assert (filters.page, filters.page_size, filters.sort) == (1, 10, "relevance")


def test_parse_all_params():
    filters = parse_search_filters({
        "q": "ibuprofen", "year": "2020", "journal": "Pain Medicine", "author": "Smith",
        "page": "2", "page_size": "5", "sort": "year_desc",
    })
    assert filters.query == "ibuprofen"
    assert filters.year == 2020
    assert filters.journal == "Pain Medicine"
    assert filters.author == "Smith"
    assert filters.page == 2
    assert filters.page_size == 5
    assert filters.sort == "year_desc"


def test_parse_unparseable_numbers_are_absent():
    filters = parse_search_filters({"year": "twenty", "page": "x", "page_size": "1.5"})
    assert filters.year is None
    assert filters.page == 1
    assert filters.page_size == 10


def test_parse_non_positive_paging_keeps_defaults():
    filters = parse_search_filters({"page": "0", "page_size": "-3"})
    assert filters.page == 1
    assert filters.page_size == 10


def test_parse_uses_first_of_repeated_values():
    filters = parse_search_filters({"q": ["first", "second"], "year": ["2019", "2020"]})
    assert filters.query == "first"
    assert filters.year == 2019


def test_parse_empty_strings_are_absent():
    filters = parse_search_filters({"q": "", "journal": "", "year": "", "sort": ""})
    assert filters == SearchFilters()


def test_parse_keeps_unknown_sort_for_normalization():
    filters = parse_search_filters({"sort": "bogus"})
    assert filters.sort == "bogus"
    assert normalize_filters(filters).sort == "relevance"


@pytest.mark.parametrize("key", ["page", "year", "page_size"])
@pytest.mark.parametrize("value", ["99999999999999999999", "-99999999999999999999", "9223372036854775808"])
def test_parse_numbers_outside_sql_integer_range_are_absent(key, value):
    assert parse_search_filters({key: value}) == SearchFilters()


def test_parse_largest_sql_integer_is_kept():
    filters = parse_search_filters({"page": "9223372036854775807", "year": "-9223372036854775808"})
    assert filters.page == 2**63 - 1
    assert filters.year == -(2**63)
