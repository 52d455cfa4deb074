"""Tests for catalog filtering."""

import pytest

from channelbox.catalog import ALL_CATEGORIES, Catalog
from channelbox.models import ChannelEntry


@pytest.fixture
def catalog() -> Catalog:
    c = Catalog()
    c.set_catalog(
        [
            ChannelEntry(name="Sky News", stream_url="http://s/1", category="News"),
            ChannelEntry(name="Cartoon Fun", stream_url="http://s/2", category="Kids"),
            ChannelEntry(name="BBC News", stream_url="http://s/3", category="News"),
            ChannelEntry(name="Music Box", stream_url="http://s/4", category="news-music"),
            ChannelEntry(name="Local", stream_url="http://s/5", category="General"),
        ],
        ["News", "Kids", "news-music", "News"],
    )
    return c


def names(entries):
    return [e.name for e in entries]


class TestSetCatalog:
    """Catalog replacement."""

    def test_view_starts_as_full_catalog(self, catalog) -> None:
        assert catalog.view == list(catalog.entries)
        assert len(catalog.view) == 5

    def test_categories_sorted_and_unique(self, catalog) -> None:
        assert catalog.categories == ["Kids", "News", "news-music"]

    def test_replacing_resets_filters(self, catalog) -> None:
        catalog.filter_by_category("Kids")
        catalog.set_catalog([ChannelEntry(name="Only", stream_url="http://s/x")])
        assert names(catalog.view) == ["Only"]
        assert catalog.active_category == ALL_CATEGORIES
        assert catalog.categories == []


class TestFilterByCategory:
    """Exact category matching."""

    def test_exact_match_in_order(self, catalog) -> None:
        assert names(catalog.filter_by_category("News")) == ["Sky News", "BBC News"]

    def test_case_sensitive(self, catalog) -> None:
        assert catalog.filter_by_category("news") == []

    def test_not_substring(self, catalog) -> None:
        assert names(catalog.filter_by_category("news-music")) == ["Music Box"]

    def test_all_restores_full_catalog(self, catalog) -> None:
        catalog.filter_by_search("sky")
        catalog.filter_by_category("Kids")
        assert catalog.filter_by_category(ALL_CATEGORIES) == list(catalog.entries)

    def test_unknown_category_is_empty(self, catalog) -> None:
        assert catalog.filter_by_category("Sports") == []


class TestFilterBySearch:
    """Case-insensitive substring search over name and category."""

    def test_matches_names_in_order(self, catalog) -> None:
        result = catalog.filter_by_search("NEWS")
        assert names(result) == ["Sky News", "BBC News", "Music Box"]

    def test_matches_category(self, catalog) -> None:
        assert names(catalog.filter_by_search("kid")) == ["Cartoon Fun"]

    def test_no_match_is_empty(self, catalog) -> None:
        assert catalog.filter_by_search("zzz") == []

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_blank_query_restores_full_catalog(self, catalog, query) -> None:
        catalog.filter_by_category("Kids")
        assert catalog.filter_by_search(query) == list(catalog.entries)

    def test_filters_do_not_compose(self, catalog) -> None:
        """A search starts from the full catalog, not the category view."""
        catalog.filter_by_category("Kids")
        assert names(catalog.filter_by_search("news")) == ["Sky News", "BBC News", "Music Box"]
        assert catalog.active_category == ALL_CATEGORIES

        catalog.filter_by_category("News")
        assert catalog.search_text == ""
        assert names(catalog.view) == ["Sky News", "BBC News"]

    def test_catalog_never_mutated(self, catalog) -> None:
        before = catalog.entries
        catalog.filter_by_search("sky")
        catalog.filter_by_category("Kids")
        assert catalog.entries == before
