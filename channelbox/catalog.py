from __future__ import annotations

from typing import Iterable

from loguru import logger

from channelbox.models import ChannelEntry


ALL_CATEGORIES = "all"


class Catalog:
    """Full channel list plus the view derived from the latest filter intent.

    Category and search filters are not combined: each one starts again from
    the full catalog, so picking a category drops the search and vice versa.
    """

    def __init__(self):
        self._entries: tuple[ChannelEntry, ...] = ()
        self._categories: list[str] = []
        self.view: list[ChannelEntry] = []
        self.active_category: str = ALL_CATEGORIES
        self.search_text: str = ""

    @property
    def entries(self) -> tuple[ChannelEntry, ...]:
        return self._entries

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def set_catalog(self, entries: Iterable[ChannelEntry], categories: Iterable[str] = ()) -> None:
        self._entries = tuple(entries)
        self._categories = sorted(set(categories))
        self.active_category = ALL_CATEGORIES
        self.search_text = ""
        self.view = list(self._entries)

    def filter_by_category(self, category: str) -> list[ChannelEntry]:
        self.active_category = category
        self.search_text = ""
        if category == ALL_CATEGORIES:
            self.view = list(self._entries)
        else:
            self.view = [e for e in self._entries if e.category == category]

        logger.debug(f"Category {category!r}: {len(self.view)} of {len(self._entries)} channels")
        return self.view

    def filter_by_search(self, query: str) -> list[ChannelEntry]:
        self.search_text = query or ""
        self.active_category = ALL_CATEGORIES
        if not self.search_text.strip():
            self.view = list(self._entries)
        else:
            term = self.search_text.lower()
            self.view = [
                e for e in self._entries
                if term in e.name.lower() or term in e.category.lower()
            ]

        logger.debug(f"Search {query!r}: {len(self.view)} of {len(self._entries)} channels")
        return self.view
