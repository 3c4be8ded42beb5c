"""
Storage contract for article records.

The search service depends only on this interface; any backend that
implements it can be swapped in (the SQL one below, or a fake in tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from pubmed_api.models.schemas import Article, SearchFilters, SearchResult, Stats


class ArticleRepository(ABC):
    @abstractmethod
    async def get(self, pmid: str) -> Article:
        """
        Fetch one article by PubMed ID.

        Raises:
            NotFound: no row has this pmid
            Internal: the storage engine failed or the row could not be decoded
        """

    @abstractmethod
    async def search(self, filters: SearchFilters) -> SearchResult:
        """
        Return one page of articles matching ``filters``.

        ``filters`` must already be normalized. ``total`` counts every match
        across all pages; a page past the end is empty, not an error.
        """

    @abstractmethod
    async def stats(self) -> Stats:
        """Top journals by article count and a per-year histogram."""

    @abstractmethod
    async def upsert_many(self, articles: Iterable[Article]) -> int:
        """
        Insert or replace articles by pmid in a single transaction.

        Either every article of the batch is stored or none is. Returns the
        number of articles written.
        """
