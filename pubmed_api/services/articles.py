"""Article search service: filter normalization and deadline handling.

Sits between the HTTP boundary and an ``ArticleRepository``. Bad filter
input is corrected here, never reported; only storage failures, missing
articles, an empty pmid and expired deadlines surface as errors.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Mapping, Optional, TypeVar

from pubmed_api.core.errors import Cancelled, InvalidArgument
from pubmed_api.models.schemas import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SORT_RELEVANCE,
    SQL_INT_MAX,
    SQL_INT_MIN,
    VALID_SORTS,
    Article,
    SearchFilters,
    SearchResult,
    Stats,
)
from pubmed_api.repositories.base import ArticleRepository


logger = logging.getLogger("pubmed_api.service")

T = TypeVar("T")


def normalize_filters(filters: SearchFilters) -> SearchFilters:
    """Clamp paging and sort into their allowed ranges. Never raises."""
    page = filters.page if filters.page >= 1 else DEFAULT_PAGE
    page_size = filters.page_size
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    elif page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE
    sort = filters.sort if filters.sort in VALID_SORTS else SORT_RELEVANCE
    return filters.model_copy(update={"page": page, "page_size": page_size, "sort": sort})


def _first(params: Mapping[str, object], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or value == "":
        return None
    return str(value)


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    # too large to bind as a SQL INTEGER
    if not SQL_INT_MIN <= number <= SQL_INT_MAX:
        return None
    return number


def parse_search_filters(params: Mapping[str, object]) -> SearchFilters:
    """
    Build filters from a query-string mapping (q, year, journal, author,
    page, page_size, sort). Values may be strings or lists of strings; only
    the first is used. Unparseable numbers are treated as absent.
    """
    filters = SearchFilters()
    updates: dict = {}

    q = _first(params, "q")
    if q is not None:
        updates["query"] = q
    year = _to_int(_first(params, "year"))
    if year is not None:
        updates["year"] = year
    journal = _first(params, "journal")
    if journal is not None:
        updates["journal"] = journal
    author = _first(params, "author")
    if author is not None:
        updates["author"] = author
    page = _to_int(_first(params, "page"))
    if page is not None and page > 0:
        updates["page"] = page
    page_size = _to_int(_first(params, "page_size"))
    if page_size is not None and page_size > 0:
        updates["page_size"] = page_size
    sort = _first(params, "sort")
    if sort is not None:
        updates["sort"] = sort

    return filters.model_copy(update=updates)


class ArticleService:
    def __init__(self, repository: ArticleRepository) -> None:
        self.repository = repository

    async def _with_deadline(self, operation: str, aw: Awaitable[T], timeout: Optional[float]) -> T:
        if timeout is None:
            return await aw
        try:
            return await asyncio.wait_for(aw, timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Operation deadline exceeded",
                extra={"event": "deadline_exceeded", "operation": operation, "timeout_s": timeout},
            )
            raise Cancelled(f"{operation} cancelled: deadline exceeded", operation=operation) from exc

    async def get_article(self, pmid: str, *, timeout: Optional[float] = None) -> Article:
        if not pmid:
            raise InvalidArgument("pmid is required", operation="get_article")
        return await self._with_deadline("get_article", self.repository.get(pmid), timeout)

    async def search_articles(self, filters: SearchFilters, *, timeout: Optional[float] = None) -> SearchResult:
        normalized = normalize_filters(filters)
        return await self._with_deadline("search_articles", self.repository.search(normalized), timeout)

    async def get_stats(self, *, timeout: Optional[float] = None) -> Stats:
        return await self._with_deadline("get_stats", self.repository.stats(), timeout)
