"""Translate normalized search filters into SQLAlchemy clauses.

Everything here is pure: no I/O, no session. The repository combines the
pieces into the COUNT and page queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sqlalchemy import case, false
from sqlalchemy.sql.elements import ColumnElement

from pubmed_api.models.article_models import ArticleRow
from pubmed_api.models.schemas import (
    SORT_YEAR_ASC,
    SORT_YEAR_DESC,
    SQL_INT_MAX,
    SQL_INT_MIN,
    SearchFilters,
)


@dataclass(frozen=True)
class PageWindow:
    limit: int
    offset: int

    @property
    def beyond_storage(self) -> bool:
        """True when the offset cannot be bound as a SQL INTEGER; such a page is always empty."""
        return self.offset > SQL_INT_MAX


def build_predicate(filters: SearchFilters) -> List[ColumnElement[bool]]:
    """Return the AND-ed conditions for every present filter."""
    clauses: List[ColumnElement[bool]] = []
    if filters.query:
        clauses.append(ArticleRow.search_text.contains(filters.query.lower(), autoescape=True))
    if filters.year is not None:
        if SQL_INT_MIN <= filters.year <= SQL_INT_MAX:
            clauses.append(ArticleRow.pub_year == filters.year)
        else:
            # no stored year can be this large
            clauses.append(false())
    if filters.journal:
        clauses.append(ArticleRow.journal == filters.journal)
    if filters.author:
        # substring of the JSON-encoded author list
        clauses.append(ArticleRow.authors.contains(filters.author, autoescape=True))
    return clauses


def build_order_by(filters: SearchFilters) -> List[ColumnElement]:
    if filters.sort == SORT_YEAR_DESC:
        return [ArticleRow.pub_year.desc(), ArticleRow.pmid.asc()]
    if filters.sort == SORT_YEAR_ASC:
        return [ArticleRow.pub_year.asc(), ArticleRow.pmid.asc()]
    # relevance: title hits first, then everything else
    if filters.query:
        title_hit = ArticleRow.title_lower.contains(filters.query.lower(), autoescape=True)
        return [case((title_hit, 1), else_=2), ArticleRow.pmid.asc()]
    return [ArticleRow.pmid.asc()]


def page_window(filters: SearchFilters) -> PageWindow:
    return PageWindow(limit=filters.page_size, offset=(filters.page - 1) * filters.page_size)
