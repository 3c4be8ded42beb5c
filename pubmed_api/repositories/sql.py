from __future__ import annotations

import json
import logging
import time
from typing import Dict, Iterable, List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubmed_api.core.errors import Internal, NotFound
from pubmed_api.db.sa import session_scope
from pubmed_api.models.article_models import ArticleRow
from pubmed_api.models.schemas import Article, JournalCount, SearchFilters, SearchResult, Stats
from pubmed_api.repositories.base import ArticleRepository
from pubmed_api.repositories.query import build_order_by, build_predicate, page_window


logger = logging.getLogger("pubmed_api.repository")

TOP_JOURNALS_LIMIT = 5


def _to_row(article: Article) -> ArticleRow:
    return ArticleRow(
        pmid=article.pmid,
        title=article.title,
        abstract=article.abstract,
        authors=json.dumps(article.authors, ensure_ascii=False),
        journal=article.journal,
        pub_year=article.pub_year,
        mesh_terms=json.dumps(article.mesh_terms, ensure_ascii=False),
        doi=article.doi,
        title_lower=article.title.lower(),
        search_text=(article.title + " " + article.abstract).lower(),
    )


def _from_row(row: ArticleRow, operation: str) -> Article:
    # ValidationError is a ValueError subclass
    try:
        return Article(
            pmid=row.pmid,
            title=row.title,
            abstract=row.abstract or "",
            authors=json.loads(row.authors),
            journal=row.journal,
            pub_year=row.pub_year,
            mesh_terms=json.loads(row.mesh_terms or "[]"),
            doi=row.doi,
        )
    except (TypeError, ValueError) as exc:
        raise Internal("failed to decode stored article", operation=operation, key=row.pmid) from exc


class SQLArticleRepository(ArticleRepository):
    """ArticleRepository over an async SQLAlchemy engine (SQLite or PostgreSQL)."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def get(self, pmid: str) -> Article:
        try:
            async with session_scope(self._sessionmaker) as session:
                row = await session.get(ArticleRow, pmid)
        except SQLAlchemyError as exc:
            raise Internal("failed to query article", operation="get", key=pmid) from exc
        if row is None:
            raise NotFound("article not found", operation="get", key=pmid)
        return _from_row(row, "get")

    async def search(self, filters: SearchFilters) -> SearchResult:
        started = time.perf_counter()
        predicate = build_predicate(filters)
        window = page_window(filters)

        count_stmt = select(func.count()).select_from(ArticleRow).where(*predicate)
        page_stmt = (
            select(ArticleRow)
            .where(*predicate)
            .order_by(*build_order_by(filters))
            .limit(window.limit)
            .offset(window.offset)
        )

        # Two independent reads; total may drift from the page under concurrent writes
        try:
            async with session_scope(self._sessionmaker) as session:
                total = (await session.execute(count_stmt)).scalar_one()
            rows: List[ArticleRow] = []
            if not window.beyond_storage:
                async with session_scope(self._sessionmaker) as session:
                    rows = list((await session.execute(page_stmt)).scalars().all())
        except SQLAlchemyError as exc:
            raise Internal("failed to search articles", operation="search") from exc

        items = [_from_row(r, "search") for r in rows]
        took_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(
            "Search executed",
            extra={"event": "search_executed", "total": total, "returned": len(items), "took_ms": took_ms},
        )
        return SearchResult(
            items=items,
            page=filters.page,
            page_size=filters.page_size,
            total=total,
            took_ms=took_ms,
        )

    async def stats(self) -> Stats:
        count_col = func.count().label("count")
        journals_stmt = (
            select(ArticleRow.journal, count_col)
            .group_by(ArticleRow.journal)
            .order_by(count_col.desc(), ArticleRow.journal.asc())
            .limit(TOP_JOURNALS_LIMIT)
        )
        years_stmt = (
            select(ArticleRow.pub_year, func.count())
            .where(ArticleRow.pub_year.is_not(None))
            .group_by(ArticleRow.pub_year)
            .order_by(ArticleRow.pub_year)
        )
        try:
            async with session_scope(self._sessionmaker) as session:
                journal_rows = (await session.execute(journals_stmt)).all()
                year_rows = (await session.execute(years_stmt)).all()
        except SQLAlchemyError as exc:
            raise Internal("failed to compute stats", operation="stats") from exc

        return Stats(
            top_journals=[JournalCount(journal=j, count=c) for j, c in journal_rows],
            year_histogram={int(y): int(c) for y, c in year_rows},
        )

    async def upsert_many(self, articles: Iterable[Article]) -> int:
        # Last occurrence wins when a batch repeats a pmid
        batch: Dict[str, Article] = {a.pmid: a for a in articles}
        rows: List[ArticleRow] = [_to_row(a) for a in batch.values()]
        try:
            async with session_scope(self._sessionmaker) as session:
                for row in rows:
                    await session.merge(row)
        # OverflowError: an integer the driver cannot bind
        except (SQLAlchemyError, OverflowError) as exc:
            raise Internal("failed to store articles", operation="upsert_many") from exc
        logger.info("Loaded articles", extra={"event": "articles_upserted", "count": len(rows)})
        return len(rows)
