# pubmed_api/api/articles.py
from fastapi import APIRouter, Depends, Query
from typing import Optional

from pubmed_api.config import Settings
from pubmed_api.core.deps import get_article_service, get_settings
from pubmed_api.models.schemas import Article, SearchResult, Stats
from pubmed_api.services.articles import ArticleService, parse_search_filters

router = APIRouter(prefix="/v1", tags=["articles"])


# Numeric params are taken as strings: unparseable values fall back to
# defaults instead of failing validation with 422.
@router.get("/articles", response_model=SearchResult,
            summary="Search articles with filters, pagination and sorting")
async def api_search_articles(
    q: Optional[str] = Query(None, description="Case-insensitive substring of title or abstract"),
    year: Optional[str] = Query(None, description="Exact publication year"),
    journal: Optional[str] = Query(None, description="Exact journal name"),
    author: Optional[str] = Query(None, description="Substring of the author list"),
    page: Optional[str] = Query(None, description="Page number, from 1"),
    page_size: Optional[str] = Query(None, description="Items per page, 1..50"),
    sort: Optional[str] = Query(None, description="relevance | year_desc | year_asc"),
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_settings),
) -> SearchResult:
    filters = parse_search_filters({
        "q": q, "year": year, "journal": journal, "author": author,
        "page": page, "page_size": page_size, "sort": sort,
    })
    return await service.search_articles(filters, timeout=settings.request_timeout_s)


@router.get("/articles/{pmid}", response_model=Article,
            summary="Single article by PubMed ID")
async def api_get_article(
    pmid: str,
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_settings),
) -> Article:
    return await service.get_article(pmid, timeout=settings.request_timeout_s)


@router.get("/stats", response_model=Stats,
            summary="Top journals and publication year histogram")
async def api_get_stats(
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_settings),
) -> Stats:
    return await service.get_stats(timeout=settings.request_timeout_s)
