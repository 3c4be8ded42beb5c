from __future__ import annotations

from fastapi import Request

from pubmed_api.config import Settings
from pubmed_api.services.articles import ArticleService


def get_article_service(request: Request) -> ArticleService:
    service = getattr(request.app.state, "article_service", None)
    if service is None:
        raise RuntimeError("Article service is not initialized. Is the app lifespan running?")
    return service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
