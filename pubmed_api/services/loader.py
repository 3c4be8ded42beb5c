from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import ValidationError

from pubmed_api.config import Settings
from pubmed_api.core.errors import LoadError
from pubmed_api.models.schemas import Article
from pubmed_api.repositories.base import ArticleRepository
from pubmed_api.services.embedded_data import EMBEDDED_ARTICLES_JSONL


logger = logging.getLogger("pubmed_api.loader")


def parse_jsonl(data: Union[str, bytes]) -> List[Article]:
    """Parse one article per non-blank line. Any bad line fails the whole batch."""
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LoadError("article data is not valid UTF-8", operation="parse_jsonl") from exc
    articles: List[Article] = []
    for lineno, line in enumerate(data.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            articles.append(Article.model_validate_json(line))
        except ValidationError as exc:
            raise LoadError(f"malformed article record on line {lineno}", operation="parse_jsonl") from exc
    return articles


def read_source(settings: Settings) -> Tuple[str, Union[str, bytes]]:
    """Return (source name, raw JSONL): local file first, then the embedded fallback."""
    path = Path(settings.data_path)
    if path.is_file():
        try:
            return "local file", path.read_bytes()
        except OSError as exc:
            logger.warning(
                "Failed to read local data file, falling back",
                extra={"event": "data_file_unreadable", "path": str(path), "error": str(exc)},
            )
    logger.info("Using embedded fallback data", extra={"event": "data_embedded_fallback"})
    return "embedded", EMBEDDED_ARTICLES_JSONL


async def load_articles(repository: ArticleRepository, settings: Settings) -> int:
    source, raw = read_source(settings)
    logger.info("Loading articles", extra={"event": "articles_loading", "source": source})
    articles = parse_jsonl(raw)
    count = await repository.upsert_many(articles)
    logger.info(
        "Articles loaded successfully",
        extra={"event": "articles_loaded", "source": source, "count": count},
    )
    return count
