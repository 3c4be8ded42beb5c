from contextlib import asynccontextmanager

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pubmed_api import __version__
from pubmed_api.api import articles
from pubmed_api.api import health
from pubmed_api.config import Settings, load_settings
from pubmed_api.core.errors import ArticleError
from pubmed_api.db.sa import close_sa_engine, init_sa_engine
from pubmed_api.repositories.sql import SQLArticleRepository
from pubmed_api.services.articles import ArticleService
from pubmed_api.services.loader import load_articles


logger = logging.getLogger("pubmed_api.http")

ERROR_STATUS = {
    "not_found": 404,
    "invalid_argument": 400,
    "cancelled": 504,
    "internal": 500,
}

# Only these messages reach the caller; details stay in the server log
PUBLIC_MESSAGES = {
    "not_found": "article not found",
    "cancelled": "request cancelled",
    "internal": "internal server error",
}


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.logging_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = time.monotonic()
        sessionmaker = await init_sa_engine(settings.database_url)
        repository = SQLArticleRepository(sessionmaker)
        await load_articles(repository, settings)
        app.state.article_service = ArticleService(repository)
        logger.info(
            "Starting pubmed-api",
            extra={"event": "startup", "version": __version__, "port": settings.port},
        )
        try:
            yield
        finally:
            logger.info("Shutting down", extra={"event": "shutdown"})
            await close_sa_engine()

    app = FastAPI(
        title="PubMed Article API",
        version=__version__,
        lifespan=lifespan,
        root_path=settings.root_path,
    )
    app.state.settings = settings
    app.include_router(health.router)
    app.include_router(articles.router)

    @app.exception_handler(ArticleError)
    async def article_error_handler(request: Request, exc: ArticleError) -> JSONResponse:
        status_code = ERROR_STATUS.get(exc.kind, 500)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Request failed",
            extra={"event": "request_failed", "path": request.url.path, "error": str(exc), **exc.log_context()},
            exc_info=exc if status_code == 500 else None,
        )
        message = PUBLIC_MESSAGES.get(exc.kind, exc.message)
        return JSONResponse(status_code=status_code, content={"error": message, "kind": exc.kind})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start = time.perf_counter()
        logger.info(
            "request started",
            extra={"event": "request_started", "request_id": request_id, "method": request.method,
                   "path": request.url.path, "remote_addr": request.client.host if request.client else None},
        )
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
        finally:
            logger.info(
                "request completed",
                extra={"event": "request_completed", "request_id": request_id, "method": request.method,
                       "path": request.url.path, "status": status_code,
                       "duration_ms": int((time.perf_counter() - start) * 1000)},
            )
        return response

    return app


settings = load_settings()
configure_logging(settings)
app = create_app(settings)
