import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for `import pubmed_api`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from fastapi.testclient import TestClient

from pubmed_api.config import Settings
from pubmed_api.db.sa import build_engine, build_sessionmaker, create_schema
from pubmed_api.models.schemas import Article
from pubmed_api.repositories.sql import SQLArticleRepository
from tests.factories import make_article


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def scenario_articles() -> list[Article]:
    return [
        make_article("1", title="Ibuprofen study", journal="Medical Journal", pub_year=2020),
        make_article("2", title="Acetaminophen research", journal="Medical Journal", pub_year=2021),
    ]


@pytest.fixture()
async def engine():
    eng = build_engine("sqlite+aiosqlite:///:memory:")
    await create_schema(eng)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture()
async def repository(engine) -> SQLArticleRepository:
    return SQLArticleRepository(build_sessionmaker(engine))


@pytest.fixture()
def settings(tmp_path) -> Settings:
    # Points at a missing file so the embedded dataset is loaded
    return Settings(
        data_path=str(tmp_path / "missing.jsonl"),
        database_url="sqlite+aiosqlite:///:memory:",
        request_timeout_s=5.0,
    )


@pytest.fixture()
def app(settings):
    from pubmed_api.main import create_app

    application = create_app(settings)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
