from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from pubmed_api.db.base import Base


_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


def _to_sqlalchemy_async_dsn(dsn: str | None) -> str:
    if not dsn:
        raise RuntimeError("DATABASE_URL is not configured")
    # Ensure async dialects
    if dsn.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return dsn
    if dsn.startswith("postgresql://"):
        return dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
    if dsn.startswith("postgres://"):
        return dsn.replace("postgres://", "postgresql+asyncpg://", 1)
    if dsn.startswith("sqlite://"):
        return dsn.replace("sqlite://", "sqlite+aiosqlite://", 1)
    # Fallback: assume already usable
    return dsn


def build_engine(dsn: str) -> AsyncEngine:
    async_dsn = _to_sqlalchemy_async_dsn(dsn)
    if async_dsn.startswith("sqlite") and ":memory:" in async_dsn:
        # A single shared connection; each new one would open an empty database
        return create_async_engine(async_dsn, poolclass=StaticPool, future=True)
    return create_async_engine(async_dsn, pool_pre_ping=True, future=True)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    # Idempotent: CREATE TABLE / INDEX IF NOT EXISTS
    from pubmed_api.models import article_models  # noqa: F401 ensure model registration

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_sa_engine(dsn: str) -> async_sessionmaker[AsyncSession]:
    global _engine, _sessionmaker
    if _engine is None:
        _engine = build_engine(dsn)
        _sessionmaker = build_sessionmaker(_engine)
        await create_schema(_engine)
    return _sessionmaker


async def close_sa_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


@asynccontextmanager
async def session_scope(
    sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    factory = sessionmaker or _sessionmaker
    if factory is None:
        raise RuntimeError("SQLAlchemy engine is not initialized. Call init_sa_engine() first.")
    session = factory()
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise
    finally:
        await session.close()
