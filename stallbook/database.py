"""Async database engine, session factory and declarative base."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from stallbook.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""


def utcnow() -> datetime:
    """Timezone-aware current timestamp used for model defaults."""
    return datetime.now(UTC)


def get_engine(database_url: str | None = None):
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False, future=True)
    return create_async_engine(
        url,
        echo=False,
        future=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )


def get_session(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


engine = get_engine()
AsyncSessionLocal = get_session(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session per request.

    Services commit their own unit of work; anything left open when the
    request fails is rolled back here.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables directly (development only; production uses alembic)."""
    import stallbook.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
