# erp/db/session.py
# Async engine + session factory, and the FastAPI session dependency
from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from erp.core.config import get_settings
from erp.db.engine import create_async_engine_safe


@lru_cache
def get_async_engine() -> AsyncEngine:
    settings = get_settings()
    return create_async_engine_safe(settings.DATABASE_URL, echo=settings.SQL_ECHO)


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session


async def close_engines() -> None:
    await get_async_engine().dispose()
