# erp/db/engine.py
# Engine factory: postgres gets pool_pre_ping + application_name, sqlite never gets server settings
import re
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

__all__ = ["create_async_engine_safe", "normalize_async_dsn"]


def normalize_async_dsn(url: str) -> str:
    """Map plain / asyncpg DSNs onto psycopg3, and sqlite onto aiosqlite."""
    url = url.strip()
    if (url.startswith('"') and url.endswith('"')) or (url.startswith("'") and url.endswith("'")):
        url = url[1:-1].strip()

    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite://" + url[len("sqlite:///") - 1 :]
    if url.startswith("postgresql+asyncpg://") or url.startswith("postgres+asyncpg://"):
        return re.sub(r"^postgres(?:ql)?\+asyncpg://", "postgresql+psycopg://", url)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _engine_kwargs_for(url_str: str, echo: bool) -> dict[str, Any]:
    u = make_url(url_str)
    backend = u.get_backend_name()

    kwargs: dict[str, Any] = {"echo": echo}
    if backend.startswith("postgresql"):
        kwargs["pool_pre_ping"] = True
        kwargs["connect_args"] = {"application_name": "inventory-erp"}
    elif backend.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    return kwargs


def create_async_engine_safe(url_str: str, *, echo: bool = False, **extra: Any) -> AsyncEngine:
    """Async engine for 'postgresql+psycopg' or 'sqlite+aiosqlite'."""
    url_str = normalize_async_dsn(url_str)
    kwargs = _engine_kwargs_for(url_str, echo)
    kwargs.update(extra)
    return create_async_engine(url_str, **kwargs)
