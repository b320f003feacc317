# alembic/env.py
from __future__ import annotations

import os
import re
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection
from sqlalchemy.pool import NullPool

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from erp.db.base import Base, init_models  # noqa: E402

_DRV_RE = re.compile(r"\+asyncpg\b|\+psycopg2\b|\+pg8000\b", re.I)


def normalize_sync_url(url: str) -> str:
    """Migrations run on a sync engine: psycopg for postgres, pysqlite for sqlite."""
    url = _DRV_RE.sub("+psycopg", url)
    url = re.sub(r"^postgres://", "postgresql+psycopg://", url, flags=re.I)
    if url.lower().startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("sqlite+aiosqlite://"):
        url = url.replace("sqlite+aiosqlite://", "sqlite://", 1)
    return url


def get_url() -> str:
    """
    Priority:
      1. ERP_MIGRATION_DATABASE_URL
      2. DATABASE_URL
      3. sqlalchemy.url in alembic.ini
    """
    url = (
        os.getenv("ERP_MIGRATION_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or config.get_main_option("sqlalchemy.url")
    )
    if not url:
        raise RuntimeError(
            "Alembic cannot determine the database URL: set DATABASE_URL "
            "or sqlalchemy.url in alembic.ini"
        )
    url = url.strip()
    if (url.startswith('"') and url.endswith('"')) or (url.startswith("'") and url.endswith("'")):
        url = url[1:-1].strip()
    return normalize_sync_url(url)


def include_object(
    obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any
) -> bool:
    # objects only present in the DB never produce drops
    if reflected and compare_to is None:
        return False
    return True


def run_migrations_offline() -> None:
    init_models()
    context.configure(
        url=get_url(),
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    init_models()
    engine = create_engine(get_url(), poolclass=NullPool, future=True)

    with engine.connect() as connection:  # type: Connection
        context.configure(
            connection=connection,
            target_metadata=Base.metadata,
            compare_type=True,
            include_object=include_object,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
