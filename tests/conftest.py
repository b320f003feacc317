# tests/conftest.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# settings are read once; pin them before anything imports erp.main
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("NOTIFY_IN_BACKGROUND", "false")

from erp.db.base import Base, init_models  # noqa: E402
from erp.models import Company, InventoryRecord, Item, User, Warehouse  # noqa: E402
from erp.services.notification_dispatcher import NotificationDispatcher  # noqa: E402
from erp.services.transaction_service import TransactionService  # noqa: E402

UTC = timezone.utc


@dataclass(frozen=True)
class Seed:
    """
    Two tenants:

    company 1: users 1 (actor) + 2 (coworker)
               warehouses 1 "Main WH" cap 1000, 2 "Annex" cap 500, 4 "Closed" (soft-deleted)
               items 1 Widget (EA), 2 Bolt (PCS)
    company 2: user 3, warehouse 3 "Foreign WH", item 3 Gadget
    """

    company_id: int = 1
    other_company_id: int = 2
    actor_id: int = 1
    coworker_id: int = 2
    other_user_id: int = 3
    main_wh: int = 1
    annex_wh: int = 2
    foreign_wh: int = 3
    closed_wh: int = 4
    widget: int = 1
    bolt: int = 2
    gadget: int = 3


# =========================================
# One in-memory database per test
# =========================================
@pytest_asyncio.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    init_models()
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def async_session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def seed(async_session_maker) -> Seed:
    s = Seed()
    async with async_session_maker() as sess:
        sess.add_all(
            [
                Company(id=1, name="Acme Logistics"),
                Company(id=2, name="Other Corp"),
            ]
        )
        await sess.flush()
        sess.add_all(
            [
                User(id=1, company_id=1, name="Alice", email="alice@acme.test", role="ADMIN"),
                User(id=2, company_id=1, name="Bob", email="bob@acme.test"),
                User(id=3, company_id=2, name="Carol", email="carol@other.test"),
                Warehouse(id=1, company_id=1, name="Main WH", location="Seoul", capacity=1000),
                Warehouse(id=2, company_id=1, name="Annex", location="Busan", capacity=500),
                Warehouse(id=3, company_id=2, name="Foreign WH", capacity=1000),
                Warehouse(
                    id=4,
                    company_id=1,
                    name="Closed",
                    capacity=1000,
                    deleted_at=datetime(2026, 1, 1, tzinfo=UTC),
                ),
                Item(id=1, company_id=1, sku="WID-001", name="Widget", unit_of_measure="EA"),
                Item(id=2, company_id=1, sku="BLT-002", name="Bolt", unit_of_measure="PCS"),
                Item(id=3, company_id=2, sku="GAD-003", name="Gadget", unit_of_measure="EA"),
            ]
        )
        await sess.commit()
    return s


@pytest_asyncio.fixture(scope="function")
async def session(async_session_maker, seed) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as sess:
        try:
            yield sess
        finally:
            if sess.in_transaction():
                await sess.rollback()


@pytest.fixture
def dispatcher(async_session_maker) -> NotificationDispatcher:
    """Inline dispatcher: still post-commit and non-raising, but awaited for determinism."""
    return NotificationDispatcher(async_session_maker, background=False)


@pytest.fixture
def svc(dispatcher) -> TransactionService:
    return TransactionService(dispatcher=dispatcher)


# =========================================
# Read helpers (always a fresh session)
# =========================================
@pytest.fixture
def stock_qty(async_session_maker):
    async def _qty(warehouse_id: int, item_id: int) -> Optional[int]:
        async with async_session_maker() as sess:
            rec = (
                await sess.execute(
                    select(InventoryRecord).where(
                        InventoryRecord.warehouse_id == warehouse_id,
                        InventoryRecord.item_id == item_id,
                    )
                )
            ).scalar_one_or_none()
            return None if rec is None else int(rec.quantity)

    return _qty


@pytest.fixture
def put_stock(async_session_maker):
    """Seed an on-hand balance directly (bypasses the engine, no ledger line)."""

    async def _put(warehouse_id: int, item_id: int, quantity: int) -> None:
        async with async_session_maker() as sess:
            sess.add(InventoryRecord(warehouse_id=warehouse_id, item_id=item_id, quantity=quantity))
            await sess.commit()

    return _put


# =========================================
# HTTP client against the FastAPI app
# =========================================
@pytest_asyncio.fixture
async def client(async_session_maker, dispatcher, seed) -> AsyncGenerator[httpx.AsyncClient, None]:
    from erp.api.deps import get_async_session
    from erp.main import app

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as sess:
            yield sess

    app.dependency_overrides[get_async_session] = _override_session
    app.state.notification_dispatcher = dispatcher
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        app.state.notification_dispatcher = None


@pytest.fixture
def actor_headers():
    def _headers(user_id: int = 1, company_id: int = 1) -> dict:
        return {"X-User-Id": str(user_id), "X-Company-Id": str(company_id)}

    return _headers


@pytest.fixture
def tx_count(async_session_maker):
    from sqlalchemy import func

    from erp.models import TransactionRecord

    async def _count() -> int:
        async with async_session_maker() as sess:
            return int(
                (await sess.execute(select(func.count(TransactionRecord.id)))).scalar_one()
            )

    return _count
