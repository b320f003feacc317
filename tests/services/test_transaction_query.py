# tests/services/test_transaction_query.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from erp.services.errors import BadRequestError, NotFoundError
from erp.services.transaction_query import get_transaction, list_transactions
from erp.services.transaction_service import LineRequest, TransactionService

UTC = timezone.utc


async def _inbound(svc, session, seed, wh, item, qty, company_id=None, actor_id=None):
    return await svc.create_transaction(
        session,
        type="INBOUND",
        lines=[LineRequest(wh, item, qty)],
        actor_id=actor_id or seed.actor_id,
        company_id=company_id or seed.company_id,
    )


@pytest.mark.asyncio
async def test_list_newest_first_with_display_data(session: AsyncSession, svc: TransactionService, seed):
    a = await _inbound(svc, session, seed, seed.main_wh, seed.widget, 10)
    b = await _inbound(svc, session, seed, seed.annex_wh, seed.bolt, 5)

    rows = await list_transactions(session, company_id=seed.company_id)

    assert [r.id for r in rows] == [b.id, a.id]
    assert rows[0].creator.name == "Alice"
    assert rows[0].lines[0].warehouse.name == "Annex"
    assert rows[0].lines[0].item.sku == "BLT-002"


@pytest.mark.asyncio
async def test_filters_by_type_warehouse_item(session: AsyncSession, svc: TransactionService, seed):
    inbound = await _inbound(svc, session, seed, seed.main_wh, seed.widget, 50)
    outbound = await svc.create_transaction(
        session,
        type="OUTBOUND",
        lines=[LineRequest(seed.main_wh, seed.widget, 5)],
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )
    other = await _inbound(svc, session, seed, seed.annex_wh, seed.bolt, 1)

    by_type = await list_transactions(session, company_id=seed.company_id, type="OUTBOUND")
    assert [r.id for r in by_type] == [outbound.id]

    by_wh = await list_transactions(session, company_id=seed.company_id, warehouse_id=seed.annex_wh)
    assert [r.id for r in by_wh] == [other.id]

    by_item = await list_transactions(session, company_id=seed.company_id, item_id=seed.widget)
    assert {r.id for r in by_item} == {inbound.id, outbound.id}


@pytest.mark.asyncio
async def test_transfer_listed_under_both_warehouses(
    session: AsyncSession, svc: TransactionService, seed, put_stock
):
    await put_stock(seed.main_wh, seed.widget, 10)
    t = await svc.transfer_inventory(
        session,
        from_warehouse_id=seed.main_wh,
        to_warehouse_id=seed.annex_wh,
        item_id=seed.widget,
        quantity=4,
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )

    for wh in (seed.main_wh, seed.annex_wh):
        rows = await list_transactions(session, company_id=seed.company_id, warehouse_id=wh)
        assert [r.id for r in rows] == [t.id]


@pytest.mark.asyncio
async def test_date_range(session: AsyncSession, svc: TransactionService, seed):
    record = await _inbound(svc, session, seed, seed.main_wh, seed.widget, 1)
    now = datetime.now(UTC)

    inside = await list_transactions(
        session, company_id=seed.company_id, start=now - timedelta(hours=1), end=now + timedelta(hours=1)
    )
    assert [r.id for r in inside] == [record.id]

    later = await list_transactions(session, company_id=seed.company_id, start=now + timedelta(hours=1))
    assert later == []


@pytest.mark.asyncio
async def test_pagination(session: AsyncSession, svc: TransactionService, seed):
    ids = []
    for q in range(1, 6):
        ids.append((await _inbound(svc, session, seed, seed.main_wh, seed.widget, q)).id)

    page1 = await list_transactions(session, company_id=seed.company_id, page=1, limit=2)
    page3 = await list_transactions(session, company_id=seed.company_id, page=3, limit=2)

    assert [r.id for r in page1] == [ids[4], ids[3]]
    assert [r.id for r in page3] == [ids[0]]


@pytest.mark.asyncio
async def test_bad_paging_and_type(session: AsyncSession, seed):
    with pytest.raises(BadRequestError):
        await list_transactions(session, company_id=seed.company_id, page=0)
    with pytest.raises(BadRequestError):
        await list_transactions(session, company_id=seed.company_id, type="RETURN")


@pytest.mark.asyncio
async def test_other_company_ledger_is_invisible(session: AsyncSession, svc: TransactionService, seed):
    foreign = await _inbound(
        svc,
        session,
        seed,
        seed.foreign_wh,
        seed.gadget,
        3,
        company_id=seed.other_company_id,
        actor_id=seed.other_user_id,
    )

    assert await list_transactions(session, company_id=seed.company_id) == []
    with pytest.raises(NotFoundError) as ei:
        await get_transaction(session, transaction_id=foreign.id, company_id=seed.company_id)
    assert ei.value.message == f"Transaction with ID {foreign.id} not found"

    own = await get_transaction(session, transaction_id=foreign.id, company_id=seed.other_company_id)
    assert own.lines[0].item.name == "Gadget"
