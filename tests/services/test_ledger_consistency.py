# tests/services/test_ledger_consistency.py
from __future__ import annotations

import pytest
from sqlalchemy import update

from erp.jobs.maintenance import run_inventory_guard
from erp.models import InventoryRecord
from erp.services.ledger_consistency import LedgerMismatch, find_ledger_mismatches
from erp.services.transaction_service import LineRequest


@pytest.mark.asyncio
async def test_engine_writes_keep_ledger_and_stock_equal(session, svc, seed):
    await svc.create_transaction(
        session,
        type="INBOUND",
        lines=[LineRequest(seed.main_wh, seed.widget, 40), LineRequest(seed.annex_wh, seed.bolt, 9)],
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )
    await svc.create_transaction(
        session,
        type="OUTBOUND",
        lines=[LineRequest(seed.main_wh, seed.widget, 15)],
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )
    await svc.transfer_inventory(
        session,
        from_warehouse_id=seed.main_wh,
        to_warehouse_id=seed.annex_wh,
        item_id=seed.widget,
        quantity=5,
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )

    assert await find_ledger_mismatches(session, company_id=seed.company_id) == []


@pytest.mark.asyncio
async def test_out_of_band_edit_is_reported(session, svc, seed, put_stock):
    await svc.create_transaction(
        session,
        type="INBOUND",
        lines=[LineRequest(seed.main_wh, seed.widget, 10)],
        actor_id=seed.actor_id,
        company_id=seed.company_id,
    )
    await session.execute(
        update(InventoryRecord)
        .where(InventoryRecord.warehouse_id == seed.main_wh, InventoryRecord.item_id == seed.widget)
        .values(quantity=12)
    )
    await session.commit()
    await put_stock(seed.annex_wh, seed.bolt, 3)

    found = await find_ledger_mismatches(session, company_id=seed.company_id)

    assert found == [
        LedgerMismatch(warehouse_id=seed.main_wh, item_id=seed.widget, ledger_qty=10, stock_qty=12),
        LedgerMismatch(warehouse_id=seed.annex_wh, item_id=seed.bolt, ledger_qty=0, stock_qty=3),
    ]


@pytest.mark.asyncio
async def test_guard_job_groups_by_company(session, seed, put_stock):
    await put_stock(seed.foreign_wh, seed.gadget, 1)

    found = await run_inventory_guard(session)

    assert list(found) == [seed.other_company_id]
    assert found[seed.other_company_id][0].stock_qty == 1
