# erp/services/tenant_guard.py
"""
Tenant-scoped existence checks that run before any stock row is touched.

Every lookup takes the company id explicitly; a row owned by another
company, or soft-deleted, is reported exactly like a missing one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.item import Item
from erp.models.warehouse import Warehouse
from erp.services.errors import NotFoundError


@dataclass
class ValidatedRefs:
    warehouses: Dict[int, Warehouse] = field(default_factory=dict)
    items: Dict[int, Item] = field(default_factory=dict)


async def get_warehouse_for_tenant(
    session: AsyncSession,
    warehouse_id: int,
    company_id: int,
    *,
    lock: bool = False,
) -> Warehouse:
    stmt = select(Warehouse).where(
        Warehouse.id == int(warehouse_id),
        Warehouse.company_id == int(company_id),
        Warehouse.deleted_at.is_(None),
    )
    if lock:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    wh = (await session.execute(stmt)).scalar_one_or_none()
    if wh is None:
        raise NotFoundError(
            f"Warehouse with ID {warehouse_id} not found",
            context={"warehouse_id": warehouse_id},
        )
    return wh


async def get_item_for_tenant(session: AsyncSession, item_id: int, company_id: int) -> Item:
    stmt = select(Item).where(
        Item.id == int(item_id),
        Item.company_id == int(company_id),
        Item.deleted_at.is_(None),
    )
    item = (await session.execute(stmt)).scalar_one_or_none()
    if item is None:
        raise NotFoundError(f"Item with ID {item_id} not found", context={"item_id": item_id})
    return item


async def validate_pairs(
    session: AsyncSession,
    company_id: int,
    pairs: Iterable[Tuple[int, int]],
) -> ValidatedRefs:
    """
    Check each (warehouse_id, item_id) pair in input order, warehouse first.
    The first miss aborts the whole call; already-seen ids are not re-queried.
    """
    refs = ValidatedRefs()
    for warehouse_id, item_id in pairs:
        if warehouse_id not in refs.warehouses:
            refs.warehouses[warehouse_id] = await get_warehouse_for_tenant(
                session, warehouse_id, company_id
            )
        if item_id not in refs.items:
            refs.items[item_id] = await get_item_for_tenant(session, item_id, company_id)
    return refs


async def lock_warehouses(
    session: AsyncSession,
    warehouse_ids: Sequence[int],
    company_id: int,
) -> Dict[int, Warehouse]:
    """
    Take row locks (SELECT ... FOR UPDATE) on the given warehouses in ascending
    id order. Capacity checks for a warehouse only run while its lock is held.
    """
    locked: Dict[int, Warehouse] = {}
    for wid in sorted(set(int(w) for w in warehouse_ids)):
        locked[wid] = await get_warehouse_for_tenant(session, wid, company_id, lock=True)
    return locked
