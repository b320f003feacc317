# erp/services/inventory_query.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from erp.models.inventory import InventoryRecord
from erp.services.tenant_guard import get_warehouse_for_tenant


@dataclass(frozen=True)
class WarehouseStock:
    warehouse_id: int
    name: str
    capacity: int
    used: int

    @property
    def available(self) -> int:
        return self.capacity - self.used


async def list_for_warehouse(
    session: AsyncSession, *, warehouse_id: int, company_id: int
) -> Tuple[WarehouseStock, List[InventoryRecord]]:
    """Inventory rows of one warehouse (item data loaded) plus its capacity usage."""
    wh = await get_warehouse_for_tenant(session, warehouse_id, company_id)

    stmt = (
        select(InventoryRecord)
        .where(InventoryRecord.warehouse_id == wh.id)
        .options(selectinload(InventoryRecord.item))
        .order_by(InventoryRecord.updated_at.desc(), InventoryRecord.id.desc())
    )
    rows = list((await session.execute(stmt)).scalars().all())

    summary = WarehouseStock(
        warehouse_id=wh.id,
        name=wh.name,
        capacity=int(wh.capacity),
        used=sum(int(r.quantity) for r in rows),
    )
    return summary, rows
