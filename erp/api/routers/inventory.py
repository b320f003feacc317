# erp/api/routers/inventory.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from erp.api.deps import Actor, get_actor, get_async_session
from erp.schemas.inventory import InventoryRow, WarehouseInventoryOut
from erp.services.inventory_query import list_for_warehouse

router = APIRouter(prefix="/warehouses", tags=["inventory"])


@router.get("/{warehouse_id}/inventory", response_model=WarehouseInventoryOut)
async def warehouse_inventory(
    warehouse_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> WarehouseInventoryOut:
    summary, rows = await list_for_warehouse(
        session, warehouse_id=warehouse_id, company_id=actor.company_id
    )
    return WarehouseInventoryOut(
        warehouse_id=summary.warehouse_id,
        name=summary.name,
        capacity=summary.capacity,
        used=summary.used,
        available=summary.available,
        rows=[InventoryRow.model_validate(r) for r in rows],
    )
