# erp/services/stock_mutation.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.enums import LineRole
from erp.models.inventory import InventoryRecord
from erp.models.item import Item
from erp.models.warehouse import Warehouse
from erp.services.errors import (
    BadRequestError,
    CapacityExceededError,
    InsufficientStockError,
    MissingInventoryError,
)


@dataclass(frozen=True)
class StockMove:
    """Result of one applied line; the ledger writer turns it into a TransactionLineItem."""

    warehouse_id: int
    item_id: int
    role: LineRole
    quantity: int
    before: int
    after: int

    @property
    def delta(self) -> int:
        return self.role.signed(self.quantity)


async def _find_record(
    session: AsyncSession, warehouse_id: int, item_id: int
) -> Optional[InventoryRecord]:
    stmt = (
        select(InventoryRecord)
        .where(
            InventoryRecord.warehouse_id == int(warehouse_id),
            InventoryRecord.item_id == int(item_id),
        )
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def warehouse_total(session: AsyncSession, warehouse_id: int) -> int:
    """Summed on-hand quantity across every item in the warehouse."""
    stmt = select(func.coalesce(func.sum(InventoryRecord.quantity), 0)).where(
        InventoryRecord.warehouse_id == int(warehouse_id)
    )
    return int((await session.execute(stmt)).scalar_one())


def require_whole_quantity(quantity: Any, *, field: str = "quantity") -> int:
    """Positive whole number, or BadRequestError. 2.0 passes as 2; 2.7, True and "3" do not."""
    try:
        q = int(quantity)
    except (TypeError, ValueError, OverflowError):
        q = None
    if isinstance(quantity, bool) or q is None or q != quantity or q <= 0:
        raise BadRequestError(
            f"Quantity must be a positive integer ({field}), got {quantity}",
            context={"field": field, "quantity": str(quantity)},
        )
    return q


async def apply_inbound(
    session: AsyncSession,
    *,
    warehouse: Warehouse,
    item: Item,
    quantity: int,
    now: datetime,
    role: LineRole = LineRole.INBOUND,
) -> StockMove:
    """
    Add stock to (warehouse, item):

    - no record yet → create one at 0 (flushed, so the unique key is claimed now)
    - projected warehouse total = total - current + new; above capacity → CapacityExceededError
    - writes the new quantity and refreshes last_restocked_at
    The caller must hold the warehouse row lock.
    """
    q = require_whole_quantity(quantity)

    rec = await _find_record(session, warehouse.id, item.id)
    if rec is None:
        rec = InventoryRecord(
            warehouse_id=warehouse.id,
            item_id=item.id,
            quantity=0,
            last_restocked_at=now,
        )
        session.add(rec)
        await session.flush()

    current = int(rec.quantity)
    new_qty = current + role.signed(q)

    total = await warehouse_total(session, warehouse.id)
    capacity = int(warehouse.capacity)
    projected = total - current + new_qty
    if projected > capacity:
        # free room right now; the line's own current quantity is not added back
        available = capacity - total
        raise CapacityExceededError(
            f"Warehouse capacity exceeded. Available capacity: {available}, requested: {q}",
            context={
                "warehouse_id": warehouse.id,
                "item_id": item.id,
                "capacity": capacity,
                "available": available,
                "requested": q,
            },
        )

    rec.quantity = new_qty
    rec.last_restocked_at = now
    await session.flush()

    return StockMove(
        warehouse_id=warehouse.id,
        item_id=item.id,
        role=role,
        quantity=q,
        before=current,
        after=new_qty,
    )


async def apply_outbound(
    session: AsyncSession,
    *,
    warehouse: Warehouse,
    item: Item,
    quantity: int,
    role: LineRole = LineRole.OUTBOUND,
) -> StockMove:
    """
    Remove stock from (warehouse, item):

    - no record → MissingInventoryError (nothing to remove)
    - current - quantity < 0 → InsufficientStockError with available vs requested
    last_restocked_at is left untouched.
    """
    q = require_whole_quantity(quantity)

    rec = await _find_record(session, warehouse.id, item.id)
    if rec is None:
        raise MissingInventoryError(
            f"Cannot remove stock that doesn't exist: item {item.id} has no inventory "
            f"in warehouse {warehouse.id}",
            context={"warehouse_id": warehouse.id, "item_id": item.id, "requested": q},
        )

    current = int(rec.quantity)
    new_qty = current + role.signed(q)
    if new_qty < 0:
        raise InsufficientStockError(
            f"Insufficient stock. Available: {current}, requested: {q}",
            context={
                "warehouse_id": warehouse.id,
                "item_id": item.id,
                "available": current,
                "requested": q,
            },
        )

    rec.quantity = new_qty
    await session.flush()

    return StockMove(
        warehouse_id=warehouse.id,
        item_id=item.id,
        role=role,
        quantity=q,
        before=current,
        after=new_qty,
    )
