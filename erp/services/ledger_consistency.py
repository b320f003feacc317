# erp/services/ledger_consistency.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.inventory import InventoryRecord
from erp.models.transaction import TransactionLineItem, TransactionRecord
from erp.models.warehouse import Warehouse


@dataclass(frozen=True)
class LedgerMismatch:
    warehouse_id: int
    item_id: int
    ledger_qty: int
    stock_qty: int


async def find_ledger_mismatches(session: AsyncSession, *, company_id: int) -> List[LedgerMismatch]:
    """
    Compare, per (warehouse, item), the summed ledger deltas with the on-hand quantity.

    The engine is the only writer of both tables, so any difference means a row
    was changed outside it. Pairs present on one side only are compared against 0.
    """
    ledger_stmt = (
        select(
            TransactionLineItem.warehouse_id,
            TransactionLineItem.item_id,
            func.sum(TransactionLineItem.delta),
        )
        .join(TransactionRecord, TransactionRecord.id == TransactionLineItem.transaction_id)
        .where(TransactionRecord.company_id == int(company_id))
        .group_by(TransactionLineItem.warehouse_id, TransactionLineItem.item_id)
    )
    stock_stmt = (
        select(InventoryRecord.warehouse_id, InventoryRecord.item_id, InventoryRecord.quantity)
        .join(Warehouse, Warehouse.id == InventoryRecord.warehouse_id)
        .where(Warehouse.company_id == int(company_id))
    )

    ledger = {(int(w), int(i)): int(q or 0) for w, i, q in (await session.execute(ledger_stmt)).all()}
    stock = {(int(w), int(i)): int(q or 0) for w, i, q in (await session.execute(stock_stmt)).all()}

    out: List[LedgerMismatch] = []
    for key in sorted(set(ledger) | set(stock)):
        lq, sq = ledger.get(key, 0), stock.get(key, 0)
        if lq != sq:
            out.append(LedgerMismatch(warehouse_id=key[0], item_id=key[1], ledger_qty=lq, stock_qty=sq))
    return out
