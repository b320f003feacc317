# erp/services/ledger_writer.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from erp.models.enums import TransactionType
from erp.models.transaction import TransactionLineItem, TransactionRecord
from erp.services.stock_mutation import StockMove


async def write_transaction(
    session: AsyncSession,
    *,
    type: TransactionType,
    company_id: int,
    created_by: int,
    moves: Sequence[StockMove],
    note: Optional[str] = None,
    occurred_at: Optional[datetime] = None,
) -> int:
    """
    Append one ledger entry plus its lines inside the caller's open unit of work.

    - lines are numbered 1..n in the order the moves were applied
    - delta / after_qty are copied from the move, so the ledger states exactly
      the stock change that was written next to it
    - no commit here: the caller's unit commits ledger and stock together

    Returns the new transaction id.
    """
    if not moves:
        raise ValueError("a ledger entry needs at least one line")

    record = TransactionRecord(
        company_id=int(company_id),
        type=TransactionType(type).value,
        note=note,
        created_by=int(created_by),
    )
    if occurred_at is not None:
        record.created_at = occurred_at
    session.add(record)
    await session.flush()

    for line_no, move in enumerate(moves, start=1):
        session.add(
            TransactionLineItem(
                transaction_id=record.id,
                line_no=line_no,
                warehouse_id=move.warehouse_id,
                item_id=move.item_id,
                role=move.role.value,
                quantity=move.quantity,
                delta=move.delta,
                after_qty=move.after,
            )
        )
    await session.flush()
    return int(record.id)


def with_display_data(stmt):
    return stmt.options(
        selectinload(TransactionRecord.creator),
        selectinload(TransactionRecord.lines).selectinload(TransactionLineItem.warehouse),
        selectinload(TransactionRecord.lines).selectinload(TransactionLineItem.item),
    )


async def load_transaction(
    session: AsyncSession, transaction_id: int, company_id: int
) -> Optional[TransactionRecord]:
    """Ledger entry with warehouse / item / creator display data eagerly loaded."""
    stmt = with_display_data(
        select(TransactionRecord).where(
            TransactionRecord.id == int(transaction_id),
            TransactionRecord.company_id == int(company_id),
        )
    ).execution_options(populate_existing=True)
    return (await session.execute(stmt)).scalar_one_or_none()
