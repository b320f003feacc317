# erp/services/transaction_query.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.enums import TransactionType
from erp.models.transaction import TransactionLineItem, TransactionRecord
from erp.services.errors import BadRequestError, NotFoundError
from erp.services.ledger_writer import load_transaction, with_display_data

MAX_PAGE_SIZE = 100


async def list_transactions(
    session: AsyncSession,
    *,
    company_id: int,
    type: Optional[Union[str, TransactionType]] = None,
    warehouse_id: Optional[int] = None,
    item_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    page: int = 1,
    limit: int = 20,
) -> List[TransactionRecord]:
    """
    Ledger page for one company, newest first.

    warehouse_id / item_id match when any line of the entry touches them,
    so a transfer shows up for both of its warehouses.
    """
    if page < 1 or limit < 1:
        raise BadRequestError("page and limit must be >= 1", context={"page": page, "limit": limit})
    limit = min(int(limit), MAX_PAGE_SIZE)

    stmt = select(TransactionRecord).where(TransactionRecord.company_id == int(company_id))

    if type is not None:
        try:
            stmt = stmt.where(TransactionRecord.type == TransactionType(type).value)
        except ValueError:
            raise BadRequestError(
                f"Unsupported transaction type: {type}", context={"type": str(type)}
            ) from None

    line_filters = []
    if warehouse_id is not None:
        line_filters.append(TransactionLineItem.warehouse_id == int(warehouse_id))
    if item_id is not None:
        line_filters.append(TransactionLineItem.item_id == int(item_id))
    if line_filters:
        matching = select(TransactionLineItem.transaction_id).where(*line_filters)
        stmt = stmt.where(TransactionRecord.id.in_(matching))

    if start is not None:
        stmt = stmt.where(TransactionRecord.created_at >= start)
    if end is not None:
        stmt = stmt.where(TransactionRecord.created_at <= end)

    stmt = (
        with_display_data(stmt)
        .order_by(TransactionRecord.created_at.desc(), TransactionRecord.id.desc())
        .offset((int(page) - 1) * limit)
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_transaction(
    session: AsyncSession, *, transaction_id: int, company_id: int
) -> TransactionRecord:
    record = await load_transaction(session, transaction_id, company_id)
    if record is None:
        raise NotFoundError(
            f"Transaction with ID {transaction_id} not found",
            context={"transaction_id": transaction_id},
        )
    return record
