# erp/api/routers/transactions.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp.api.deps import Actor, get_actor, get_async_session, get_transaction_service
from erp.schemas.transaction import CreateTransactionIn, TransactionOut, TransferInventoryIn
from erp.services import transaction_query
from erp.services.transaction_service import LineRequest, TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    body: CreateTransactionIn,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
    svc: TransactionService = Depends(get_transaction_service),
) -> TransactionOut:
    record = await svc.create_transaction(
        session,
        type=body.type,
        lines=[LineRequest(i.warehouse_id, i.item_id, i.quantity) for i in body.items],
        note=body.notes,
        actor_id=actor.user_id,
        company_id=actor.company_id,
    )
    return TransactionOut.model_validate(record)


@router.post("/transfer", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def transfer_inventory(
    body: TransferInventoryIn,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
    svc: TransactionService = Depends(get_transaction_service),
) -> TransactionOut:
    record = await svc.transfer_inventory(
        session,
        from_warehouse_id=body.from_warehouse_id,
        to_warehouse_id=body.to_warehouse_id,
        item_id=body.item_id,
        quantity=body.quantity,
        note=body.notes,
        actor_id=actor.user_id,
        company_id=actor.company_id,
    )
    return TransactionOut.model_validate(record)


@router.get("", response_model=List[TransactionOut])
async def list_transactions(
    type: Optional[str] = Query(None),
    warehouse_id: Optional[int] = Query(None),
    item_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> List[TransactionOut]:
    rows = await transaction_query.list_transactions(
        session,
        company_id=actor.company_id,
        type=type,
        warehouse_id=warehouse_id,
        item_id=item_id,
        start=start_date,
        end=end_date,
        page=page,
        limit=limit,
    )
    return [TransactionOut.model_validate(r) for r in rows]


@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_transaction(
    transaction_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> TransactionOut:
    record = await transaction_query.get_transaction(
        session, transaction_id=transaction_id, company_id=actor.company_id
    )
    return TransactionOut.model_validate(record)
