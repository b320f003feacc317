# erp/api/routers/notifications.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from erp.api.deps import Actor, get_actor, get_async_session
from erp.schemas.notification import MarkAllReadOut, NotificationOut, UnreadCountOut
from erp.services.notification_service import NotificationService
from erp.services.uow import UnitOfWork

router = APIRouter(prefix="/notifications", tags=["notifications"])

_svc = NotificationService()


@router.get("", response_model=List[NotificationOut])
async def list_notifications(
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> List[NotificationOut]:
    rows = await _svc.list_for_user(session, user_id=actor.user_id, company_id=actor.company_id)
    return [NotificationOut.model_validate(r) for r in rows]


@router.get("/unread-count", response_model=UnreadCountOut)
async def unread_count(
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> UnreadCountOut:
    n = await _svc.unread_count(session, user_id=actor.user_id, company_id=actor.company_id)
    return UnreadCountOut(count=n)


@router.post("/read-all", response_model=MarkAllReadOut)
async def mark_all_read(
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> MarkAllReadOut:
    async with UnitOfWork(session) as uow:
        updated = await _svc.mark_all_as_read(
            uow.session, user_id=actor.user_id, company_id=actor.company_id
        )
    return MarkAllReadOut(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_async_session),
) -> NotificationOut:
    async with UnitOfWork(session, expire_on_commit=False) as uow:
        n = await _svc.mark_as_read(
            uow.session,
            notification_id=notification_id,
            user_id=actor.user_id,
            company_id=actor.company_id,
        )
    return NotificationOut.model_validate(n)
