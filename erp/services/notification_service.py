# erp/services/notification_service.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.enums import NotificationType
from erp.models.notification import Notification
from erp.services.errors import NotFoundError

UTC = timezone.utc


def _visible_to(user_id: int, company_id: int):
    """Company-wide or addressed to the user, and not excluding the user."""
    return and_(
        Notification.company_id == int(company_id),
        or_(Notification.user_id.is_(None), Notification.user_id == int(user_id)),
        or_(
            Notification.exclude_user_id.is_(None),
            Notification.exclude_user_id != int(user_id),
        ),
    )


class NotificationService:
    """
    Notification sink: persistence and read state.

    Writes flush but never commit; the caller owns the transaction.
    """

    async def create_for_company(
        self,
        session: AsyncSession,
        *,
        company_id: int,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[int] = None,
        exclude_user_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Notification:
        n = Notification(
            company_id=int(company_id),
            user_id=user_id,
            exclude_user_id=exclude_user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            related_id=related_id,
            is_read=False,
        )
        session.add(n)
        await session.flush()
        return n

    async def list_for_user(
        self,
        session: AsyncSession,
        *,
        user_id: int,
        company_id: int,
        limit: int = 50,
    ) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(_visible_to(user_id, company_id))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(int(limit))
        )
        return list((await session.execute(stmt)).scalars().all())

    async def unread_count(self, session: AsyncSession, *, user_id: int, company_id: int) -> int:
        stmt = select(func.count(Notification.id)).where(
            _visible_to(user_id, company_id),
            Notification.is_read.is_(False),
        )
        return int((await session.execute(stmt)).scalar_one())

    async def mark_as_read(
        self,
        session: AsyncSession,
        *,
        notification_id: int,
        user_id: int,
        company_id: int,
    ) -> Notification:
        stmt = select(Notification).where(
            Notification.id == int(notification_id),
            _visible_to(user_id, company_id),
        )
        n = (await session.execute(stmt)).scalar_one_or_none()
        if n is None:
            raise NotFoundError(
                f"Notification with ID {notification_id} not found",
                context={"notification_id": notification_id},
            )
        n.is_read = True
        await session.flush()
        return n

    async def mark_all_as_read(self, session: AsyncSession, *, user_id: int, company_id: int) -> int:
        stmt = (
            update(Notification)
            .where(_visible_to(user_id, company_id), Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        return int(res.rowcount or 0)

    async def delete_older_than(
        self,
        session: AsyncSession,
        *,
        days: int,
        now: Optional[datetime] = None,
    ) -> int:
        cutoff = (now or datetime.now(UTC)) - timedelta(days=int(days))
        res = await session.execute(
            delete(Notification)
            .where(Notification.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return int(res.rowcount or 0)
