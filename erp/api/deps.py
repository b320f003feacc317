# erp/api/deps.py
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp.db.session import get_session
from erp.services.notification_dispatcher import NotificationDispatcher
from erp.services.transaction_service import TransactionService


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped AsyncSession (overridable in tests)."""
    async for session in get_session():
        yield session


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as forwarded by the auth gateway."""

    user_id: int
    company_id: int


async def get_actor(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
    x_company_id: Optional[int] = Header(None, alias="X-Company-Id"),
) -> Actor:
    """
    Caller identity. Token validation happens upstream; this service only
    trusts the forwarded user / company headers and refuses requests without them.
    """
    if x_user_id is None or x_company_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "unauthenticated", "message": "Missing caller identity"},
        )
    return Actor(user_id=int(x_user_id), company_id=int(x_company_id))


def get_dispatcher(request: Request) -> Optional[NotificationDispatcher]:
    return getattr(request.app.state, "notification_dispatcher", None)


def get_transaction_service(
    dispatcher: Optional[NotificationDispatcher] = Depends(get_dispatcher),
) -> TransactionService:
    return TransactionService(dispatcher=dispatcher)
