# erp/services/notification_dispatcher.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from erp.obs.metrics import notification_dispatch_failures_total
from erp.services.notification_messages import TransactionEvent, compose
from erp.services.notification_service import NotificationService
from erp.services.uow import UnitOfWork

logger = logging.getLogger("erp.notify")


class NotificationDispatcher:
    """
    Post-commit side effect of the transaction engine.

    - runs only after the ledger commit (registered as a UnitOfWork hook)
    - writes through its own session, so it never shares the engine's transaction
    - never raises: failures are logged and counted
    - background=True: schedule() returns at once, the write runs as a tracked task
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        *,
        background: bool = True,
        notifications: Optional[NotificationService] = None,
    ) -> None:
        self._session_factory = session_factory
        self._background = background
        self._notifications = notifications or NotificationService()
        self._pending: Set[asyncio.Task] = set()

    async def dispatch(self, event: TransactionEvent) -> None:
        try:
            ntype, title, message = compose(event)
            async with UnitOfWork(self._session_factory) as uow:
                await self._notifications.create_for_company(
                    uow.session,
                    company_id=event.company_id,
                    type=ntype,
                    title=title,
                    message=message,
                    related_id=event.transaction_id,
                    exclude_user_id=event.actor_id,
                )
            logger.debug("notification sent for tx=%s", event.transaction_id)
        except Exception:
            notification_dispatch_failures_total.inc()
            logger.exception(
                "notification dispatch failed: tx=%s company=%s",
                event.transaction_id,
                event.company_id,
            )

    async def schedule(self, event: TransactionEvent) -> None:
        if not self._background:
            await self.dispatch(event)
            return
        task = asyncio.create_task(self.dispatch(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every scheduled dispatch (shutdown / tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
