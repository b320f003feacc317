# erp/services/uow.py
"""
Unit of Work: one async transaction boundary around an AsyncSession.

- no exception   -> commit, then run post-commit hooks in registration order
- any exception  -> rollback (CancelledError included), hooks are dropped
- only closes sessions it created itself; an injected session is left open

Post-commit hooks see a durable commit. A failing hook is logged and
swallowed: it can never turn a committed unit into an error for the caller.

    async with UnitOfWork(session) as uow:
        await write_things(uow.session)
        uow.after_commit(lambda: notify(...))
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("erp.uow")

AsyncSessionFactory = Callable[[], AsyncSession]
PostCommitHook = Callable[[], Awaitable[Any]]


class UnitOfWork:
    def __init__(
        self,
        session_or_factory: Union[AsyncSession, AsyncSessionFactory],
        *,
        expire_on_commit: Optional[bool] = None,
    ) -> None:
        self._session_or_factory = session_or_factory
        self._expire_on_commit = expire_on_commit

        self.session: Optional[AsyncSession] = None
        self._owns_session: bool = False
        self._prev_expire_on_commit: Optional[bool] = None
        self._hooks: List[PostCommitHook] = []
        self.committed: bool = False

    def after_commit(self, hook: PostCommitHook) -> None:
        """Register an async callable to run once the commit has succeeded."""
        self._hooks.append(hook)

    async def __aenter__(self) -> "UnitOfWork":
        if isinstance(self._session_or_factory, AsyncSession):
            self.session = self._session_or_factory
            self._owns_session = False
        else:
            factory = self._session_or_factory
            if not callable(factory):
                raise TypeError("UnitOfWork expects an AsyncSession or an async session factory.")
            self.session = factory()
            self._owns_session = True

        if not isinstance(self.session, AsyncSession):
            raise TypeError("async with UnitOfWork(...) requires an AsyncSession.")

        if self._expire_on_commit is not None:
            self._prev_expire_on_commit = self.session.sync_session.expire_on_commit
            self.session.sync_session.expire_on_commit = bool(self._expire_on_commit)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if self.session is None:
            return False

        try:
            if exc_type:
                await self.session.rollback()
                self._hooks.clear()
            else:
                await self.session.commit()
                self.committed = True
        finally:
            if self._owns_session:
                try:
                    await self.session.close()
                finally:
                    self.session = None
            elif self._prev_expire_on_commit is not None:
                # borrowed session goes back with its own setting
                self.session.sync_session.expire_on_commit = self._prev_expire_on_commit

        if self.committed:
            await self._run_hooks()
        # False -> exceptions keep propagating
        return False

    async def _run_hooks(self) -> None:
        hooks, self._hooks = self._hooks, []
        for hook in hooks:
            try:
                await hook()
            except Exception:
                logger.exception("post-commit hook failed: %r", hook)
