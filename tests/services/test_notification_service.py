# tests/services/test_notification_service.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from erp.models import Notification
from erp.models.enums import NotificationType
from erp.services.errors import NotFoundError
from erp.services.notification_service import NotificationService

UTC = timezone.utc


@pytest.fixture
def notifications() -> NotificationService:
    return NotificationService()


async def _broadcast(session, svc, seed, *, title="t", exclude=None, user_id=None, company_id=None):
    n = await svc.create_for_company(
        session,
        company_id=company_id or seed.company_id,
        type=NotificationType.SYSTEM,
        title=title,
        message=f"{title} body",
        exclude_user_id=exclude,
        user_id=user_id,
    )
    await session.commit()
    return n


@pytest.mark.asyncio
async def test_visibility_rules(session, notifications, seed):
    everyone = await _broadcast(session, notifications, seed, title="all")
    not_actor = await _broadcast(session, notifications, seed, title="skip actor", exclude=seed.actor_id)
    direct = await _broadcast(session, notifications, seed, title="to bob", user_id=seed.coworker_id)
    await _broadcast(session, notifications, seed, title="foreign", company_id=seed.other_company_id)

    actor_view = await notifications.list_for_user(session, user_id=seed.actor_id, company_id=seed.company_id)
    bob_view = await notifications.list_for_user(session, user_id=seed.coworker_id, company_id=seed.company_id)

    assert {n.id for n in actor_view} == {everyone.id}
    assert {n.id for n in bob_view} == {everyone.id, not_actor.id, direct.id}
    # newest first
    assert [n.id for n in bob_view] == sorted((n.id for n in bob_view), reverse=True)


@pytest.mark.asyncio
async def test_unread_and_mark_read(session, notifications, seed):
    a = await _broadcast(session, notifications, seed, title="a")
    await _broadcast(session, notifications, seed, title="b")

    assert await notifications.unread_count(session, user_id=seed.coworker_id, company_id=seed.company_id) == 2

    read = await notifications.mark_as_read(
        session, notification_id=a.id, user_id=seed.coworker_id, company_id=seed.company_id
    )
    await session.commit()
    assert read.is_read is True
    assert await notifications.unread_count(session, user_id=seed.coworker_id, company_id=seed.company_id) == 1

    updated = await notifications.mark_all_as_read(
        session, user_id=seed.coworker_id, company_id=seed.company_id
    )
    await session.commit()
    assert updated == 1
    assert await notifications.unread_count(session, user_id=seed.coworker_id, company_id=seed.company_id) == 0


@pytest.mark.asyncio
async def test_mark_read_hidden_notification_is_not_found(session, notifications, seed):
    hidden = await _broadcast(session, notifications, seed, exclude=seed.actor_id)

    with pytest.raises(NotFoundError) as ei:
        await notifications.mark_as_read(
            session, notification_id=hidden.id, user_id=seed.actor_id, company_id=seed.company_id
        )
    assert ei.value.message == f"Notification with ID {hidden.id} not found"

    with pytest.raises(NotFoundError):
        await notifications.mark_as_read(
            session, notification_id=hidden.id, user_id=seed.other_user_id, company_id=seed.other_company_id
        )


@pytest.mark.asyncio
async def test_delete_older_than(session, notifications, seed):
    old = await _broadcast(session, notifications, seed, title="old")
    fresh = await _broadcast(session, notifications, seed, title="fresh")
    now = datetime.now(UTC)
    await session.execute(
        update(Notification)
        .where(Notification.id == old.id)
        .values(created_at=now - timedelta(days=45))
    )
    await session.commit()

    deleted = await notifications.delete_older_than(session, days=30, now=now)
    await session.commit()

    assert deleted == 1
    remaining = await notifications.list_for_user(session, user_id=seed.coworker_id, company_id=seed.company_id)
    assert [n.id for n in remaining] == [fresh.id]
