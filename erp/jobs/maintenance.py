# erp/jobs/maintenance.py
"""
Periodic maintenance, meant for cron:

    python -m erp.jobs.maintenance guard       # ledger vs inventory check, every company
    python -m erp.jobs.maintenance retention   # drop notifications past retention
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp.core.config import get_settings
from erp.core.logging import setup_logging
from erp.db.session import close_engines, get_session_factory
from erp.models.company import Company
from erp.obs.metrics import inventory_ledger_mismatch_total
from erp.services.ledger_consistency import LedgerMismatch, find_ledger_mismatches
from erp.services.notification_service import NotificationService
from erp.services.uow import UnitOfWork

logger = logging.getLogger("erp.jobs")


async def run_inventory_guard(session: AsyncSession) -> Dict[int, List[LedgerMismatch]]:
    """Check every company; returns only the companies that have mismatches."""
    company_ids = (await session.execute(select(Company.id).order_by(Company.id))).scalars().all()
    found: Dict[int, List[LedgerMismatch]] = {}
    for cid in company_ids:
        mismatches = await find_ledger_mismatches(session, company_id=cid)
        if not mismatches:
            continue
        found[int(cid)] = mismatches
        inventory_ledger_mismatch_total.inc(len(mismatches))
        for m in mismatches:
            logger.warning(
                "ledger mismatch company=%s wh=%s item=%s ledger=%s stock=%s",
                cid,
                m.warehouse_id,
                m.item_id,
                m.ledger_qty,
                m.stock_qty,
            )
    return found


async def run_notification_retention(session: AsyncSession, *, days: int) -> int:
    async with UnitOfWork(session) as uow:
        deleted = await NotificationService().delete_older_than(uow.session, days=days)
    logger.info("notification retention: deleted=%s days=%s", deleted, days)
    return deleted


async def _main(job: str) -> None:
    settings = get_settings()
    try:
        async with get_session_factory()() as session:
            if job == "guard":
                await run_inventory_guard(session)
            else:
                await run_notification_retention(
                    session, days=settings.NOTIFICATION_RETENTION_DAYS
                )
    finally:
        await close_engines()


def main() -> None:
    parser = argparse.ArgumentParser(prog="erp-maintenance")
    parser.add_argument("job", choices=["guard", "retention"])
    args = parser.parse_args()
    setup_logging(get_settings().LOG_LEVEL)
    asyncio.run(_main(args.job))


if __name__ == "__main__":
    main()
