# erp/services/transaction_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from erp.models.enums import LineRole, TransactionType
from erp.models.transaction import TransactionRecord
from erp.obs.metrics import inventory_transaction_rejections_total, inventory_transactions_total
from erp.services.errors import BadRequestError, ServiceError
from erp.services.ledger_writer import load_transaction, write_transaction
from erp.services.notification_dispatcher import NotificationDispatcher
from erp.services.notification_messages import MovedLine, TransactionEvent
from erp.services.stock_mutation import (
    StockMove,
    apply_inbound,
    apply_outbound,
    require_whole_quantity,
)
from erp.services.tenant_guard import (
    get_item_for_tenant,
    get_warehouse_for_tenant,
    lock_warehouses,
    validate_pairs,
)
from erp.services.uow import UnitOfWork

logger = logging.getLogger("erp.tx")

UTC = timezone.utc


@dataclass(frozen=True)
class LineRequest:
    warehouse_id: int
    item_id: int
    quantity: int


class TransactionService:
    """
    Inventory transaction engine.

    Each call is one unit of work:
      validate refs (tenant-scoped, read-only)
      → lock touched warehouses (ascending id)
      → apply lines in input order
      → append the ledger entry
      → commit
      → post-commit notification (never affects the result)
    Any error before the commit rolls back every row the call touched.
    """

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None) -> None:
        self._dispatcher = dispatcher

    async def create_transaction(
        self,
        session: AsyncSession,
        *,
        type: Union[str, TransactionType],
        lines: Sequence[LineRequest],
        actor_id: int,
        company_id: int,
        note: Optional[str] = None,
    ) -> TransactionRecord:
        try:
            tx_type = TransactionType(type)
        except ValueError:
            raise BadRequestError(
                f"Unsupported transaction type: {type}", context={"type": str(type)}
            ) from None
        if tx_type not in (TransactionType.INBOUND, TransactionType.OUTBOUND):
            raise BadRequestError(
                "Transfers must go through transfer_inventory", context={"type": tx_type.value}
            )
        if not lines:
            raise BadRequestError("At least one transaction item is required")
        for idx, ln in enumerate(lines):
            require_whole_quantity(ln.quantity, field=f"items[{idx}].quantity")

        try:
            record, event = await self._run_create(
                session,
                tx_type=tx_type,
                lines=lines,
                actor_id=actor_id,
                company_id=company_id,
                note=note,
            )
        except ServiceError as e:
            inventory_transaction_rejections_total.labels(tx_type.value, e.error_code).inc()
            raise

        inventory_transactions_total.labels(tx_type.value).inc()
        logger.info(
            "tx committed id=%s type=%s company=%s actor=%s lines=%d",
            record.id,
            tx_type.value,
            company_id,
            actor_id,
            len(event.lines),
        )
        return record

    async def _run_create(
        self,
        session: AsyncSession,
        *,
        tx_type: TransactionType,
        lines: Sequence[LineRequest],
        actor_id: int,
        company_id: int,
        note: Optional[str],
    ):
        async with UnitOfWork(session, expire_on_commit=False) as uow:
            s = uow.session
            refs = await validate_pairs(
                s, company_id, [(ln.warehouse_id, ln.item_id) for ln in lines]
            )
            warehouses = await lock_warehouses(s, list(refs.warehouses), company_id)

            now = datetime.now(UTC)
            event = TransactionEvent(
                company_id=company_id, actor_id=actor_id, transaction_id=0, type=tx_type
            )
            moves: List[StockMove] = []
            for ln in lines:
                wh = warehouses[int(ln.warehouse_id)]
                item = refs.items[ln.item_id]
                if tx_type == TransactionType.INBOUND:
                    move = await apply_inbound(
                        s, warehouse=wh, item=item, quantity=ln.quantity, now=now
                    )
                else:
                    move = await apply_outbound(s, warehouse=wh, item=item, quantity=ln.quantity)
                moves.append(move)
                event.add_line(
                    MovedLine(wh.id, wh.name, item.name, move.quantity, item.unit_of_measure)
                )

            tx_id = await write_transaction(
                s,
                type=tx_type,
                company_id=company_id,
                created_by=actor_id,
                moves=moves,
                note=note,
                occurred_at=now,
            )
            event.transaction_id = tx_id
            record = await load_transaction(s, tx_id, company_id)
            self._register_notification(uow, event)

        return record, event

    async def transfer_inventory(
        self,
        session: AsyncSession,
        *,
        from_warehouse_id: int,
        to_warehouse_id: int,
        item_id: int,
        quantity: int,
        actor_id: int,
        company_id: int,
        note: Optional[str] = None,
    ) -> TransactionRecord:
        """
        Move `quantity` of one item between two warehouses of the same company.

        SOURCE is applied like an outbound line (may not go negative),
        DESTINATION like an inbound line (capacity checked, restock time refreshed).
        The ledger entry carries exactly those two lines, deltas -Q and +Q.
        """
        tx_type = TransactionType.TRANSFER
        if int(from_warehouse_id) == int(to_warehouse_id):
            inventory_transaction_rejections_total.labels(tx_type.value, "same_warehouse").inc()
            raise BadRequestError(
                "Source and destination warehouses must be different",
                context={"from_warehouse_id": from_warehouse_id, "to_warehouse_id": to_warehouse_id},
            )
        require_whole_quantity(quantity)

        try:
            async with UnitOfWork(session, expire_on_commit=False) as uow:
                s = uow.session
                await get_warehouse_for_tenant(s, from_warehouse_id, company_id)
                await get_warehouse_for_tenant(s, to_warehouse_id, company_id)
                item = await get_item_for_tenant(s, item_id, company_id)

                locked = await lock_warehouses(s, [from_warehouse_id, to_warehouse_id], company_id)
                src_wh = locked[int(from_warehouse_id)]
                dst_wh = locked[int(to_warehouse_id)]

                now = datetime.now(UTC)
                src = await apply_outbound(
                    s, warehouse=src_wh, item=item, quantity=quantity, role=LineRole.SOURCE
                )
                dst = await apply_inbound(
                    s,
                    warehouse=dst_wh,
                    item=item,
                    quantity=quantity,
                    now=now,
                    role=LineRole.DESTINATION,
                )

                tx_id = await write_transaction(
                    s,
                    type=tx_type,
                    company_id=company_id,
                    created_by=actor_id,
                    moves=[src, dst],
                    note=note,
                    occurred_at=now,
                )
                event = TransactionEvent(
                    company_id=company_id,
                    actor_id=actor_id,
                    transaction_id=tx_id,
                    type=tx_type,
                    source_name=src_wh.name,
                    destination_name=dst_wh.name,
                )
                event.add_line(
                    MovedLine(src_wh.id, src_wh.name, item.name, src.quantity, item.unit_of_measure)
                )
                record = await load_transaction(s, tx_id, company_id)
                self._register_notification(uow, event)
        except ServiceError as e:
            inventory_transaction_rejections_total.labels(tx_type.value, e.error_code).inc()
            raise

        inventory_transactions_total.labels(tx_type.value).inc()
        logger.info(
            "transfer committed id=%s item=%s qty=%s %s->%s company=%s actor=%s",
            record.id,
            item_id,
            quantity,
            from_warehouse_id,
            to_warehouse_id,
            company_id,
            actor_id,
        )
        return record

    def _register_notification(self, uow: UnitOfWork, event: TransactionEvent) -> None:
        if self._dispatcher is None:
            return
        dispatcher = self._dispatcher
        uow.after_commit(lambda: dispatcher.schedule(event))
