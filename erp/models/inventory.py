# erp/models/inventory.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp.db.base import Base


class InventoryRecord(Base):
    """
    On-hand balance of one item in one warehouse.

    - at most one row per (warehouse_id, item_id)
    - quantity >= 0 (also enforced by a check constraint)
    - created lazily by the first inbound movement; never deleted by the engine
    """

    __tablename__ = "inventory"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    warehouse_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("warehouses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    item_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    last_restocked_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        sa.UniqueConstraint("warehouse_id", "item_id", name="uq_inventory_wh_item"),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_qty_nonneg"),
    )

    warehouse = relationship("Warehouse", lazy="raise")
    item = relationship("Item", lazy="raise")

    def __repr__(self) -> str:
        return f"<InventoryRecord wh={self.warehouse_id} item={self.item_id} qty={self.quantity}>"
