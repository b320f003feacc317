# erp/models/warehouse.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from erp.db.base import Base


class Warehouse(Base):
    """
    Tenant-owned storage location.

    - capacity: ceiling on the summed on-hand quantity across all items
    - deleted_at: soft delete; a deleted warehouse is treated as missing
    The transaction engine never writes this table, it only reads (and row-locks) it.
    """

    __tablename__ = "warehouses"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(sa.String(255), nullable=True)
    capacity: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    __table_args__ = (sa.CheckConstraint("capacity >= 0", name="ck_warehouses_capacity_nonneg"),)

    def __repr__(self) -> str:
        return f"<Warehouse id={self.id} name={self.name!r} capacity={self.capacity}>"
