# erp/models/item.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from erp.db.base import Base


class Item(Base):
    """
    Catalog entry, aligned with public.items:

        id               INTEGER PRIMARY KEY
        company_id       INTEGER NOT NULL
        sku              VARCHAR(64) NOT NULL      (unique per company)
        name             VARCHAR(128) NOT NULL
        category         VARCHAR(64) NULL
        unit_of_measure  VARCHAR(16) NOT NULL DEFAULT 'EA'
        description      TEXT NULL
        deleted_at       TIMESTAMPTZ NULL          (soft delete)
    """

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(128), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(sa.String(64), nullable=True)
    unit_of_measure: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="EA")
    description: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    __table_args__ = (sa.UniqueConstraint("company_id", "sku", name="uq_items_company_sku"),)

    def __repr__(self) -> str:
        return f"<Item id={self.id} sku={self.sku!r} name={self.name!r}>"
