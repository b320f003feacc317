# erp/models/transaction.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp.db.base import Base


class TransactionRecord(Base):
    """
    Ledger entry (append-only): one row per successful engine call.

    Written in the same unit of work as the inventory rows it describes;
    nothing updates or deletes it afterwards.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    created_by: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        sa.CheckConstraint(
            "type IN ('INBOUND', 'OUTBOUND', 'TRANSFER')", name="ck_transactions_type"
        ),
        sa.Index("ix_transactions_company_created", "company_id", "created_at"),
    )

    lines: Mapped[List["TransactionLineItem"]] = relationship(
        "TransactionLineItem",
        back_populates="transaction",
        order_by="TransactionLineItem.line_no",
        lazy="raise",
    )
    creator = relationship("User", lazy="raise")

    def __repr__(self) -> str:
        return f"<TransactionRecord id={self.id} type={self.type} company={self.company_id}>"


class TransactionLineItem(Base):
    """
    One (warehouse, item, quantity) movement inside a ledger entry.

    - quantity: moved amount, always > 0
    - role:     INBOUND / OUTBOUND, or SOURCE / DESTINATION for transfers
    - delta:    signed stock change implied by role (+quantity or -quantity)
    - after_qty: on-hand quantity of (warehouse, item) once the line was applied
    A transfer's two lines carry -Q and +Q, so its deltas sum to zero.
    """

    __tablename__ = "transaction_lines"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    transaction_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("transactions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    line_no: Mapped[int] = mapped_column(sa.Integer, nullable=False)
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
    role: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    delta: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    after_qty: Mapped[int] = mapped_column(sa.Integer, nullable=False)

    __table_args__ = (
        sa.UniqueConstraint("transaction_id", "line_no", name="uq_transaction_lines_tx_line"),
        sa.CheckConstraint("quantity > 0", name="ck_transaction_lines_qty_pos"),
    )

    transaction: Mapped[TransactionRecord] = relationship(
        "TransactionRecord", back_populates="lines", lazy="raise"
    )
    warehouse = relationship("Warehouse", lazy="raise")
    item = relationship("Item", lazy="raise")

    def __repr__(self) -> str:
        return (
            f"<TransactionLineItem tx={self.transaction_id} #{self.line_no} {self.role} "
            f"wh={self.warehouse_id} item={self.item_id} delta={self.delta} after={self.after_qty}>"
        )
