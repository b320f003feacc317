# erp/models/notification.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from erp.db.base import Base


class Notification(Base):
    """
    Company-scoped message.

    - user_id NULL          → visible to every member of the company
    - exclude_user_id set   → hidden from that one member (the actor)
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    exclude_user_id: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    type: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    message: Mapped[str] = mapped_column(sa.Text, nullable=False)
    related_id: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    is_read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (sa.Index("ix_notifications_company_created", "company_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Notification id={self.id} company={self.company_id} type={self.type}>"
