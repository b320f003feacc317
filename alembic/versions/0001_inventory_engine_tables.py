"""inventory engine tables

Revision ID: 0001_inventory_engine
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_inventory_engine"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False),
        _ts("created_at"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer,
            sa.ForeignKey("companies.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(16), nullable=False),
        _ts("created_at"),
    )
    op.create_index("ix_users_company_id", "users", ["company_id"])

    op.create_table(
        "warehouses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer,
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("capacity", sa.Integer, nullable=False),
        _ts("created_at"),
        _ts("deleted_at", nullable=True),
        sa.CheckConstraint("capacity >= 0", name="ck_warehouses_capacity_nonneg"),
    )
    op.create_index("ix_warehouses_company_id", "warehouses", ["company_id"])

    op.create_table(
        "items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer,
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("unit_of_measure", sa.String(16), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _ts("created_at"),
        _ts("deleted_at", nullable=True),
        sa.UniqueConstraint("company_id", "sku", name="uq_items_company_sku"),
    )
    op.create_index("ix_items_company_id", "items", ["company_id"])

    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "warehouse_id",
            sa.Integer,
            sa.ForeignKey("warehouses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "item_id",
            sa.Integer,
            sa.ForeignKey("items.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer, nullable=False),
        _ts("last_restocked_at", nullable=True),
        _ts("updated_at"),
        sa.UniqueConstraint("warehouse_id", "item_id", name="uq_inventory_wh_item"),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_qty_nonneg"),
    )
    op.create_index("ix_inventory_warehouse_id", "inventory", ["warehouse_id"])
    op.create_index("ix_inventory_item_id", "inventory", ["item_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer,
            sa.ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column(
            "created_by",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        _ts("created_at"),
        sa.CheckConstraint("type IN ('INBOUND', 'OUTBOUND', 'TRANSFER')", name="ck_transactions_type"),
    )
    op.create_index("ix_transactions_company_id", "transactions", ["company_id"])
    op.create_index("ix_transactions_company_created", "transactions", ["company_id", "created_at"])

    op.create_table(
        "transaction_lines",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "transaction_id",
            sa.Integer,
            sa.ForeignKey("transactions.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("line_no", sa.Integer, nullable=False),
        sa.Column(
            "warehouse_id",
            sa.Integer,
            sa.ForeignKey("warehouses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "item_id",
            sa.Integer,
            sa.ForeignKey("items.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("delta", sa.Integer, nullable=False),
        sa.Column("after_qty", sa.Integer, nullable=False),
        sa.UniqueConstraint("transaction_id", "line_no", name="uq_transaction_lines_tx_line"),
        sa.CheckConstraint("quantity > 0", name="ck_transaction_lines_qty_pos"),
    )
    op.create_index("ix_transaction_lines_transaction_id", "transaction_lines", ["transaction_id"])
    op.create_index("ix_transaction_lines_warehouse_id", "transaction_lines", ["warehouse_id"])
    op.create_index("ix_transaction_lines_item_id", "transaction_lines", ["item_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer,
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("exclude_user_id", sa.Integer, nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("related_id", sa.Integer, nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        _ts("created_at"),
    )
    op.create_index("ix_notifications_company_id", "notifications", ["company_id"])
    op.create_index("ix_notifications_company_created", "notifications", ["company_id", "created_at"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("transaction_lines")
    op.drop_table("transactions")
    op.drop_table("inventory")
    op.drop_table("items")
    op.drop_table("warehouses")
    op.drop_table("users")
    op.drop_table("companies")
