# erp/schemas/transaction.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Base(BaseModel):
    """ORM output allowed, unknown fields ignored."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")


# ========= Requests =========
class TransactionItemIn(_Base):
    warehouse_id: Annotated[int, Field(ge=1)]
    item_id: Annotated[int, Field(ge=1)]
    quantity: Annotated[int, Field(ge=1)]


class CreateTransactionIn(_Base):
    """Inbound / outbound over one or more (warehouse, item) lines."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    type: Literal["INBOUND", "OUTBOUND"]
    items: List[TransactionItemIn] = Field(..., min_length=1)
    notes: Annotated[Optional[str], Field(None, max_length=1000)] = None


class TransferInventoryIn(_Base):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    from_warehouse_id: Annotated[int, Field(ge=1)]
    to_warehouse_id: Annotated[int, Field(ge=1)]
    item_id: Annotated[int, Field(ge=1)]
    quantity: Annotated[int, Field(ge=1)]
    notes: Annotated[Optional[str], Field(None, max_length=1000)] = None


# ========= Responses =========
class WarehouseRef(_Base):
    id: int
    name: str
    location: Optional[str] = None


class ItemRef(_Base):
    id: int
    sku: str
    name: str
    unit_of_measure: str


class UserRef(_Base):
    id: int
    name: str
    email: str


class TransactionLineOut(_Base):
    line_no: int
    role: str
    quantity: int
    delta: int
    after_qty: int
    warehouse: WarehouseRef
    item: ItemRef


class TransactionOut(_Base):
    id: int
    type: str
    note: Optional[str] = None
    company_id: int
    created_at: datetime
    creator: UserRef
    lines: List[TransactionLineOut]
