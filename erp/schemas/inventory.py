# erp/schemas/inventory.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from erp.schemas.transaction import ItemRef


class InventoryRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item: ItemRef
    quantity: int
    last_restocked_at: Optional[datetime] = None
    updated_at: datetime


class WarehouseInventoryOut(BaseModel):
    warehouse_id: int
    name: str
    capacity: int
    used: int
    available: int
    rows: List[InventoryRow]
