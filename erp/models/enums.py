# erp/models/enums.py
from __future__ import annotations

from enum import StrEnum


class TransactionType(StrEnum):
    """
    Ledger movement kinds (transactions.type):

    - INBOUND   stock received into one or more warehouses
    - OUTBOUND  stock shipped out of one or more warehouses
    - TRANSFER  one item moved between two warehouses of the same company
    """

    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    TRANSFER = "TRANSFER"


class LineRole(StrEnum):
    """
    Side of a movement a ledger line records (transaction_lines.role).

    SOURCE / DESTINATION only appear on TRANSFER records.
    """

    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    SOURCE = "SOURCE"
    DESTINATION = "DESTINATION"

    @property
    def adds_stock(self) -> bool:
        return self in (LineRole.INBOUND, LineRole.DESTINATION)

    def signed(self, quantity: int) -> int:
        return int(quantity) if self.adds_stock else -int(quantity)


class NotificationType(StrEnum):
    TRANSACTION_CREATED = "TRANSACTION_CREATED"
    INVENTORY_TRANSFERRED = "INVENTORY_TRANSFERRED"
    LOW_STOCK = "LOW_STOCK"
    SYSTEM = "SYSTEM"


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    USER = "USER"
