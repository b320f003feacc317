# erp/models/__init__.py
from erp.models.company import Company
from erp.models.enums import LineRole, NotificationType, TransactionType, UserRole
from erp.models.inventory import InventoryRecord
from erp.models.item import Item
from erp.models.notification import Notification
from erp.models.transaction import TransactionLineItem, TransactionRecord
from erp.models.user import User
from erp.models.warehouse import Warehouse

__all__ = [
    "Company",
    "InventoryRecord",
    "Item",
    "LineRole",
    "Notification",
    "NotificationType",
    "TransactionLineItem",
    "TransactionRecord",
    "TransactionType",
    "User",
    "UserRole",
    "Warehouse",
]
