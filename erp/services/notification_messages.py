# erp/services/notification_messages.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from erp.models.enums import NotificationType, TransactionType


@dataclass(frozen=True)
class MovedLine:
    warehouse_id: int
    warehouse_name: str
    item_name: str
    quantity: int
    unit: str


@dataclass
class TransactionEvent:
    """
    What a committed engine call did, in display terms only.

    `by_warehouse` groups lines per warehouse id in first-seen order; names are
    not unique, so they are only used for display.
    """

    company_id: int
    actor_id: int
    transaction_id: int
    type: TransactionType
    lines: List[MovedLine] = field(default_factory=list)
    by_warehouse: Dict[int, List[MovedLine]] = field(default_factory=dict)
    source_name: Optional[str] = None
    destination_name: Optional[str] = None

    def add_line(self, line: MovedLine) -> None:
        self.lines.append(line)
        self.by_warehouse.setdefault(line.warehouse_id, []).append(line)


_LABELS = {
    TransactionType.INBOUND: "Inbound",
    TransactionType.OUTBOUND: "Outbound",
    TransactionType.TRANSFER: "Transfer",
}


def compose(event: TransactionEvent) -> Tuple[NotificationType, str, str]:
    """Return (type, title, message) for the notification describing `event`."""
    if event.type == TransactionType.TRANSFER:
        line = event.lines[0]
        message = (
            f"Moved {line.quantity} {line.unit} of {line.item_name} "
            f"from {event.source_name} to {event.destination_name}."
        )
        return NotificationType.INVENTORY_TRANSFERRED, "Inventory transferred", message

    label = _LABELS[event.type]
    title = f"{label} transaction created"

    if len(event.lines) == 1:
        line = event.lines[0]
        verb = "received at" if event.type == TransactionType.INBOUND else "shipped from"
        message = f"{line.quantity} {line.unit} of {line.item_name} {verb} {line.warehouse_name}."
        return NotificationType.TRANSACTION_CREATED, title, message

    parts = []
    for lines in event.by_warehouse.values():
        items = ", ".join(f"{ln.item_name} {ln.quantity} {ln.unit}" for ln in lines)
        parts.append(f"{lines[0].warehouse_name}: {items}")
    message = f"{label} processed - " + "; ".join(parts)
    return NotificationType.TRANSACTION_CREATED, title, message
