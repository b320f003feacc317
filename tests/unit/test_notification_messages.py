# tests/unit/test_notification_messages.py
from erp.models.enums import NotificationType, TransactionType
from erp.services.notification_messages import MovedLine, TransactionEvent, compose


def _event(type, **kw):
    return TransactionEvent(company_id=1, actor_id=1, transaction_id=7, type=type, **kw)


def test_single_outbound_line():
    ev = _event(TransactionType.OUTBOUND)
    ev.add_line(MovedLine(1, "Main WH", "Widget", 4, "EA"))

    ntype, title, message = compose(ev)

    assert ntype == NotificationType.TRANSACTION_CREATED
    assert title == "Outbound transaction created"
    assert message == "4 EA of Widget shipped from Main WH."


def test_bulk_lines_keep_first_seen_warehouse_order():
    ev = _event(TransactionType.OUTBOUND)
    ev.add_line(MovedLine(2, "Annex", "Bolt", 1, "PCS"))
    ev.add_line(MovedLine(1, "Main WH", "Widget", 2, "EA"))
    ev.add_line(MovedLine(2, "Annex", "Widget", 3, "EA"))

    _, _, message = compose(ev)

    assert message == "Outbound processed - Annex: Bolt 1 PCS, Widget 3 EA; Main WH: Widget 2 EA"


def test_transfer():
    ev = _event(TransactionType.TRANSFER, source_name="A", destination_name="B")
    ev.add_line(MovedLine(1, "A", "Widget", 9, "EA"))

    ntype, title, message = compose(ev)

    assert ntype == NotificationType.INVENTORY_TRANSFERRED
    assert title == "Inventory transferred"
    assert message == "Moved 9 EA of Widget from A to B."


def test_same_named_warehouses_stay_separate():
    ev = _event(TransactionType.INBOUND)
    ev.add_line(MovedLine(1, "Main WH", "Widget", 5, "EA"))
    ev.add_line(MovedLine(2, "Main WH", "Bolt", 7, "PCS"))

    _, _, message = compose(ev)

    assert message == "Inbound processed - Main WH: Widget 5 EA; Main WH: Bolt 7 PCS"
