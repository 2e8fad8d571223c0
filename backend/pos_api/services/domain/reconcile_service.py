"""
Reconcile Domain Service.

Finds and repairs drift between tables, orders and payments left behind by
an interrupted multi-step operation.

The invariant being restored:
- a table is occupied iff it references a live, unpaid order;
- every live, unpaid order is referenced by exactly one table, and that
  table is the one named in the order's table_no;
- an order with a payment is paid and completed.

find_drift() is pure and works on a Snapshot. reconcile() applies the
repairable findings through conditional writes, so a repair never
overwrites a change made after the snapshot was taken.
"""

from dataclasses import dataclass, field

from shared.config.constants import OrderStatus, PaymentStatus, TableStatus
from shared.config.logging import get_logger
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import Conflict, NotFound
from pos_api.services.snapshot import Snapshot, take_snapshot
from pos_api.models import utcnow

logger = get_logger(__name__)


class DriftKind:
    # Repairable
    PAYMENT_NOT_APPLIED = "payment_not_applied"
    PAID_NOT_COMPLETED = "paid_not_completed"
    STALE_OCCUPANCY = "stale_occupancy"
    DUPLICATE_REFERENCE = "duplicate_reference"
    VACANT_WITH_REFERENCE = "vacant_with_reference"
    OCCUPIED_WITHOUT_REFERENCE = "occupied_without_reference"
    ORDER_TABLE_MISMATCH = "order_table_mismatch"
    UNSEATED_ORDER = "unseated_order"

    # Reported only
    COMPLETED_UNPAID = "completed_unpaid"
    SEAT_UNAVAILABLE = "seat_unavailable"
    AMBIGUOUS_SEAT = "ambiguous_seat"


# Order-level fixes first so table fixes see settled orders as settled
_REPAIR_ORDER = {
    DriftKind.PAYMENT_NOT_APPLIED: 0,
    DriftKind.PAID_NOT_COMPLETED: 0,
    DriftKind.STALE_OCCUPANCY: 1,
    DriftKind.DUPLICATE_REFERENCE: 1,
    DriftKind.VACANT_WITH_REFERENCE: 1,
    DriftKind.OCCUPIED_WITHOUT_REFERENCE: 1,
    DriftKind.ORDER_TABLE_MISMATCH: 2,
    DriftKind.UNSEATED_ORDER: 3,
}


@dataclass(frozen=True)
class Drift:
    kind: str
    message: str
    table_no: str | None = None
    order_id: str | None = None
    # table_no recorded on the order when the drift was found
    recorded_table_no: str | None = None

    @property
    def repairable(self) -> bool:
        return self.kind in _REPAIR_ORDER


@dataclass
class ReconcileReport:
    repairs: list[Drift] = field(default_factory=list)
    anomalies: list[Drift] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.repairs and not self.anomalies


def find_drift(snapshot: Snapshot) -> list[Drift]:
    """Every violation of the table/order/payment invariant in the snapshot."""
    orders = {o["order_id"]: o for o in snapshot.orders}
    tables = {t["table_no"]: t for t in snapshot.tables}
    paid_orders = {p["order_id"] for p in snapshot.payments}

    def settled(order: dict) -> bool:
        return (
            order["order_id"] in paid_orders
            or order["payment_status"] == PaymentStatus.PAID
            or order["status"] == OrderStatus.COMPLETED
        )

    drift: list[Drift] = []

    for order in orders.values():
        order_id = order["order_id"]
        if order_id in paid_orders and order["payment_status"] != PaymentStatus.PAID:
            drift.append(Drift(
                DriftKind.PAYMENT_NOT_APPLIED,
                f"Order {order_id} has a payment but is still marked unpaid",
                order_id=order_id,
            ))
        elif order["payment_status"] == PaymentStatus.PAID and order["status"] != OrderStatus.COMPLETED:
            drift.append(Drift(
                DriftKind.PAID_NOT_COMPLETED,
                f"Order {order_id} is paid but still '{order['status']}'",
                order_id=order_id,
            ))
        elif order["status"] == OrderStatus.COMPLETED and order["payment_status"] != PaymentStatus.PAID:
            drift.append(Drift(
                DriftKind.COMPLETED_UNPAID,
                f"Order {order_id} is completed but has no payment",
                order_id=order_id,
            ))

    holders: dict[str, list[str]] = {}
    for table in tables.values():
        table_no = table["table_no"]
        ref = table["current_order_id"]

        if table["status"] == TableStatus.VACANT:
            if ref is not None:
                drift.append(Drift(
                    DriftKind.VACANT_WITH_REFERENCE,
                    f"Table {table_no} is vacant but still references order {ref}",
                    table_no=table_no,
                    order_id=ref,
                ))
            continue

        if ref is None:
            drift.append(Drift(
                DriftKind.OCCUPIED_WITHOUT_REFERENCE,
                f"Table {table_no} is occupied without an order",
                table_no=table_no,
            ))
        elif ref not in orders:
            drift.append(Drift(
                DriftKind.STALE_OCCUPANCY,
                f"Table {table_no} is held by unknown order {ref}",
                table_no=table_no,
                order_id=ref,
            ))
        elif settled(orders[ref]):
            drift.append(Drift(
                DriftKind.STALE_OCCUPANCY,
                f"Table {table_no} is still held by settled order {ref}",
                table_no=table_no,
                order_id=ref,
            ))
        else:
            holders.setdefault(ref, []).append(table_no)

    for order in orders.values():
        if settled(order):
            continue
        order_id = order["order_id"]
        recorded = order["table_no"]
        held_by = sorted(holders.get(order_id, []))

        if not held_by:
            seat = tables.get(recorded)
            if seat is not None and seat["status"] == TableStatus.VACANT and seat["current_order_id"] is None:
                drift.append(Drift(
                    DriftKind.UNSEATED_ORDER,
                    f"Order {order_id} is live but table {recorded} does not show it",
                    table_no=recorded,
                    order_id=order_id,
                    recorded_table_no=recorded,
                ))
            else:
                drift.append(Drift(
                    DriftKind.SEAT_UNAVAILABLE,
                    f"Order {order_id} is live but no table holds it and table {recorded} is not free",
                    table_no=recorded,
                    order_id=order_id,
                    recorded_table_no=recorded,
                ))
        elif len(held_by) == 1:
            if held_by[0] != recorded:
                drift.append(Drift(
                    DriftKind.ORDER_TABLE_MISMATCH,
                    f"Order {order_id} sits at table {held_by[0]} but records table {recorded}",
                    table_no=held_by[0],
                    order_id=order_id,
                    recorded_table_no=recorded,
                ))
        elif recorded in held_by:
            for table_no in held_by:
                if table_no != recorded:
                    drift.append(Drift(
                        DriftKind.DUPLICATE_REFERENCE,
                        f"Table {table_no} also holds order {order_id}, which sits at table {recorded}",
                        table_no=table_no,
                        order_id=order_id,
                        recorded_table_no=recorded,
                    ))
        else:
            drift.append(Drift(
                DriftKind.AMBIGUOUS_SEAT,
                f"Order {order_id} is held by tables {', '.join(held_by)} but records table {recorded}",
                order_id=order_id,
                recorded_table_no=recorded,
            ))

    return drift


def _apply(store: DataStore, item: Drift) -> None:
    if item.kind == DriftKind.PAYMENT_NOT_APPLIED:
        payment = store.get_payment_for_order(item.order_id)
        store.update_order(
            item.order_id,
            {
                "payment_status": PaymentStatus.PAID,
                "status": OrderStatus.COMPLETED,
                "completed_at": payment.payment_time if payment else utcnow(),
            },
            expect={"payment_status": PaymentStatus.PENDING},
        )
    elif item.kind == DriftKind.PAID_NOT_COMPLETED:
        store.update_order(
            item.order_id,
            {"status": OrderStatus.COMPLETED, "completed_at": utcnow()},
            expect={"payment_status": PaymentStatus.PAID},
        )
    elif item.kind == DriftKind.OCCUPIED_WITHOUT_REFERENCE:
        store.update_table(
            item.table_no,
            {"status": TableStatus.VACANT, "current_order_id": None},
            expect={"status": TableStatus.OCCUPIED, "current_order_id": None},
        )
    elif item.kind in (
        DriftKind.STALE_OCCUPANCY,
        DriftKind.DUPLICATE_REFERENCE,
        DriftKind.VACANT_WITH_REFERENCE,
    ):
        store.update_table(
            item.table_no,
            {"status": TableStatus.VACANT, "current_order_id": None},
            expect={"current_order_id": item.order_id},
        )
    elif item.kind == DriftKind.ORDER_TABLE_MISMATCH:
        store.update_order(
            item.order_id,
            {"table_no": item.table_no},
            expect={"table_no": item.recorded_table_no},
        )
    elif item.kind == DriftKind.UNSEATED_ORDER:
        store.update_table(
            item.table_no,
            {"status": TableStatus.OCCUPIED, "current_order_id": item.order_id},
            expect={"status": TableStatus.VACANT, "current_order_id": None},
        )


def reconcile(store: DataStore, order_id: str | None = None) -> ReconcileReport:
    """
    Repair drift, optionally limited to one order's records.

    A repair whose target changed since the snapshot (Conflict) or vanished
    (NotFound) is reported as an anomaly instead. Data store failures
    propagate; a rerun picks up whatever was not repaired.
    """
    if order_id is not None and store.get_order(order_id) is None:
        raise NotFound("Order", order_id)

    findings = find_drift(take_snapshot(store))
    if order_id is not None:
        findings = [d for d in findings if d.order_id == order_id]

    report = ReconcileReport()
    for item in sorted(findings, key=lambda d: _REPAIR_ORDER.get(d.kind, 99)):
        if not item.repairable:
            logger.warning("Drift needs manual attention", kind=item.kind, detail=item.message)
            report.anomalies.append(item)
            continue

        logger.info("Repairing drift", kind=item.kind, table_no=item.table_no, order_id=item.order_id)
        try:
            _apply(store, item)
        except (Conflict, NotFound) as exc:
            logger.warning("Drift repair skipped", kind=item.kind, error=exc.message)
            report.anomalies.append(Drift(
                item.kind,
                f"{item.message}; repair skipped: {exc.message}",
                table_no=item.table_no,
                order_id=item.order_id,
                recorded_table_no=item.recorded_table_no,
            ))
            continue
        report.repairs.append(item)

    logger.info(
        "Reconcile finished",
        order_id=order_id,
        repairs=len(report.repairs),
        anomalies=len(report.anomalies),
    )
    return report
