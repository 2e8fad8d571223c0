"""
Order Lifecycle Domain Service.

Keeps a table's occupancy, an order's status and a payment's settlement
consistent although the three records are written by separate, individually
committed calls.

Each multi-step operation:
- checks every precondition against freshly read state before the first write
  (ValidationFailure / InvalidTransition / Conflict leave no side effects);
- logs the intent of each step before executing it;
- makes every status-changing write conditional on the state it just read;
- never rolls back. A failure after a committed step is raised as
  PartialCommit naming what is now true, and the reconcile path repairs it.

Write order is chosen so an interruption leaves the least misleading state:
settlement writes the Payment first (money moved is always recorded), a
transfer claims the destination table first (the order never loses its seat).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, TypeVar

from shared.config.constants import (
    Defaults,
    ORDER_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
    SETTLEABLE_STATUSES,
    TableStatus,
)
from shared.config.logging import lifecycle_logger as logger
from shared.utils.validators import CENTS, require_text, sanitize_text, to_money, validate_quantity
from pos_api.models import Order, Payment, RestaurantTable, utcnow
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import (
    Conflict,
    InvalidTransition,
    LifecycleError,
    NotFound,
    PartialCommit,
    ValidationFailure,
)

T = TypeVar("T")


@dataclass
class StepSequence:
    """
    Runs the committed steps of one operation in order.

    Once any step has committed, a failing later step is re-raised as
    PartialCommit carrying the message registered for that step.
    """

    operation: str
    context: dict[str, Any] = field(default_factory=dict)
    committed: list[str] = field(default_factory=list)

    def run(self, step: str, intent: str, fn: Callable[[], T], if_interrupted: str) -> T:
        logger.info(f"{self.operation}: {intent}", step=step, **self.context)
        try:
            result = fn()
        except LifecycleError as exc:
            if not self.committed:
                raise
            logger.error(
                f"{self.operation} interrupted after committed steps",
                failed_step=step,
                committed_steps=list(self.committed),
                error=exc.message,
                **self.context,
            )
            raise PartialCommit(
                self.operation,
                f"{if_interrupted} ({exc.message}). Run reconcile to repair.",
                committed_steps=list(self.committed),
                failed_step=step,
                cause=exc,
                **self.context,
            ) from exc
        self.committed.append(step)
        return result

    def mark_done(self, step: str, reason: str) -> None:
        """Record a step that an earlier, interrupted run already committed."""
        logger.info(f"{self.operation}: step already committed, resuming", step=step, reason=reason, **self.context)
        self.committed.append(step)


def compute_total(lines: list[dict[str, Any]]) -> Decimal:
    """Σ(price × quantity) over order lines, rounded to cents."""
    total = sum(
        (Decimal(str(line["price"])) * line["quantity"] for line in lines),
        Decimal("0"),
    )
    return total.quantize(CENTS)


def check_transition(current: str, new_status: str) -> None:
    """
    Validate an AdvanceOrderStatus transition against ORDER_TRANSITIONS.

    Raises InvalidTransition for unknown statuses, for `completed` (reached
    only by settlement) and for any pair not listed in the table.
    """
    if new_status not in OrderStatus.ALL:
        raise InvalidTransition(f"Unknown order status '{new_status}'", to_status=new_status)
    if new_status == OrderStatus.COMPLETED:
        raise InvalidTransition(
            "Orders are completed only by settling their payment",
            from_status=current,
            to_status=new_status,
        )
    if new_status not in ORDER_TRANSITIONS.get(current, []):
        raise InvalidTransition(
            f"Cannot change order status from '{current}' to '{new_status}'",
            from_status=current,
            to_status=new_status,
        )


class LifecycleService:
    """
    Order Lifecycle Coordinator.

    Stateless: every call reads authoritative state from the data store
    before changing it.
    """

    def __init__(self, store: DataStore):
        self._store = store

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _require_order(self, order_id: str) -> Order:
        order = self._store.get_order(order_id)
        if order is None:
            raise NotFound("Order", order_id)
        return order

    def _require_table(self, table_no: str) -> RestaurantTable:
        table = self._store.get_table(table_no)
        if table is None:
            raise NotFound("Table", table_no)
        return table

    def get_order(self, order_id: str) -> Order:
        return self._require_order(order_id)

    # -------------------------------------------------------------------------
    # PlaceOrder
    # -------------------------------------------------------------------------

    def resolve_lines(self, line_items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Validate requested lines and snapshot name/price from the menu.

        Input lines are {"item_id", "quantity"}; output lines are
        {"item_id", "name", "price", "quantity"} with price as a decimal string.
        """
        if not line_items:
            raise ValidationFailure("An order needs at least one item")

        resolved = []
        for line in line_items:
            item_id = line.get("item_id")
            if not item_id:
                raise ValidationFailure("Every order line needs an item_id")
            quantity = line.get("quantity")
            if not isinstance(quantity, int) or isinstance(quantity, bool):
                raise ValidationFailure(f"Quantity for '{item_id}' must be a whole number", item_id=item_id)
            try:
                validate_quantity(quantity)
            except ValueError as exc:
                raise ValidationFailure(f"{exc} (item '{item_id}')", item_id=item_id) from exc

            menu_item = self._store.get_menu_item(item_id)
            if menu_item is None:
                raise NotFound("Menu item", item_id)
            if not menu_item.available:
                raise ValidationFailure(
                    f"'{menu_item.item_name}' is not available right now",
                    item_id=item_id,
                )
            if menu_item.price is None or menu_item.price < 0:
                raise ValidationFailure(f"'{menu_item.item_name}' has no valid price", item_id=item_id)

            resolved.append({
                "item_id": menu_item.item_id,
                "name": menu_item.item_name,
                "price": str(Decimal(menu_item.price).quantize(CENTS)),
                "quantity": quantity,
            })
        return resolved

    def place_order(
        self,
        table_no: str,
        line_items: list[dict[str, Any]],
        customer_name: str | None = None,
    ) -> Order:
        """
        Create an order for a vacant table and mark the table occupied.

        Steps: insert order (pending/pending), then occupy the table,
        conditional on it still being vacant.
        """
        lines = self.resolve_lines(line_items)
        total = compute_total(lines)

        table = self._require_table(table_no)
        if table.status != TableStatus.VACANT:
            raise Conflict(
                f"Table {table_no} is already occupied by order {table.current_order_id}",
                table_no=table_no,
                current_order_id=table.current_order_id,
            )

        seq = StepSequence("place_order", {"table_no": table_no})

        order = seq.run(
            "insert_order",
            f"creating order for table {table_no} totalling {total}",
            lambda: self._store.insert_order({
                "table_no": table_no,
                "customer_name": sanitize_text(customer_name) or Defaults.CUSTOMER_NAME,
                "items": lines,
                "total_amount": total,
                "status": OrderStatus.PENDING,
                "payment_status": PaymentStatus.PENDING,
            }),
            if_interrupted="",
        )
        seq.context["order_id"] = order.order_id

        seq.run(
            "occupy_table",
            f"marking table {table_no} occupied by {order.order_id}",
            lambda: self._store.update_table(
                table_no,
                {"status": TableStatus.OCCUPIED, "current_order_id": order.order_id},
                expect={"status": TableStatus.VACANT, "current_order_id": None},
            ),
            if_interrupted=(
                f"Order {order.order_id} was created but table {table_no} "
                "was not marked occupied"
            ),
        )

        logger.info(
            "Order placed",
            order_id=order.order_id,
            table_no=table_no,
            total_amount=str(total),
            lines=len(lines),
        )
        return order

    # -------------------------------------------------------------------------
    # AdvanceOrderStatus
    # -------------------------------------------------------------------------

    def advance_order_status(self, order_id: str, new_status: str) -> Order:
        """
        Move an order along pending → ready → served.

        Repeating the transition that already happened (ready or served) is a
        no-op; `pending` is never a transition target, so it cannot be replayed.
        Never touches tables or payments.
        """
        order = self._require_order(order_id)

        reachable = {s for targets in ORDER_TRANSITIONS.values() for s in targets}
        if new_status == order.status and new_status in reachable:
            logger.info("Order status unchanged (replay)", order_id=order_id, status=new_status)
            return order

        check_transition(order.status, new_status)

        updated = self._store.update_order(
            order_id,
            {"status": new_status},
            expect={"status": order.status},
        )
        logger.info(
            "Order status advanced",
            order_id=order_id,
            from_status=order.status,
            to_status=new_status,
        )
        return updated

    # -------------------------------------------------------------------------
    # SettlePayment
    # -------------------------------------------------------------------------

    def settle_payment(
        self,
        order_id: str,
        amount: Any,
        method: str,
        cashier: str | None = None,
    ) -> Payment:
        """
        Record payment for an order, complete it and free its table.

        Steps: insert payment, mark order paid/completed (conditional on it
        still being unpaid), vacate the table that references the order.
        A run interrupted after the payment insert can be retried: the
        existing payment is reused and the remaining steps run.
        """
        try:
            amount = to_money(amount)
            method = require_text(method, "Payment method", max_length=50).lower()
        except ValueError as exc:
            raise ValidationFailure(str(exc), order_id=order_id) from exc
        cashier = sanitize_text(cashier) or Defaults.CASHIER

        order = self._require_order(order_id)
        if order.payment_status == PaymentStatus.PAID:
            raise Conflict(f"Order {order_id} is already paid", order_id=order_id)
        if order.status not in SETTLEABLE_STATUSES:
            raise InvalidTransition(
                f"Order {order_id} is '{order.status}' but unpaid; run reconcile before settling",
                order_id=order_id,
                status=order.status,
            )
        if amount != order.total_amount:
            raise ValidationFailure(
                f"Payment amount {amount} does not match order total {order.total_amount}",
                order_id=order_id,
                amount=str(amount),
                total_amount=str(order.total_amount),
            )

        seq = StepSequence("settle_payment", {"order_id": order_id})

        existing = self._store.get_payment_for_order(order_id)
        if existing is not None:
            if existing.amount != amount:
                raise Conflict(
                    f"Order {order_id} already has payment {existing.payment_id} "
                    f"of {existing.amount}",
                    order_id=order_id,
                    payment_id=existing.payment_id,
                )
            payment = existing
            seq.mark_done("insert_payment", f"payment {existing.payment_id} already recorded")
        else:
            payment = seq.run(
                "insert_payment",
                f"recording {method} payment of {amount}",
                lambda: self._store.insert_payment({
                    "order_id": order_id,
                    "amount": amount,
                    "method": method,
                    "cashier": cashier,
                }),
                if_interrupted="",
            )

        try:
            seq.run(
                "complete_order",
                "marking order paid and completed",
                lambda: self._store.update_order(
                    order_id,
                    {
                        "payment_status": PaymentStatus.PAID,
                        "status": OrderStatus.COMPLETED,
                        "completed_at": utcnow(),
                    },
                    expect={"payment_status": PaymentStatus.PENDING},
                ),
                if_interrupted=(
                    f"Payment {payment.payment_id} was recorded but order {order_id} "
                    "is still marked unpaid and its table may still show occupied"
                ),
            )
        except PartialCommit as exc:
            # Another terminal settled the order between our read and write
            if isinstance(exc.cause, Conflict):
                current = self._store.get_order(order_id)
                if current is not None and current.payment_status == PaymentStatus.PAID:
                    logger.warning("Order settled concurrently", order_id=order_id, payment_id=payment.payment_id)
                    raise Conflict(f"Order {order_id} is already paid", order_id=order_id) from exc
            raise

        freed = seq.run(
            "vacate_table",
            "freeing the table holding this order",
            lambda: self._vacate_tables_for(order_id),
            if_interrupted=(
                f"Payment {payment.payment_id} was recorded and order {order_id} completed, "
                "but its table may still show occupied"
            ),
        )

        logger.info(
            "Payment settled",
            payment_id=payment.payment_id,
            order_id=order_id,
            amount=str(amount),
            method=method,
            cashier=cashier,
            freed_tables=freed,
        )
        return payment

    def _vacate_tables_for(self, order_id: str) -> list[str]:
        freed = []
        for table in self._store.list_tables_for_order(order_id):
            self._store.update_table(
                table.table_no,
                {"status": TableStatus.VACANT, "current_order_id": None},
                expect={"current_order_id": order_id},
            )
            freed.append(table.table_no)
        if not freed:
            logger.warning("No table referenced the settled order", order_id=order_id)
        return freed

    # -------------------------------------------------------------------------
    # TransferTable
    # -------------------------------------------------------------------------

    def transfer_table(self, order_id: str, from_table: str, to_table: str) -> Order:
        """
        Move a live order to another, vacant table.

        Steps: occupy the destination (conditional on vacant), point the
        order at it, vacate the source (conditional on it still holding the order).
        """
        if from_table == to_table:
            raise ValidationFailure("Source and destination table are the same", table_no=from_table)

        order = self._require_order(order_id)
        if not order.is_live:
            raise InvalidTransition(
                f"Order {order_id} is '{order.status}' and can no longer change tables",
                order_id=order_id,
                status=order.status,
            )

        source = self._require_table(from_table)
        destination = self._require_table(to_table)

        if source.current_order_id != order_id:
            raise Conflict(
                f"Table {from_table} does not hold order {order_id}",
                table_no=from_table,
                current_order_id=source.current_order_id,
            )
        if destination.status != TableStatus.VACANT:
            raise InvalidTransition(
                f"Table {to_table} is occupied; orders can only move to a vacant table",
                table_no=to_table,
                current_order_id=destination.current_order_id,
            )

        seq = StepSequence(
            "transfer_table",
            {"order_id": order_id, "from_table": from_table, "to_table": to_table},
        )

        seq.run(
            "occupy_destination",
            f"claiming table {to_table}",
            lambda: self._store.update_table(
                to_table,
                {"status": TableStatus.OCCUPIED, "current_order_id": order_id},
                expect={"status": TableStatus.VACANT, "current_order_id": None},
            ),
            if_interrupted="",
        )
        updated = seq.run(
            "move_order",
            f"pointing order at table {to_table}",
            lambda: self._store.update_order(
                order_id,
                {"table_no": to_table},
                expect={"table_no": order.table_no},
            ),
            if_interrupted=(
                f"Table {to_table} now holds order {order_id} but the order still "
                f"points at table {from_table}, which also still shows occupied"
            ),
        )
        seq.run(
            "vacate_source",
            f"freeing table {from_table}",
            lambda: self._store.update_table(
                from_table,
                {"status": TableStatus.VACANT, "current_order_id": None},
                expect={"current_order_id": order_id},
            ),
            if_interrupted=(
                f"Order {order_id} moved to table {to_table} but table {from_table} "
                "may still show occupied"
            ),
        )

        logger.info("Order moved to another table", order_id=order_id, from_table=from_table, to_table=to_table)
        return updated
