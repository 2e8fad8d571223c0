"""
Tests for the order lifecycle coordinator.

Covers place order, status changes, settlement and table transfer against
a real (SQLite) data store.
"""

from decimal import Decimal

import pytest

from pos_api.services.domain import (
    Conflict,
    InvalidTransition,
    LifecycleService,
    NotFound,
    ValidationFailure,
    find_drift,
)
from pos_api.services.domain.lifecycle_service import check_transition, compute_total
from pos_api.services.snapshot import take_snapshot
from shared.utils.identifiers import is_generated_id


def assert_no_drift(store):
    assert find_drift(take_snapshot(store)) == []


class TestPlaceOrder:
    """Tests for PlaceOrder."""

    def test_place_order_occupies_table(self, lifecycle, store, seed_tables, seed_menu):
        """Placing an order creates it pending and marks the table occupied."""
        order = lifecycle.place_order(
            "5",
            [
                {"item_id": seed_menu["Paneer Tikka"].item_id, "quantity": 1},
                {"item_id": seed_menu["Butter Naan"].item_id, "quantity": 2},
            ],
        )

        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.total_amount == Decimal("250.00")
        assert order.customer_name == "Customer"
        assert is_generated_id(order.order_id, "ORD")

        table = store.get_table("5")
        assert table.status == "occupied"
        assert table.current_order_id == order.order_id
        assert_no_drift(store)

    def test_place_order_snapshots_menu_name_and_price(self, lifecycle, store, seed_tables, seed_menu):
        """Later menu edits do not change an existing order."""
        item = seed_menu["Dal Makhani"]
        order = lifecycle.place_order("3", [{"item_id": item.item_id, "quantity": 1}], customer_name="Asha")

        store.update_menu_item(item.item_id, {"price": Decimal("999.00"), "item_name": "Renamed"})

        reread = store.get_order(order.order_id)
        assert reread.items == [
            {"item_id": item.item_id, "name": "Dal Makhani", "price": "200.00", "quantity": 1}
        ]
        assert reread.total_amount == Decimal("200.00")
        assert reread.customer_name == "Asha"

    def test_place_order_on_occupied_table_conflicts(self, lifecycle, store, order_at_table_5, seed_menu):
        """A second order for an occupied table is refused without writes."""
        with pytest.raises(Conflict):
            lifecycle.place_order("5", [{"item_id": seed_menu["Mango Lassi"].item_id, "quantity": 1}])

        assert len(store.list_orders()) == 1
        assert store.get_table("5").current_order_id == order_at_table_5.order_id

    def test_place_order_empty_items(self, lifecycle, store, seed_tables):
        with pytest.raises(ValidationFailure):
            lifecycle.place_order("5", [])
        assert store.list_orders() == []
        assert store.get_table("5").status == "vacant"

    @pytest.mark.parametrize("quantity", [0, -1, 100, "2", 1.5])
    def test_place_order_bad_quantity(self, lifecycle, store, seed_tables, seed_menu, quantity):
        with pytest.raises(ValidationFailure):
            lifecycle.place_order("5", [{"item_id": seed_menu["Butter Naan"].item_id, "quantity": quantity}])
        assert store.list_orders() == []

    def test_place_order_unknown_item(self, lifecycle, store, seed_tables):
        with pytest.raises(NotFound):
            lifecycle.place_order("5", [{"item_id": "ITEM-missing", "quantity": 1}])
        assert store.list_orders() == []

    def test_place_order_unavailable_item(self, lifecycle, store, seed_tables, seed_menu):
        with pytest.raises(ValidationFailure, match="not available"):
            lifecycle.place_order("5", [{"item_id": seed_menu["Seasonal Special"].item_id, "quantity": 1}])
        assert store.get_table("5").status == "vacant"

    def test_place_order_unknown_table(self, lifecycle, store, seed_tables, seed_menu):
        with pytest.raises(NotFound):
            lifecycle.place_order("99", [{"item_id": seed_menu["Butter Naan"].item_id, "quantity": 1}])
        assert store.list_orders() == []


class TestAdvanceOrderStatus:
    """Tests for AdvanceOrderStatus."""

    def test_pending_to_ready_to_served(self, lifecycle, store, order_at_table_5):
        order = lifecycle.advance_order_status(order_at_table_5.order_id, "ready")
        assert order.status == "ready"

        order = lifecycle.advance_order_status(order_at_table_5.order_id, "served")
        assert order.status == "served"

        # Never touches the table
        assert store.get_table("5").current_order_id == order_at_table_5.order_id

    def test_replay_is_noop(self, lifecycle, store, order_at_table_5):
        """Repeating the transition that already happened writes nothing."""
        first = lifecycle.advance_order_status(order_at_table_5.order_id, "ready")
        before = store.get_order(order_at_table_5.order_id).updated_at

        again = lifecycle.advance_order_status(order_at_table_5.order_id, "ready")

        assert again.status == "ready"
        assert first.order_id == again.order_id
        assert store.get_order(order_at_table_5.order_id).updated_at == before

    @pytest.mark.parametrize("target", ["completed", "pending", "served", "cooking"])
    def test_invalid_from_pending(self, lifecycle, order_at_table_5, target):
        with pytest.raises(InvalidTransition):
            lifecycle.advance_order_status(order_at_table_5.order_id, target)

    def test_completed_order_cannot_go_back(self, lifecycle, store, order_at_table_5):
        lifecycle.settle_payment(order_at_table_5.order_id, "250", "cash")

        with pytest.raises(InvalidTransition):
            lifecycle.advance_order_status(order_at_table_5.order_id, "ready")
        assert store.get_order(order_at_table_5.order_id).status == "completed"

    def test_unknown_order(self, lifecycle, seed_tables):
        with pytest.raises(NotFound):
            lifecycle.advance_order_status("ORD-nope", "ready")

    def test_changed_under_us_conflicts(self, lifecycle, store, order_at_table_5):
        """A concurrent change between read and write surfaces as Conflict."""
        stale = store.get_order(order_at_table_5.order_id)
        store.update_order(order_at_table_5.order_id, {"status": "ready"})

        with pytest.raises(Conflict):
            store.update_order(stale.order_id, {"status": "ready"}, expect={"status": "pending"})

    def test_transition_table(self):
        check_transition("pending", "ready")
        check_transition("ready", "served")
        for current, target in [("served", "ready"), ("ready", "pending"), ("pending", "served")]:
            with pytest.raises(InvalidTransition):
                check_transition(current, target)


class TestSettlePayment:
    """Tests for SettlePayment."""

    def test_settle_completes_order_and_frees_table(self, lifecycle, store, order_at_table_5):
        payment = lifecycle.settle_payment(order_at_table_5.order_id, 250, "cash")

        assert payment.amount == Decimal("250.00")
        assert payment.method == "cash"
        assert payment.cashier == "System"
        assert is_generated_id(payment.payment_id, "PAY")

        order = store.get_order(order_at_table_5.order_id)
        assert order.payment_status == "paid"
        assert order.status == "completed"
        assert order.completed_at is not None

        table = store.get_table("5")
        assert table.status == "vacant"
        assert table.current_order_id is None
        assert_no_drift(store)

    def test_method_is_normalized(self, lifecycle, order_at_table_5):
        payment = lifecycle.settle_payment(order_at_table_5.order_id, "250.00", "  UPI ", cashier="Ravi")
        assert payment.method == "upi"
        assert payment.cashier == "Ravi"

    def test_amount_mismatch_writes_nothing(self, lifecycle, store, seed_tables, seed_menu):
        """An order totalling 450 settled with 400 is rejected with no side effects."""
        order = lifecycle.place_order(
            "3",
            [
                {"item_id": seed_menu["Dal Makhani"].item_id, "quantity": 2},
                {"item_id": seed_menu["Butter Naan"].item_id, "quantity": 1},
            ],
        )
        assert order.total_amount == Decimal("450.00")

        with pytest.raises(ValidationFailure, match="does not match"):
            lifecycle.settle_payment(order.order_id, 400, "card")

        assert store.list_payments() == []
        assert store.get_order(order.order_id).payment_status == "pending"
        assert store.get_table("3").status == "occupied"

    def test_double_settlement_conflicts(self, lifecycle, store, order_at_table_5):
        lifecycle.settle_payment(order_at_table_5.order_id, 250, "cash")

        with pytest.raises(Conflict):
            lifecycle.settle_payment(order_at_table_5.order_id, 250, "cash")

        assert len(store.list_payments()) == 1

    @pytest.mark.parametrize("amount", ["abc", -5, None, True, "NaN", "249.996", "250.001", "1e30", 10**9])
    def test_invalid_amount(self, lifecycle, store, order_at_table_5, amount):
        with pytest.raises(ValidationFailure):
            lifecycle.settle_payment(order_at_table_5.order_id, amount, "cash")
        assert store.list_payments() == []

    def test_trailing_zero_amount_accepted(self, lifecycle, store, order_at_table_5):
        payment = lifecycle.settle_payment(order_at_table_5.order_id, "250.000", "cash")
        assert payment.amount == Decimal("250.00")

    def test_blank_method(self, lifecycle, store, order_at_table_5):
        with pytest.raises(ValidationFailure):
            lifecycle.settle_payment(order_at_table_5.order_id, 250, "   ")
        assert store.list_payments() == []

    def test_unknown_order(self, lifecycle, seed_tables):
        with pytest.raises(NotFound):
            lifecycle.settle_payment("ORD-nope", 10, "cash")

    def test_existing_payment_with_other_amount_conflicts(self, lifecycle, store, order_at_table_5):
        store.insert_payment({
            "order_id": order_at_table_5.order_id,
            "amount": Decimal("100.00"),
            "method": "cash",
            "cashier": "System",
        })

        with pytest.raises(Conflict):
            lifecycle.settle_payment(order_at_table_5.order_id, 250, "cash")

        assert store.get_order(order_at_table_5.order_id).payment_status == "pending"

    def test_settles_from_any_live_status(self, lifecycle, store, order_at_table_5):
        lifecycle.advance_order_status(order_at_table_5.order_id, "ready")
        lifecycle.advance_order_status(order_at_table_5.order_id, "served")

        lifecycle.settle_payment(order_at_table_5.order_id, 250, "card")

        assert store.get_order(order_at_table_5.order_id).status == "completed"


class TestTransferTable:
    """Tests for TransferTable."""

    def test_transfer_moves_order(self, lifecycle, store, seed_tables, seed_menu):
        order = lifecycle.place_order("3", [{"item_id": seed_menu["Mango Lassi"].item_id, "quantity": 2}])

        moved = lifecycle.transfer_table(order.order_id, "3", "7")

        assert moved.table_no == "7"
        assert store.get_table("3").status == "vacant"
        assert store.get_table("3").current_order_id is None
        assert store.get_table("7").status == "occupied"
        assert store.get_table("7").current_order_id == order.order_id
        assert_no_drift(store)

    def test_transfer_then_settle_frees_new_table(self, lifecycle, store, order_at_table_5):
        lifecycle.transfer_table(order_at_table_5.order_id, "5", "2")
        lifecycle.settle_payment(order_at_table_5.order_id, 250, "qr")

        assert store.get_table("2").status == "vacant"
        assert store.get_table("5").status == "vacant"
        assert_no_drift(store)

    def test_same_table(self, lifecycle, order_at_table_5):
        with pytest.raises(ValidationFailure):
            lifecycle.transfer_table(order_at_table_5.order_id, "5", "5")

    def test_destination_occupied(self, lifecycle, store, order_at_table_5, seed_menu):
        other = lifecycle.place_order("7", [{"item_id": seed_menu["Butter Naan"].item_id, "quantity": 1}])

        with pytest.raises(InvalidTransition):
            lifecycle.transfer_table(order_at_table_5.order_id, "5", "7")

        assert store.get_table("7").current_order_id == other.order_id
        assert store.get_order(order_at_table_5.order_id).table_no == "5"

    def test_source_does_not_hold_order(self, lifecycle, order_at_table_5):
        with pytest.raises(Conflict):
            lifecycle.transfer_table(order_at_table_5.order_id, "3", "7")

    def test_completed_order_cannot_move(self, lifecycle, order_at_table_5):
        lifecycle.settle_payment(order_at_table_5.order_id, 250, "cash")
        with pytest.raises(InvalidTransition):
            lifecycle.transfer_table(order_at_table_5.order_id, "5", "7")

    def test_unknown_tables(self, lifecycle, order_at_table_5):
        with pytest.raises(NotFound):
            lifecycle.transfer_table(order_at_table_5.order_id, "5", "42")


class TestTotals:
    def test_compute_total_rounds_to_cents(self):
        lines = [
            {"price": "10.10", "quantity": 3},
            {"price": "0.05", "quantity": 1},
        ]
        assert compute_total(lines) == Decimal("30.35")

    def test_new_service_instances_share_nothing(self, store, order_at_table_5):
        """The coordinator keeps no state between calls."""
        order = LifecycleService(store).get_order(order_at_table_5.order_id)
        assert order.order_id == order_at_table_5.order_id
