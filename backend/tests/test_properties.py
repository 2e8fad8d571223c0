"""
Property-based tests with Hypothesis.

Each example builds its own store on the shared in-memory engine so no
function-scoped fixture is reused across generated inputs.
"""

from contextlib import contextmanager
from decimal import Decimal
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from shared.config.constants import ORDER_TRANSITIONS, OrderStatus, TableStatus
from shared.infrastructure.db import SessionLocal, engine
from shared.utils.identifiers import is_generated_id, new_id
from pos_api.models import Base
from pos_api.repositories import SqlDataStore
from pos_api.services.domain import (
    Conflict,
    InvalidTransition,
    LifecycleService,
    NotFound,
    PartialCommit,
    UpstreamFailure,
    ValidationFailure,
    find_drift,
    reconcile,
)
from pos_api.services.domain.lifecycle_service import check_transition, compute_total
from pos_api.services.snapshot import take_snapshot

TABLES = ["1", "2", "3", "4"]
PRICES = ["50.00", "149.50", "320.00"]

REJECTED = (Conflict, InvalidTransition, NotFound, ValidationFailure)


@contextmanager
def fresh_store():
    """Empty schema with four vacant tables and three menu items."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        store = SqlDataStore(session)
        for table_no in TABLES:
            store.insert_table({"table_no": table_no, "capacity": 4})
        items = [
            store.insert_menu_item({
                "item_name": f"Dish {n}",
                "category": "Mains",
                "price": Decimal(price),
                "description": None,
                "kitchen_station": "Main Kitchen",
                "prep_time": 15,
                "available": True,
            })
            for n, price in enumerate(PRICES)
        ]
        yield store, [item.item_id for item in items]
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def failing_on(method_name: str, call_no: int):
    """Patch a store method so its call_no-th call raises UpstreamFailure."""
    original = getattr(SqlDataStore, method_name)
    calls = {"n": 0}

    def wrapper(self, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == call_no:
            raise UpstreamFailure(method_name)
        return original(self, *args, **kwargs)

    return patch.object(SqlDataStore, method_name, wrapper)


# =============================================================================
# Pure helpers
# =============================================================================

money = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("9999.99"), places=2)
order_lines = st.lists(
    st.fixed_dictionaries({"price": money, "quantity": st.integers(min_value=1, max_value=99)}),
    min_size=1,
    max_size=8,
)


@given(lines=order_lines)
def test_total_is_sum_of_line_amounts(lines):
    expected = sum((line["price"] * line["quantity"] for line in lines), Decimal("0"))

    total = compute_total(lines)

    assert total == expected
    assert total.as_tuple().exponent == -2


@given(lines=order_lines)
def test_total_ignores_line_order(lines):
    assert compute_total(lines) == compute_total(list(reversed(lines)))


@given(prefix=st.sampled_from(["ORD", "PAY", "ITEM"]))
def test_generated_ids_are_well_formed_and_ordered(prefix):
    first = new_id(prefix)
    second = new_id(prefix)

    assert is_generated_id(first, prefix)
    assert is_generated_id(second, prefix)
    assert first != second
    assert first.split("-")[1] <= second.split("-")[1]


@given(
    current=st.sampled_from(OrderStatus.ALL),
    new_status=st.sampled_from(OrderStatus.ALL),
)
def test_transition_allowed_only_when_listed(current, new_status):
    allowed = new_status in ORDER_TRANSITIONS[current] and new_status != OrderStatus.COMPLETED

    if allowed:
        check_transition(current, new_status)
    else:
        with pytest.raises(InvalidTransition):
            check_transition(current, new_status)


# =============================================================================
# Stateful sequences
# =============================================================================

operations = st.lists(
    st.one_of(
        st.tuples(
            st.just("place"),
            st.sampled_from(TABLES),
            st.lists(st.tuples(st.integers(0, 2), st.integers(1, 5)), min_size=1, max_size=3),
        ),
        st.tuples(st.just("advance"), st.integers(0, 9), st.sampled_from(OrderStatus.ALL)),
        st.tuples(st.just("settle"), st.integers(0, 9), st.sampled_from(["cash", "card", "upi"])),
        st.tuples(st.just("transfer"), st.integers(0, 9), st.sampled_from(TABLES)),
    ),
    max_size=25,
)


def run_operation(service, store, item_ids, placed, op):
    kind = op[0]
    if kind == "place":
        _, table_no, picks = op
        order = service.place_order(
            table_no,
            [{"item_id": item_ids[i], "quantity": qty} for i, qty in picks],
        )
        placed.append(order.order_id)
        return
    if not placed:
        return

    order_id = placed[op[1] % len(placed)]
    if kind == "advance":
        service.advance_order_status(order_id, op[2])
    elif kind == "settle":
        order = store.get_order(order_id)
        service.settle_payment(order_id, order.total_amount, op[2])
    elif kind == "transfer":
        order = store.get_order(order_id)
        service.transfer_table(order_id, order.table_no, op[2])


@settings(max_examples=40, deadline=None)
@given(ops=operations)
def test_uninterrupted_operations_never_drift(ops):
    with fresh_store() as (store, item_ids):
        service = LifecycleService(store)
        placed: list[str] = []

        for op in ops:
            try:
                run_operation(service, store, item_ids, placed, op)
            except PartialCommit:
                raise
            except REJECTED:
                pass

        snapshot = take_snapshot(store)
        assert find_drift(snapshot) == []

        # Every occupied table holds exactly one live order, and vice versa
        live = {o["order_id"] for o in snapshot.orders if o["status"] in OrderStatus.LIVE}
        held = [t["current_order_id"] for t in snapshot.tables if t["status"] == TableStatus.OCCUPIED]
        assert sorted(held) == sorted(live)

        paid = {o["order_id"] for o in snapshot.orders if o["payment_status"] == "paid"}
        assert {p["order_id"] for p in snapshot.payments} == paid


INTERRUPTIONS = [
    ("place", "update_table", 1),
    ("settle", "update_order", 1),
    ("settle", "update_table", 1),
    ("transfer", "update_order", 1),
    ("transfer", "update_table", 2),
]


@settings(max_examples=30, deadline=None)
@given(
    interruption=st.sampled_from(INTERRUPTIONS),
    table_no=st.sampled_from(TABLES),
    quantity=st.integers(min_value=1, max_value=9),
)
def test_reconcile_repairs_any_interruption(interruption, table_no, quantity):
    operation, method_name, call_no = interruption

    with fresh_store() as (store, item_ids):
        service = LifecycleService(store)
        lines = [{"item_id": item_ids[0], "quantity": quantity}]
        destination = next(t for t in TABLES if t != table_no)

        if operation == "place":
            with failing_on(method_name, call_no), pytest.raises(PartialCommit):
                service.place_order(table_no, lines)
        else:
            order = service.place_order(table_no, lines)
            with failing_on(method_name, call_no), pytest.raises(PartialCommit):
                if operation == "settle":
                    service.settle_payment(order.order_id, order.total_amount, "cash")
                else:
                    service.transfer_table(order.order_id, table_no, destination)

        assert find_drift(take_snapshot(store)) != []

        report = reconcile(store)

        assert report.anomalies == []
        assert report.repairs
        assert find_drift(take_snapshot(store)) == []
        assert reconcile(store).clean
