"""
Orders router.
Order entry and status changes.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from shared.config.constants import OrderStatus
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import AdvanceOrderStatusRequest, OrderOutput, PlaceOrderRequest
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store, schedule_mirror_push
from pos_api.services.domain import LifecycleService


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=list[OrderOutput])
def list_orders(
    status_filter: str = Query("all", alias="status"),
    store: DataStore = Depends(get_store),
):
    """Orders newest first, optionally filtered by status."""
    if status_filter != "all" and status_filter not in OrderStatus.ALL:
        raise ValidationError(f"Unknown order status '{status_filter}'")
    with domain_errors():
        return store.list_orders(status_filter)


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(order_id: str, store: DataStore = Depends(get_store)):
    with domain_errors():
        return LifecycleService(store).get_order(order_id)


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def place_order(
    body: PlaceOrderRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """
    Place an order for a vacant table and mark the table occupied.

    409 if the table is already occupied.
    """
    with domain_errors():
        order = LifecycleService(store).place_order(
            body.table_no,
            [line.model_dump() for line in body.items],
            customer_name=body.customer_name,
        )
    schedule_mirror_push(background_tasks)
    return order


@router.post("/{order_id}/status", response_model=OrderOutput)
def advance_order_status(
    order_id: str,
    body: AdvanceOrderStatusRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """pending → ready → served. Completion happens only through checkout."""
    with domain_errors():
        order = LifecycleService(store).advance_order_status(order_id, body.status)
    schedule_mirror_push(background_tasks)
    return order
