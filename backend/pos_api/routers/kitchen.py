"""
Kitchen router.
Board of orders for kitchen staff.
"""

from fastapi import APIRouter, Depends, Query

from shared.utils.schemas import OrderOutput
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store
from pos_api.services.domain import KitchenService


router = APIRouter(prefix="/api/kitchen", tags=["kitchen"])


@router.get("/orders", response_model=list[OrderOutput])
def kitchen_orders(
    status_filter: str = Query("all", alias="status"),
    store: DataStore = Depends(get_store),
):
    """
    Orders the kitchen is working on (pending, ready, served),
    ordered by placement time (oldest first).
    """
    with domain_errors():
        return KitchenService(store).kitchen_orders(status_filter)
