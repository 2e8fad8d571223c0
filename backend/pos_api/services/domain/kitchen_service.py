"""
Kitchen Service.

Read-only board of the orders the kitchen is working on. Status changes go
through the lifecycle service.
"""

from typing import Sequence

from shared.config.constants import OrderStatus
from shared.config.logging import kitchen_logger as logger
from pos_api.models import Order
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import ValidationFailure


class KitchenService:
    def __init__(self, store: DataStore):
        self._store = store

    def kitchen_orders(self, status: str = "all") -> Sequence[Order]:
        """Kitchen-visible orders, oldest first, optionally limited to one status."""
        if status != "all" and status not in OrderStatus.KITCHEN_VISIBLE:
            raise ValidationFailure(f"Kitchen board cannot filter by status '{status}'", status=status)

        orders = [
            o for o in self._store.list_orders(status)
            if o.status in OrderStatus.KITCHEN_VISIBLE
        ]
        orders.reverse()
        logger.debug("Kitchen board read", status=status, count=len(orders))
        return orders
