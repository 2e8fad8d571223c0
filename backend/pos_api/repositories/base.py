"""
Data Store interface.

The lifecycle services talk to persistence only through this interface.
Each write method is one durable, individually committed call: there is no
multi-record transaction spanning two calls.

Errors raised by implementations:
- NotFound: the keyed record does not exist (updates)
- Conflict: an `expect` precondition did not hold, or a uniqueness rule was hit
- UpstreamFailure: the store itself failed
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from pos_api.models import MenuItem, Order, Payment, RestaurantTable


class DataStore(ABC):
    """Abstract data store for tables, menu items, orders and payments."""

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_tables(self) -> Sequence[RestaurantTable]:
        """All tables ordered by table number ascending."""
        ...

    @abstractmethod
    def get_table(self, table_no: str) -> RestaurantTable | None:
        ...

    @abstractmethod
    def list_tables_for_order(self, order_id: str) -> Sequence[RestaurantTable]:
        """Tables whose current_order_id is the given order."""
        ...

    @abstractmethod
    def insert_table(self, data: dict[str, Any]) -> RestaurantTable:
        ...

    @abstractmethod
    def update_table(
        self,
        table_no: str,
        fields: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> RestaurantTable:
        """
        Update a table. When `expect` is given the write only applies if every
        listed column still has the expected value; otherwise Conflict.
        """
        ...

    # -------------------------------------------------------------------------
    # Menu
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_menu_items(self) -> Sequence[MenuItem]:
        """All menu items ordered by category."""
        ...

    @abstractmethod
    def get_menu_item(self, item_id: str) -> MenuItem | None:
        ...

    @abstractmethod
    def insert_menu_item(self, data: dict[str, Any]) -> MenuItem:
        """Insert a menu item; the store assigns item_id."""
        ...

    @abstractmethod
    def update_menu_item(self, item_id: str, fields: dict[str, Any]) -> MenuItem:
        ...

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_orders(self, status: str = "all") -> Sequence[Order]:
        """Orders newest first, optionally restricted to one status."""
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Order | None:
        ...

    @abstractmethod
    def insert_order(self, data: dict[str, Any]) -> Order:
        """Insert an order; the store assigns order_id and timestamp."""
        ...

    @abstractmethod
    def update_order(
        self,
        order_id: str,
        fields: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> Order:
        """Update an order, optionally conditional on `expect` (see update_table)."""
        ...

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_payments(self) -> Sequence[Payment]:
        ...

    @abstractmethod
    def get_payment_for_order(self, order_id: str) -> Payment | None:
        ...

    @abstractmethod
    def insert_payment(self, data: dict[str, Any]) -> Payment:
        """
        Insert a payment; the store assigns payment_id and payment_time.
        A second payment for the same order raises Conflict.
        """
        ...
