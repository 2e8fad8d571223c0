"""
SQLAlchemy ORM Models Package.

- base: Base class, TimestampMixin
- table: RestaurantTable
- menu: MenuItem
- order: Order (line items embedded)
- payment: Payment
"""

from .base import Base, TimestampMixin, utcnow
from .table import RestaurantTable
from .menu import MenuItem
from .order import Order
from .payment import Payment

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "RestaurantTable",
    "MenuItem",
    "Order",
    "Payment",
]
