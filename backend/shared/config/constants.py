"""
Centralized constants for the backend application.
Avoids magic strings for statuses and holds the order status transition table.

Usage:
    from shared.config.constants import OrderStatus, ORDER_TRANSITIONS

    if new_status in ORDER_TRANSITIONS[order.status]:
        ...
"""

from typing import Final


# =============================================================================
# Entity Status Constants
# =============================================================================


class TableStatus:
    """Table occupancy status."""

    VACANT: Final[str] = "vacant"
    OCCUPIED: Final[str] = "occupied"

    ALL: Final[list[str]] = [VACANT, OCCUPIED]


class OrderStatus:
    """Order lifecycle status."""

    PENDING: Final[str] = "pending"
    READY: Final[str] = "ready"
    SERVED: Final[str] = "served"  # Optional step, some front ends skip it
    COMPLETED: Final[str] = "completed"  # Reached only through settlement

    ALL: Final[list[str]] = [PENDING, READY, SERVED, COMPLETED]
    LIVE: Final[list[str]] = [PENDING, READY, SERVED]
    KITCHEN_VISIBLE: Final[list[str]] = [PENDING, READY, SERVED]


class PaymentStatus:
    """Order settlement status."""

    PENDING: Final[str] = "pending"
    PAID: Final[str] = "paid"

    ALL: Final[list[str]] = [PENDING, PAID]


# =============================================================================
# Status Transitions
# =============================================================================

# Transitions allowed through AdvanceOrderStatus (from -> [allowed to states]).
# COMPLETED is deliberately absent as a target: only settlement completes an order.
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING: [OrderStatus.READY],
    OrderStatus.READY: [OrderStatus.SERVED],
    OrderStatus.SERVED: [],
    OrderStatus.COMPLETED: [],  # Terminal state
}

# States from which settlement may complete an order
SETTLEABLE_STATUSES: Final[frozenset[str]] = frozenset(OrderStatus.LIVE)


# =============================================================================
# Identifier prefixes
# =============================================================================


class IdPrefix:
    """Prefixes for generated identifiers."""

    MENU_ITEM: Final[str] = "ITEM"
    ORDER: Final[str] = "ORD"
    PAYMENT: Final[str] = "PAY"


# =============================================================================
# Defaults and Limits
# =============================================================================


class Defaults:
    """Default values applied when the caller leaves a field out."""

    CUSTOMER_NAME: Final[str] = "Customer"
    CASHIER: Final[str] = "System"
    TABLE_CAPACITY: Final[int] = 4
    KITCHEN_STATION: Final[str] = "Main Kitchen"
    PREP_TIME_MINUTES: Final[int] = 15


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    MIN_CAPACITY: Final[int] = 1
    MAX_CAPACITY: Final[int] = 50

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_TABLE_NO_LENGTH: Final[int] = 20

    # Money columns are Numeric(10, 2)
    MAX_MONEY_DIGITS: Final[int] = 8

    # Receipt and report show the random tail of the order id
    SHORT_ID_LENGTH: Final[int] = 8
    RECENT_ORDERS: Final[int] = 5
