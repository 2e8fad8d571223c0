"""
Domain Services.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    DataStore (data access)
        ↓
    Model (entity)

Usage:
    from pos_api.services.domain import LifecycleService

    # In router
    service = LifecycleService(store)
    order = service.place_order("5", [{"item_id": item_id, "quantity": 2}])
"""

from .errors import (
    Conflict,
    InvalidTransition,
    LifecycleError,
    NotFound,
    PartialCommit,
    UpstreamFailure,
    ValidationFailure,
)
from .lifecycle_service import LifecycleService
from .table_service import TableService
from .menu_service import MenuService
from .kitchen_service import KitchenService
from .checkout_service import CheckoutService
from .reconcile_service import Drift, ReconcileReport, find_drift, reconcile

__all__ = [
    # Errors
    "LifecycleError",
    "NotFound",
    "InvalidTransition",
    "ValidationFailure",
    "Conflict",
    "UpstreamFailure",
    "PartialCommit",
    # Services
    "LifecycleService",
    "TableService",
    "MenuService",
    "KitchenService",
    "CheckoutService",
    # Reconcile
    "Drift",
    "ReconcileReport",
    "find_drift",
    "reconcile",
]
