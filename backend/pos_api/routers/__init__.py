"""
HTTP routers.
"""

from pos_api.routers.health import router as health_router
from pos_api.routers.tables import router as tables_router
from pos_api.routers.menu import router as menu_router
from pos_api.routers.orders import router as orders_router
from pos_api.routers.kitchen import router as kitchen_router
from pos_api.routers.checkout import router as checkout_router
from pos_api.routers.sync import router as sync_router

__all__ = [
    "health_router",
    "tables_router",
    "menu_router",
    "orders_router",
    "kitchen_router",
    "checkout_router",
    "sync_router",
]
