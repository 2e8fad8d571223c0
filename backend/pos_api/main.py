"""
POS API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from shared.config.settings import settings
from pos_api.core import configure_cors, lifespan, register_middlewares
from pos_api.routers import (
    checkout_router,
    health_router,
    kitchen_router,
    menu_router,
    orders_router,
    sync_router,
    tables_router,
)


app = FastAPI(
    title="Restaurant POS API",
    description="Tables, menu, orders, kitchen board and checkout for a single restaurant",
    version="0.1.0",
    lifespan=lifespan,
)

configure_cors(app)
register_middlewares(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(tables_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(kitchen_router)
app.include_router(checkout_router)
app.include_router(sync_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pos_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )
