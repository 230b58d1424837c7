"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import cart, catalog, health, orders
from app.core.config import settings
from app.core.dependencies import build_app_session
from app.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    app.state.session = build_app_session(settings)
    yield
    # Shutdown
    await app.state.session.close()


app = FastAPI(
    title="Restaurant Cart Service",
    description="Catalog browsing, cart and order submission for a restaurant partner API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(cart.router, tags=["cart"])
app.include_router(orders.router, tags=["orders"])
