"""FastAPI dependencies and application session wiring."""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from app.core.config import Settings, settings
from app.services.cart.store import CartStore
from app.services.catalog.base import RestaurantGateway
from app.services.catalog.in_memory import InMemoryGateway
from app.services.catalog.remote import RemoteGateway
from app.services.catalog.repository import CatalogRepository
from app.services.ordering.workflow import OrderWorkflow


@dataclass
class AppSession:
    """Objects that live for one application session."""

    gateway: RestaurantGateway
    cart_store: CartStore
    catalog: CatalogRepository
    order_workflow: OrderWorkflow

    async def close(self) -> None:
        await self.gateway.close()


def build_gateway(config: Settings) -> RestaurantGateway:
    """Create the gateway selected by configuration."""
    if config.use_in_memory_gateway:
        return InMemoryGateway(catalog_file=config.catalog_file)
    return RemoteGateway(
        base_url=config.gateway_base_url,
        api_key=config.partner_api_key,
        request_timeout=config.request_timeout,
        resource_timeout=config.resource_timeout,
    )


def build_app_session(
    config: Settings = settings, gateway: Optional[RestaurantGateway] = None
) -> AppSession:
    """Wire a cart store, catalog and order workflow around one gateway."""
    gateway = gateway or build_gateway(config)
    cart_store = CartStore(cgst_rate=config.cgst_rate, sgst_rate=config.sgst_rate)
    return AppSession(
        gateway=gateway,
        cart_store=cart_store,
        catalog=CatalogRepository(gateway, page_size=config.catalog_page_size),
        order_workflow=OrderWorkflow(cart_store, gateway),
    )


def get_app_session(request: Request) -> AppSession:
    """Get the session created at startup."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        session = build_app_session()
        request.app.state.session = session
    return session
