"""Cart API endpoints."""
import logging

from fastapi import APIRouter, Depends

from app.api.schemas import CartResponse
from app.core.dependencies import AppSession, get_app_session
from app.services.catalog.models import Dish

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/cart", response_model=CartResponse)
async def get_cart(session: AppSession = Depends(get_app_session)):
    """Get cart lines and totals."""
    return CartResponse.from_snapshot(session.cart_store.snapshot())


@router.post("/api/cart/items", response_model=CartResponse)
async def add_cart_item(dish: Dish, session: AppSession = Depends(get_app_session)):
    """Add one unit of a dish."""
    logger.info(f"[CART API] Add dish - id: {dish.id}, name: {dish.name}")
    return CartResponse.from_snapshot(session.cart_store.add_dish(dish))


@router.delete("/api/cart/items/{dish_id}", response_model=CartResponse)
async def remove_cart_item(dish_id: str, session: AppSession = Depends(get_app_session)):
    """Remove one unit of a dish. Removing an absent dish changes nothing."""
    logger.info(f"[CART API] Remove dish - id: {dish_id}")
    line = session.cart_store.get_line(dish_id)
    if line is None:
        return CartResponse.from_snapshot(session.cart_store.snapshot())
    return CartResponse.from_snapshot(session.cart_store.remove_dish(line.dish))


@router.delete("/api/cart", response_model=CartResponse)
async def clear_cart(session: AppSession = Depends(get_app_session)):
    """Empty the cart."""
    logger.info("[CART API] Clear cart")
    return CartResponse.from_snapshot(session.cart_store.clear())
