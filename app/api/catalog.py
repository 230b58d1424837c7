"""Catalog API endpoints."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.schemas import CuisinePageResponse, to_http_exception
from app.core.config import settings
from app.core.dependencies import AppSession, get_app_session
from app.services.catalog.models import Cuisine, Dish
from app.services.ordering.errors import OrderError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/cuisines", response_model=List[Cuisine])
async def list_cuisines(
    page: int = Query(1, ge=1),
    count: int = Query(settings.catalog_page_size, ge=1),
    session: AppSession = Depends(get_app_session),
):
    """Get one page of cuisines with their dishes."""
    logger.info(f"[CATALOG API] Cuisine list requested - page: {page}, count: {count}")
    try:
        return await session.catalog.get_cuisines(page, count)
    except OrderError as e:
        logger.error(f"[CATALOG API] Error fetching cuisines - {e.kind}: {e}")
        raise to_http_exception(e)


@router.get("/api/dishes/top", response_model=List[Dish])
async def top_dishes(
    min_rating: float = Query(settings.top_dish_min_rating, ge=0),
    limit: int = Query(settings.top_dish_limit, ge=1),
    session: AppSession = Depends(get_app_session),
):
    """Get the highest rated dishes."""
    logger.info(f"[CATALOG API] Top dishes requested - min_rating: {min_rating}, limit: {limit}")
    try:
        return await session.catalog.top_dishes(min_rating=min_rating, limit=limit)
    except OrderError as e:
        logger.error(f"[CATALOG API] Error fetching top dishes - {e.kind}: {e}")
        raise to_http_exception(e)


@router.get("/api/dishes/{item_id}", response_model=Dish)
async def get_dish(item_id: str, session: AppSession = Depends(get_app_session)):
    """Get a single dish, including its cuisine id."""
    logger.info(f"[CATALOG API] Dish requested - item_id: {item_id}")
    try:
        return await session.catalog.get_dish(item_id)
    except OrderError as e:
        logger.error(f"[CATALOG API] Error fetching dish {item_id} - {e.kind}: {e}")
        raise to_http_exception(e)


def _cuisine_page(session: AppSession, loaded: List[Cuisine]) -> CuisinePageResponse:
    catalog = session.catalog
    return CuisinePageResponse(
        cuisines=catalog.cuisines,
        loaded=loaded,
        total=catalog.total_cuisines,
        has_more=catalog.has_more,
    )


@router.post("/api/cuisines/first", response_model=CuisinePageResponse)
async def load_first_cuisines(session: AppSession = Depends(get_app_session)):
    """Reset the session catalog and load its first page of cuisines."""
    logger.info("[CATALOG API] First cuisine page requested")
    try:
        loaded = await session.catalog.load_first_page()
    except OrderError as e:
        logger.error(f"[CATALOG API] Error loading first cuisine page - {e.kind}: {e}")
        raise to_http_exception(e)
    return _cuisine_page(session, list(loaded))


@router.post("/api/cuisines/more", response_model=CuisinePageResponse)
async def load_more_cuisines(session: AppSession = Depends(get_app_session)):
    """Append the next page of cuisines to the session catalog."""
    logger.info("[CATALOG API] Next cuisine page requested")
    try:
        loaded = await session.catalog.load_more()
    except OrderError as e:
        logger.error(f"[CATALOG API] Error loading more cuisines - {e.kind}: {e}")
        raise to_http_exception(e)
    return _cuisine_page(session, loaded)
