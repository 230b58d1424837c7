"""Catalog repository."""
import logging
from typing import List

from app.services.catalog.base import RestaurantGateway
from app.services.catalog.models import Cuisine, Dish, GatewayResponse
from app.services.ordering.errors import BusinessError

logger = logging.getLogger(__name__)


def _ensure_success(response: GatewayResponse, action: str) -> None:
    if not response.is_success:
        logger.error(
            f"[CATALOG] {action} returned non-success code - "
            f"response_code: {response.response_code}, "
            f"outcome_code: {response.outcome_code}, "
            f"message: {response.response_message}"
        )
        raise BusinessError(response.response_message or f"{action} failed")


class CatalogRepository:
    """Repository for catalog browsing with incremental cuisine loading."""

    def __init__(self, gateway: RestaurantGateway, page_size: int = 10):
        self.gateway = gateway
        self.page_size = page_size
        self.cuisines: List[Cuisine] = []
        self.current_page = 0
        self.total_cuisines = 0
        self._loading = False

    async def get_cuisines(self, page: int, count: int) -> List[Cuisine]:
        """Fetch a single page without touching the loaded state."""
        response = await self.gateway.get_cuisines(page, count)
        _ensure_success(response, "get_item_list")
        return response.cuisines

    async def load_first_page(self) -> List[Cuisine]:
        """Reset and load the first page of cuisines."""
        response = await self.gateway.get_cuisines(1, self.page_size)
        _ensure_success(response, "get_item_list")
        self.cuisines = list(response.cuisines)
        self.current_page = 1
        self.total_cuisines = response.total_items
        logger.info(
            f"[CATALOG] Fetched {len(self.cuisines)} cuisine categories "
            f"(total available: {self.total_cuisines})"
        )
        return self.cuisines

    @property
    def has_more(self) -> bool:
        return self.current_page == 0 or len(self.cuisines) < self.total_cuisines

    @property
    def is_loading(self) -> bool:
        return self._loading

    async def load_more(self) -> List[Cuisine]:
        """
        Load the next page of cuisines.

        Returns:
            Newly loaded cuisines, or an empty list when everything is loaded
            or another load is still in progress
        """
        if self._loading:
            logger.debug("[CATALOG] Load already in progress, skipping")
            return []
        self._loading = True
        try:
            if self.current_page == 0:
                return list(await self.load_first_page())
            if not self.has_more:
                logger.info("[CATALOG] All cuisines loaded.")
                return []

            next_page = self.current_page + 1
            response = await self.gateway.get_cuisines(next_page, self.page_size)
            _ensure_success(response, "get_item_list")
            self.current_page = next_page
            self.total_cuisines = response.total_items
            self.cuisines.extend(response.cuisines)
            logger.info(f"[CATALOG] Fetched more cuisine categories. Total: {len(self.cuisines)}")
            return list(response.cuisines)
        finally:
            self._loading = False

    async def top_dishes(self, min_rating: float = 4.0, limit: int = 3) -> List[Dish]:
        """Highest-rated dishes across all cuisines passing the rating filter."""
        response = await self.gateway.get_items_by_filter(min_rating)
        _ensure_success(response, "get_item_by_filter")
        dishes = [dish for cuisine in response.cuisines for dish in cuisine.items or []]
        dishes.sort(key=lambda dish: dish.rating or 0.0, reverse=True)
        top = dishes[:limit]
        logger.info(f"[CATALOG] Fetched {len(top)} top dishes.")
        return top

    async def get_dish(self, item_id: str) -> Dish:
        """Fetch one dish; the result carries its cuisine id."""
        response = await self.gateway.get_item_by_id(item_id)
        _ensure_success(response, "get_item_by_id")
        logger.info(f"[CATALOG] Fetched details for dish: {response.item_name}")
        return response.to_dish()
