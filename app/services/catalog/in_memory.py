"""In-memory gateway."""
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from app.services.catalog.base import RestaurantGateway
from app.services.catalog.models import (
    Cuisine,
    CuisineListResponse,
    ItemDetailResponse,
    ItemFilterResponse,
    SUCCESS_CODE,
)
from app.services.ordering.errors import TransportError
from app.services.ordering.models import PaymentRequest, PaymentResponse

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: Dict[str, Any] = {
    "cuisines": [
        {
            "cuisine_id": "1",
            "cuisine_name": "North Indian",
            "items": [
                {"id": "101", "name": "Butter Chicken", "price": "250", "rating": "4.5"},
                {"id": "102", "name": "Dal Makhani", "price": "180", "rating": "4.2"},
            ],
        },
        {
            "cuisine_id": "2",
            "cuisine_name": "Chinese",
            "items": [
                {"id": "201", "name": "Hakka Noodles", "price": "150", "rating": "3.9"},
                {"id": "202", "name": "Manchurian", "price": "170", "rating": "4.1"},
            ],
        },
        {
            "cuisine_id": "3",
            "cuisine_name": "Italian",
            "items": [
                {"id": "301", "name": "Margherita Pizza", "price": "300", "rating": "4.7"},
            ],
        },
    ]
}


class InMemoryGateway(RestaurantGateway):
    """Gateway backed by a YAML catalog with simulated payments."""

    def __init__(
        self,
        catalog_file: Optional[str] = None,
        payment_response: Optional[PaymentResponse] = None,
    ):
        """
        Initialize with optional catalog file path.

        Args:
            catalog_file: YAML file with a top-level ``cuisines`` list
            payment_response: Fixed response returned by make_payment
        """
        self.catalog_file = Path(catalog_file) if catalog_file else None
        self.payment_response = payment_response
        self.payment_error: Optional[Exception] = None
        self.payment_requests: List[PaymentRequest] = []
        self._cuisines: Optional[List[Cuisine]] = None

    def _load_catalog(self) -> List[Cuisine]:
        """Load cuisines from YAML file."""
        if self._cuisines is None:
            if self.catalog_file is None or not self.catalog_file.exists():
                data = DEFAULT_CATALOG
            else:
                with open(self.catalog_file, "r") as f:
                    data = yaml.safe_load(f) or {}
            self._cuisines = [Cuisine.model_validate(c) for c in data.get("cuisines", [])]
            logger.debug(f"[GATEWAY] In-memory catalog loaded - {len(self._cuisines)} cuisines")
        return self._cuisines

    async def get_cuisines(self, page: int, count: int) -> CuisineListResponse:
        cuisines = self._load_catalog()
        start = max(page - 1, 0) * count
        total_pages = (len(cuisines) + count - 1) // count if count > 0 else 0
        return CuisineListResponse(
            response_code=SUCCESS_CODE,
            outcome_code=SUCCESS_CODE,
            response_message="Success",
            page=page,
            count=count,
            total_pages=total_pages,
            total_items=len(cuisines),
            cuisines=cuisines[start:start + count],
        )

    async def get_item_by_id(self, item_id: str) -> ItemDetailResponse:
        for cuisine in self._load_catalog():
            for dish in cuisine.items or []:
                if dish.id == item_id:
                    return ItemDetailResponse(
                        response_code=SUCCESS_CODE,
                        outcome_code=SUCCESS_CODE,
                        response_message="Success",
                        cuisine_id=cuisine.cuisine_id,
                        cuisine_name=cuisine.cuisine_name,
                        cuisine_image_url=cuisine.cuisine_image_url,
                        item_id=dish.id,
                        item_name=dish.name,
                        item_price=str(dish.price),
                        item_rating=dish.rating,
                        item_image_url=dish.image_url,
                    )
        raise TransportError(f"Bad Request: Item {item_id} not found")

    async def get_items_by_filter(self, min_rating: float) -> ItemFilterResponse:
        matched = []
        for cuisine in self._load_catalog():
            dishes = [d for d in cuisine.items or [] if (d.rating or 0) >= min_rating]
            if dishes:
                matched.append(cuisine.model_copy(update={"items": dishes}))
        return ItemFilterResponse(
            response_code=SUCCESS_CODE,
            outcome_code=SUCCESS_CODE,
            response_message="Success",
            cuisines=matched,
        )

    async def make_payment(self, request: PaymentRequest) -> PaymentResponse:
        self.payment_requests.append(request)
        logger.debug(
            f"[GATEWAY] In-memory payment - amount: {request.total_amount}, "
            f"items: {request.total_items}"
        )
        if self.payment_error is not None:
            raise self.payment_error
        if self.payment_response is not None:
            return self.payment_response
        return PaymentResponse(
            response_code=SUCCESS_CODE,
            outcome_code=SUCCESS_CODE,
            response_message="Transaction completed successfully",
            txn_ref_no=uuid.uuid4().hex[:12].upper(),
        )
