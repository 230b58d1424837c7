"""Catalog models and gateway response envelopes."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200

# Field names of the two dish payload shapes served by the partner API.
LISTING_KEYS = {
    "id": "id",
    "name": "name",
    "image_url": "image_url",
    "price": "price",
    "rating": "rating",
}
ITEM_KEYS = {
    "id": "item_id",
    "name": "item_name",
    "image_url": "item_image_url",
    "price": "item_price",
    "rating": "item_rating",
}


def parse_price(value: Any) -> Decimal:
    """Convert a wire price (str, int or float) to Decimal, falling back to 0."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        logger.warning(f"[CATALOG] Missing or invalid price {value!r}, defaulting to 0")
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        logger.warning(f"[CATALOG] Unparsable price {value!r}, defaulting to 0")
        return Decimal("0")
    if not price.is_finite():
        logger.warning(f"[CATALOG] Non-finite price {value!r}, defaulting to 0")
        return Decimal("0")
    return price


def parse_rating(value: Any) -> Optional[float]:
    """Convert a wire rating (str or number) to float, or None if unparsable."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"[CATALOG] Unparsable rating {value!r}, ignoring")
        return None


def detect_dish_shape(data: Dict[str, Any]) -> Dict[str, str]:
    """
    Pick the key set a dish payload was written with.

    Listing endpoints use plain keys (``id``, ``price``); the single-item
    endpoint prefixes them with ``item_``.

    Raises:
        ValueError: if the payload carries neither ``id`` nor ``item_id``
    """
    if "id" in data:
        return LISTING_KEYS
    if "item_id" in data:
        return ITEM_KEYS
    raise ValueError("dish payload has neither 'id' nor 'item_id'")


class Dish(BaseModel):
    """A menu item. ``id`` is the sole key used for cart aggregation."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image_url: Optional[str] = None
    price: Decimal = Decimal("0")
    rating: Optional[float] = None
    cuisine_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_wire_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        keys = detect_dish_shape(data)
        decoded = {field: data.get(key) for field, key in keys.items()}
        decoded["cuisine_id"] = data.get("cuisine_id")
        for field in ("id", "cuisine_id"):
            if decoded[field] is not None:
                decoded[field] = str(decoded[field])
        return {k: v for k, v in decoded.items() if v is not None}

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Decimal:
        return parse_price(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> Optional[float]:
        return parse_rating(value)

    def with_cuisine(self, cuisine_id: str) -> "Dish":
        """Return a copy tagged with the cuisine it was fetched under."""
        if self.cuisine_id == cuisine_id:
            return self
        return self.model_copy(update={"cuisine_id": cuisine_id})


class Cuisine(BaseModel):
    """A cuisine category, optionally embedding its dishes."""

    model_config = ConfigDict(frozen=True)

    cuisine_id: str
    cuisine_name: str
    cuisine_image_url: Optional[str] = None
    items: Optional[List[Dish]] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_items_with_cuisine(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("cuisine_id") is None:
            return data
        cuisine_id = str(data["cuisine_id"])
        if not data.get("items"):
            return {**data, "cuisine_id": cuisine_id}
        # Listing payloads omit cuisine_id on the dish; inherit it here.
        tagged = []
        for item in data["items"]:
            if isinstance(item, Dish):
                tagged.append(item if item.cuisine_id else item.with_cuisine(cuisine_id))
            elif isinstance(item, dict) and item.get("cuisine_id") is None:
                tagged.append({**item, "cuisine_id": cuisine_id})
            else:
                tagged.append(item)
        return {**data, "cuisine_id": cuisine_id, "items": tagged}


class GatewayResponse(BaseModel):
    """Status envelope shared by every partner API response."""

    response_code: int
    outcome_code: int
    response_message: str = ""

    @property
    def is_success(self) -> bool:
        return self.response_code == SUCCESS_CODE and self.outcome_code == SUCCESS_CODE


class CuisineListResponse(GatewayResponse):
    """Response of ``get_item_list``."""

    page: int = 1
    count: int = 0
    total_pages: int = 0
    total_items: int = 0
    cuisines: List[Cuisine] = []


class ItemDetailResponse(GatewayResponse):
    """Response of ``get_item_by_id``: one dish plus its cuisine."""

    cuisine_id: str
    cuisine_name: str
    cuisine_image_url: Optional[str] = None
    item_id: str
    item_name: str
    item_price: Any = None
    item_rating: Any = None
    item_image_url: Optional[str] = None

    def to_dish(self) -> Dish:
        """Convert to a Dish carrying its cuisine id."""
        return Dish.model_validate(
            {
                "item_id": self.item_id,
                "item_name": self.item_name,
                "item_image_url": self.item_image_url,
                "item_price": self.item_price,
                "item_rating": self.item_rating,
                "cuisine_id": self.cuisine_id,
            }
        )


class ItemFilterResponse(GatewayResponse):
    """Response of ``get_item_by_filter``."""

    cuisines: List[Cuisine] = []
