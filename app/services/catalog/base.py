"""Partner gateway interface."""
from abc import ABC, abstractmethod

from app.services.catalog.models import (
    CuisineListResponse,
    ItemDetailResponse,
    ItemFilterResponse,
)
from app.services.ordering.models import PaymentRequest, PaymentResponse


class RestaurantGateway(ABC):
    """
    Abstract base class for the remote catalog and payment API.

    Implementations raise ``TransportError`` when a call does not complete
    normally. Business status codes are returned as-is for the caller to judge.
    """

    @abstractmethod
    async def get_cuisines(self, page: int, count: int) -> CuisineListResponse:
        """Get one page of cuisines with their embedded dishes."""
        pass

    @abstractmethod
    async def get_item_by_id(self, item_id: str) -> ItemDetailResponse:
        """Get a single dish and the cuisine it belongs to."""
        pass

    @abstractmethod
    async def get_items_by_filter(self, min_rating: float) -> ItemFilterResponse:
        """Get cuisines whose embedded dishes are rated at least min_rating."""
        pass

    @abstractmethod
    async def make_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Execute a payment for the given order."""
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
