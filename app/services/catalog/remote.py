"""Partner API gateway over HTTP."""
import asyncio
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from app.services.catalog.base import RestaurantGateway
from app.services.catalog.models import (
    CuisineListResponse,
    ItemDetailResponse,
    ItemFilterResponse,
)
from app.services.ordering.errors import TransportError
from app.services.ordering.models import PaymentRequest, PaymentResponse

logger = logging.getLogger(__name__)

ENDPOINT_PREFIX = "/emulator/interview"

GET_ITEM_LIST = "get_item_list"
GET_ITEM_BY_ID = "get_item_by_id"
GET_ITEM_BY_FILTER = "get_item_by_filter"
MAKE_PAYMENT = "make_payment"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class RemoteGateway(RestaurantGateway):
    """Gateway calling the partner's proxy endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        request_timeout: float = 30.0,
        resource_timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Partner API origin
            api_key: Value of the ``X-Partner-API-Key`` header
            request_timeout: Per-request timeout in seconds
            resource_timeout: Upper bound for a whole call in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.resource_timeout = resource_timeout
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(request_timeout),
            transport=transport,
        )

    def _headers(self, action: str) -> Dict[str, str]:
        return {
            "X-Partner-API-Key": self.api_key,
            "X-Forward-Proxy-Action": action,
            "Content-Type": "application/json",
        }

    async def _post(
        self, action: str, body: Dict[str, Any], response_type: Type[ResponseT]
    ) -> ResponseT:
        """POST to an action endpoint and decode the response."""
        endpoint = f"{ENDPOINT_PREFIX}/{action}"
        logger.debug(f"[GATEWAY] Making API call: {endpoint} with body: {body}")

        try:
            response = await asyncio.wait_for(
                self.client.post(endpoint, json=body, headers=self._headers(action)),
                timeout=self.resource_timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.error(f"[GATEWAY] Request timed out for {endpoint}")
            raise TransportError("Network Error: The request timed out.")
        except httpx.HTTPError as e:
            logger.error(f"[GATEWAY] Network failure for {endpoint}: {type(e).__name__}: {e}")
            raise TransportError(f"Network Error: {e}")

        logger.debug(f"[GATEWAY] API Response Status for {endpoint}: {response.status_code}")
        logger.debug(f"[GATEWAY] API Response Data for {endpoint}: {response.text}")
        self._raise_for_status(endpoint, response)

        try:
            return response_type.model_validate(response.json())
        except (ValueError, SchemaValidationError) as e:
            logger.error(f"[GATEWAY] Decoding error for {endpoint}: {e}")
            raise TransportError(f"Data Decoding Error: {e}")

    def _raise_for_status(self, endpoint: str, response: httpx.Response) -> None:
        status = response.status_code
        if status == 401:
            logger.error(f"[GATEWAY] Unauthorized request for {endpoint}.")
            raise TransportError("Unauthorized. Please log in again.")
        if status == 400:
            message = None
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and isinstance(payload.get("response_message"), str):
                message = payload["response_message"]
            if message:
                logger.error(f"[GATEWAY] Bad Request for {endpoint}: {message}")
                raise TransportError(f"Bad Request: {message}")
            logger.error(f"[GATEWAY] Bad Request for {endpoint}.")
            raise TransportError("Bad Request.")
        if not 200 <= status < 300:
            logger.error(f"[GATEWAY] HTTP Error {status} for {endpoint}.")
            raise TransportError(f"HTTP Error: {status}")

    async def get_cuisines(self, page: int, count: int) -> CuisineListResponse:
        return await self._post(
            GET_ITEM_LIST, {"page": page, "count": count}, CuisineListResponse
        )

    async def get_item_by_id(self, item_id: str) -> ItemDetailResponse:
        return await self._post(GET_ITEM_BY_ID, {"item_id": item_id}, ItemDetailResponse)

    async def get_items_by_filter(self, min_rating: float) -> ItemFilterResponse:
        return await self._post(
            GET_ITEM_BY_FILTER, {"min_rating": min_rating}, ItemFilterResponse
        )

    async def make_payment(self, request: PaymentRequest) -> PaymentResponse:
        return await self._post(MAKE_PAYMENT, request.model_dump(mode="json"), PaymentResponse)

    async def close(self) -> None:
        await self.client.aclose()
