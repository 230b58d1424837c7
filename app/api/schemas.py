"""Response models shared by the API routers."""
from typing import List, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from app.services.cart.models import CartSnapshot
from app.services.catalog.models import Cuisine, Dish
from app.services.ordering.builder import format_amount
from app.services.ordering.errors import (
    BusinessError,
    OrderError,
    OrderInProgressError,
    TransportError,
    ValidationError,
)
from app.services.ordering.models import OrderOutcome


class CartLineResponse(BaseModel):
    """Cart line response model."""
    dish: Dish
    quantity: int
    line_total: str


class CartResponse(BaseModel):
    """Cart response model. Amounts carry two decimals."""
    lines: List[CartLineResponse] = []
    net_total: str
    cgst_amount: str
    sgst_amount: str
    grand_total: str
    total_items: int

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot) -> "CartResponse":
        totals = snapshot.totals
        return cls(
            lines=[
                CartLineResponse(
                    dish=line.dish,
                    quantity=line.quantity,
                    line_total=format_amount(line.line_total),
                )
                for line in snapshot.lines
            ],
            net_total=format_amount(totals.net_total),
            cgst_amount=format_amount(totals.cgst),
            sgst_amount=format_amount(totals.sgst),
            grand_total=format_amount(totals.grand_total),
            total_items=totals.total_items,
        )


class CuisinePageResponse(BaseModel):
    """Cuisines loaded so far by the session catalog."""
    cuisines: List[Cuisine] = []
    loaded: List[Cuisine] = []
    total: int
    has_more: bool


class OrderOutcomeResponse(BaseModel):
    """Order outcome response model."""
    phase: str
    reference_number: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: OrderOutcome) -> "OrderOutcomeResponse":
        return cls(
            phase=outcome.phase.value,
            reference_number=outcome.reference_number,
            message=outcome.message,
            reason=outcome.reason,
            error_kind=outcome.error_kind,
        )


def to_http_exception(error: OrderError) -> HTTPException:
    """Map an order or gateway error to an HTTP error response."""
    if isinstance(error, OrderInProgressError):
        status_code = 409
    elif isinstance(error, (ValidationError, BusinessError)):
        status_code = 422
    elif isinstance(error, TransportError):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=str(error))
