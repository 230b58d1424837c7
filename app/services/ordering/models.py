"""Order models."""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from app.services.catalog.models import GatewayResponse
from app.services.ordering.errors import OrderError


class PaymentItem(BaseModel):
    """One cart line as sent to the payment endpoint."""

    cuisine_id: str
    item_id: str
    item_price: float
    item_quantity: int


class PaymentRequest(BaseModel):
    """Body of ``make_payment``."""

    total_amount: str  # grand total with exactly 2 decimals
    total_items: int
    data: List[PaymentItem]


class PaymentResponse(GatewayResponse):
    """Response of ``make_payment``. Success requires both status codes to be 200."""

    txn_ref_no: str = ""


class OrderPhase(str, Enum):
    """Submission workflow phases."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OrderOutcome:
    """Published workflow state for one submission attempt."""

    phase: OrderPhase = OrderPhase.IDLE
    reference_number: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[OrderError] = None

    @classmethod
    def idle(cls) -> "OrderOutcome":
        return cls()

    @classmethod
    def submitting(cls) -> "OrderOutcome":
        return cls(phase=OrderPhase.SUBMITTING)

    @classmethod
    def succeeded(cls, reference_number: str, message: str) -> "OrderOutcome":
        return cls(phase=OrderPhase.SUCCEEDED, reference_number=reference_number, message=message)

    @classmethod
    def failed(cls, error: OrderError) -> "OrderOutcome":
        return cls(phase=OrderPhase.FAILED, reason=str(error), error=error)

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None
