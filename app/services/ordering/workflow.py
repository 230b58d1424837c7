"""Order submission workflow."""
import asyncio
import logging
from typing import Callable

from app.core.events import EventEmitter
from app.services.cart.store import CartStore
from app.services.catalog.base import RestaurantGateway
from app.services.ordering.builder import build_payment_request
from app.services.ordering.errors import (
    BusinessError,
    OrderError,
    OrderInProgressError,
    UnknownError,
    ValidationError,
)
from app.services.ordering.models import OrderOutcome, OrderPhase

logger = logging.getLogger(__name__)


class OrderWorkflow:
    """
    Validates the cart, submits the payment and interprets the result.

    Phases go IDLE -> SUBMITTING -> SUCCEEDED | FAILED, and back to IDLE on
    ``dismiss()`` or cancellation. Only one submission may be in flight.
    """

    def __init__(self, cart_store: CartStore, gateway: RestaurantGateway):
        self.cart_store = cart_store
        self.gateway = gateway
        self._outcome = OrderOutcome.idle()
        self._guard = asyncio.Lock()
        self._changes: EventEmitter[OrderOutcome] = EventEmitter("order")

    @property
    def outcome(self) -> OrderOutcome:
        return self._outcome

    @property
    def phase(self) -> OrderPhase:
        return self._outcome.phase

    def subscribe(self, handler: Callable[[OrderOutcome], None]) -> Callable[[], None]:
        """Register a handler called on every phase transition."""
        return self._changes.subscribe(handler)

    def _publish(self, outcome: OrderOutcome) -> OrderOutcome:
        self._outcome = outcome
        self._changes.emit(outcome)
        return outcome

    async def submit(self) -> OrderOutcome:
        """
        Place an order from the current cart.

        Failures resolve to a FAILED outcome instead of raising; the cart
        is cleared only on success.

        Raises:
            OrderInProgressError: if a submission is already in flight
        """
        async with self._guard:
            if self._outcome.phase is OrderPhase.SUBMITTING:
                logger.warning("[ORDER] Submission rejected - another order is in flight")
                raise OrderInProgressError()

            snapshot = self.cart_store.snapshot()
            try:
                request = build_payment_request(snapshot)
            except ValidationError as e:
                logger.warning(f"[ORDER] Order not submitted - {e}")
                return self._publish(OrderOutcome.failed(e))
            except Exception as e:
                logger.error(
                    f"[ORDER] Could not build payment request - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                return self._publish(OrderOutcome.failed(UnknownError()))

            logger.info(
                f"[ORDER] Placing order - grand total: {request.total_amount}, "
                f"items: {request.total_items}, lines: {len(request.data)}"
            )
            self._publish(OrderOutcome.submitting())

        try:
            response = await self.gateway.make_payment(request)
        except asyncio.CancelledError:
            logger.info("[ORDER] Submission cancelled, cart left unchanged")
            self._publish(OrderOutcome.idle())
            raise
        except OrderError as e:
            logger.error(f"[ORDER] Payment failed - {e.kind}: {e}")
            return self._publish(OrderOutcome.failed(e))
        except Exception as e:
            logger.error(
                f"[ORDER] Unexpected payment failure - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return self._publish(OrderOutcome.failed(UnknownError()))

        if not response.is_success:
            logger.error(
                f"[ORDER] Payment API returned non-success code - "
                f"response_code: {response.response_code}, "
                f"outcome_code: {response.outcome_code}, "
                f"message: {response.response_message}"
            )
            return self._publish(OrderOutcome.failed(BusinessError(response.response_message)))

        outcome = self._publish(
            OrderOutcome.succeeded(response.txn_ref_no, response.response_message)
        )
        self.cart_store.clear()
        logger.info(f"[ORDER] Order placed successfully. Txn Ref: {response.txn_ref_no}")
        return outcome

    def dismiss(self) -> OrderOutcome:
        """Acknowledge a finished outcome and return to IDLE."""
        if self._outcome.phase in (OrderPhase.SUCCEEDED, OrderPhase.FAILED):
            return self._publish(OrderOutcome.idle())
        return self._outcome
