"""Unit tests for the order submission workflow."""
import asyncio
from decimal import Decimal

import pytest

from app.services.cart.models import CartSnapshot
from app.services.ordering.builder import build_payment_request, format_amount
from app.services.ordering.errors import (
    BusinessError,
    OrderInProgressError,
    TransportError,
    UnknownError,
    ValidationError,
)
from app.services.ordering.models import OrderPhase, PaymentResponse
from app.services.ordering.workflow import OrderWorkflow


class TestPaymentRequestBuilder:
    """Test translating a cart into a payment request."""

    def test_request_from_scenario_cart(self, cart_store, make_dish):
        """Test totals, item count and lines of the request body."""
        cart_store.add_dish(make_dish("D1", price="100.00", cuisine_id="10"))
        cart_store.add_dish(make_dish("D2", price="50.00", cuisine_id="20"))
        cart_store.add_dish(make_dish("D2", price="50.00", cuisine_id="20"))

        request = build_payment_request(cart_store.snapshot())

        assert request.total_amount == "210.00"
        assert request.total_items == 3
        assert [(i.cuisine_id, i.item_id, i.item_price, i.item_quantity) for i in request.data] == [
            ("10", "D1", 100.0, 1),
            ("20", "D2", 50.0, 2),
        ]

    def test_request_json_shape(self, cart_store, make_dish):
        """Test the wire field names."""
        cart_store.add_dish(make_dish("D1", price="100.00"))

        body = build_payment_request(cart_store.snapshot()).model_dump(mode="json")

        assert body == {
            "total_amount": "105.00",
            "total_items": 1,
            "data": [
                {"cuisine_id": "10", "item_id": "D1", "item_price": 100.0, "item_quantity": 1}
            ],
        }

    def test_unparsable_price_sent_as_zero(self, cart_store, make_dish):
        """Test a bad price becomes 0 instead of raising."""
        cart_store.add_dish(make_dish("D1", price="n/a"))

        request = build_payment_request(cart_store.snapshot())

        assert request.data[0].item_price == 0.0
        assert request.total_amount == "0.00"

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("0"), "0.00"),
            (Decimal("10.005"), "10.01"),
            (Decimal("10.004"), "10.00"),
            (Decimal("1.5"), "1.50"),
            (Decimal("1.05E+30"), "105" + "0" * 28 + ".00"),
        ],
    )
    def test_format_amount(self, amount, expected):
        """Test two-decimal formatting rounds half up."""
        assert format_amount(amount) == expected

    def test_empty_cart_rejected(self):
        """Test an empty snapshot cannot be built into a request."""
        with pytest.raises(ValidationError, match="cart is empty"):
            build_payment_request(CartSnapshot())

    def test_missing_cuisine_id_rejected(self, cart_store, make_dish):
        """Test dishes without a cuisine id block the request."""
        cart_store.add_dish(make_dish("D1", cuisine_id=None, name="Orphan"))

        with pytest.raises(ValidationError, match="Orphan"):
            build_payment_request(cart_store.snapshot())


class CountingGateway:
    """Gateway stub recording payment calls."""

    def __init__(self, response=None, error=None, delay=None):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def make_payment(self, request):
        self.calls.append(request)
        if self.delay is not None:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        pass


def _response(response_code=200, outcome_code=200, message="Payment successful", ref="TXN123"):
    return PaymentResponse(
        response_code=response_code,
        outcome_code=outcome_code,
        response_message=message,
        txn_ref_no=ref,
    )


class TestOrderWorkflow:
    """Test the submit state machine."""

    @pytest.mark.asyncio
    async def test_empty_cart_fails_without_gateway_call(self, cart_store):
        """Test empty cart yields ValidationError and zero gateway calls."""
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert isinstance(outcome.error, ValidationError)
        assert outcome.reason == "cart is empty"
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_missing_cuisine_id_fails_without_gateway_call(self, cart_store, make_dish):
        """Test lines lacking a cuisine id are rejected before submission."""
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1", cuisine_id=None))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert outcome.error_kind == "validation"
        assert gateway.calls == []
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_success_clears_cart(self, cart_store, make_dish):
        """Test both status codes 200 leads to SUCCEEDED and an empty cart."""
        gateway = CountingGateway(response=_response(ref="REF-42", message="Done"))
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1", price="100.00"))
        cart_store.add_dish(make_dish("D2", price="50.00"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.SUCCEEDED
        assert outcome.reference_number == "REF-42"
        assert outcome.message == "Done"
        assert cart_store.snapshot().is_empty
        assert workflow.phase is OrderPhase.SUCCEEDED
        assert len(gateway.calls) == 1
        assert gateway.calls[0].total_amount == "157.50"

    @pytest.mark.asyncio
    async def test_business_failure_preserves_cart(self, cart_store, make_dish):
        """Test outcome code mismatch fails with the server message verbatim."""
        gateway = CountingGateway(
            response=_response(outcome_code=400, message="Insufficient balance")
        )
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))
        cart_store.add_dish(make_dish("D1"))
        before = cart_store.snapshot()

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert outcome.reason == "Insufficient balance"
        assert isinstance(outcome.error, BusinessError)
        assert cart_store.snapshot() == before

    @pytest.mark.asyncio
    async def test_result_code_mismatch_is_business_failure(self, cart_store, make_dish):
        """Test a non-200 response code with outcome 200 still fails."""
        gateway = CountingGateway(
            response=_response(response_code=500, outcome_code=200, message="Server busy")
        )
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert outcome.error_kind == "business"
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_transport_failure_preserves_cart(self, cart_store, make_dish):
        """Test gateway transport errors resolve to FAILED."""
        gateway = CountingGateway(error=TransportError("HTTP Error: 503"))
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert outcome.reason == "HTTP Error: 503"
        assert outcome.error_kind == "transport"
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_unknown_error(self, cart_store, make_dish):
        """Test arbitrary exceptions never escape submit."""
        gateway = CountingGateway(error=KeyError("txn_ref_no"))
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert isinstance(outcome.error, UnknownError)
        assert outcome.reason == "An unknown error occurred."
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_huge_price_submits_with_full_amount(self, cart_store, make_dish):
        """Test amounts wider than the decimal context still format and submit."""
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1", price="1e30"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.SUCCEEDED
        assert gateway.calls[0].total_amount == "105" + "0" * 28 + ".00"

    @pytest.mark.asyncio
    async def test_request_build_failure_becomes_unknown_error(
        self, cart_store, make_dish, monkeypatch
    ):
        """Test an unexpected error while building the request resolves to FAILED."""
        def broken_builder(snapshot):
            raise RuntimeError("boom")

        monkeypatch.setattr(
            "app.services.ordering.workflow.build_payment_request", broken_builder
        )
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.FAILED
        assert isinstance(outcome.error, UnknownError)
        assert workflow.phase is not OrderPhase.SUBMITTING
        assert gateway.calls == []
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_second_submit_rejected_while_in_flight(self, cart_store, make_dish):
        """Test only one submission can be in flight."""
        gateway = CountingGateway(response=_response(), delay=0.05)
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        first = asyncio.create_task(workflow.submit())
        await asyncio.sleep(0)
        assert workflow.phase is OrderPhase.SUBMITTING

        with pytest.raises(OrderInProgressError):
            await workflow.submit()

        outcome = await first
        assert outcome.phase is OrderPhase.SUCCEEDED
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_cancellation_returns_to_idle(self, cart_store, make_dish):
        """Test cancelling an in-flight submission leaves the cart alone."""
        gateway = CountingGateway(response=_response(), delay=10)
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        task = asyncio.create_task(workflow.submit())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert workflow.phase is OrderPhase.IDLE
        assert cart_store.total_items() == 1

    @pytest.mark.asyncio
    async def test_resubmit_after_failure(self, cart_store, make_dish):
        """Test a failed order can be retried with the same cart."""
        gateway = CountingGateway(error=TransportError("Network Error: offline"))
        workflow = OrderWorkflow(cart_store, gateway)
        cart_store.add_dish(make_dish("D1"))

        assert (await workflow.submit()).phase is OrderPhase.FAILED

        gateway.error = None
        gateway.response = _response()
        outcome = await workflow.submit()

        assert outcome.phase is OrderPhase.SUCCEEDED
        assert cart_store.snapshot().is_empty

    @pytest.mark.asyncio
    async def test_phase_notifications(self, cart_store, make_dish):
        """Test observers see SUBMITTING then SUCCEEDED, and IDLE on dismiss."""
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)
        phases = []
        workflow.subscribe(lambda outcome: phases.append(outcome.phase))
        cart_store.add_dish(make_dish("D1"))

        await workflow.submit()
        workflow.dismiss()

        assert phases == [OrderPhase.SUBMITTING, OrderPhase.SUCCEEDED, OrderPhase.IDLE]

    @pytest.mark.asyncio
    async def test_success_published_before_cart_clears(self, cart_store, make_dish):
        """Test the cart is cleared after the success transition."""
        gateway = CountingGateway(response=_response())
        workflow = OrderWorkflow(cart_store, gateway)
        events = []
        workflow.subscribe(lambda outcome: events.append(("order", outcome.phase)))
        cart_store.subscribe(lambda snapshot: events.append(("cart", snapshot.is_empty)))
        cart_store.add_dish(make_dish("D1"))
        events.clear()

        await workflow.submit()

        assert events == [
            ("order", OrderPhase.SUBMITTING),
            ("order", OrderPhase.SUCCEEDED),
            ("cart", True),
        ]

    def test_dismiss_while_idle_is_noop(self, cart_store):
        """Test dismiss without an outcome keeps IDLE."""
        workflow = OrderWorkflow(cart_store, CountingGateway())
        assert workflow.dismiss().phase is OrderPhase.IDLE

    @pytest.mark.asyncio
    async def test_in_memory_gateway_round_trip(self, order_workflow, cart_store, gateway, make_dish):
        """Test the workflow against the in-memory gateway's simulated payment."""
        cart_store.add_dish(make_dish("D1", price="100.00"))

        outcome = await order_workflow.submit()

        assert outcome.phase is OrderPhase.SUCCEEDED
        assert outcome.reference_number
        assert gateway.payment_requests[0].total_amount == "105.00"
