"""Order submission API endpoints."""
import logging

from fastapi import APIRouter, Depends

from app.api.schemas import OrderOutcomeResponse, to_http_exception
from app.core.dependencies import AppSession, get_app_session
from app.services.ordering.errors import OrderInProgressError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/orders", response_model=OrderOutcomeResponse)
async def place_order(session: AppSession = Depends(get_app_session)):
    """Submit the current cart. The outcome is returned even when the order fails."""
    logger.info(f"[ORDERS] Place order requested - cart lines: {len(session.cart_store)}")
    try:
        outcome = await session.order_workflow.submit()
    except OrderInProgressError as e:
        raise to_http_exception(e)

    logger.info(
        f"[ORDERS] Order finished - phase: {outcome.phase.value}, "
        f"reference: {outcome.reference_number}, reason: {outcome.reason}"
    )
    return OrderOutcomeResponse.from_outcome(outcome)


@router.get("/api/orders/status", response_model=OrderOutcomeResponse)
async def order_status(session: AppSession = Depends(get_app_session)):
    """Get the outcome of the latest submission."""
    return OrderOutcomeResponse.from_outcome(session.order_workflow.outcome)


@router.post("/api/orders/dismiss", response_model=OrderOutcomeResponse)
async def dismiss_order(session: AppSession = Depends(get_app_session)):
    """Acknowledge the latest outcome."""
    return OrderOutcomeResponse.from_outcome(session.order_workflow.dismiss())
