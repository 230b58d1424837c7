"""Payment request construction."""
from decimal import Decimal, ROUND_HALF_UP, localcontext

from app.services.cart.models import CartSnapshot
from app.services.ordering.errors import ValidationError
from app.services.ordering.models import PaymentItem, PaymentRequest

CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Format an amount with exactly two fractional digits."""
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def validate_cart_for_submission(snapshot: CartSnapshot) -> None:
    """
    Check that a cart can be submitted.

    Raises:
        ValidationError: if the cart is empty or a dish has no cuisine id
    """
    if snapshot.is_empty:
        raise ValidationError("cart is empty")

    missing = [line.dish for line in snapshot.lines if not line.dish.cuisine_id]
    if missing:
        names = ", ".join(f"{dish.name} ({dish.id})" for dish in missing)
        raise ValidationError(f"missing cuisine id for: {names}")


def build_payment_request(snapshot: CartSnapshot) -> PaymentRequest:
    """Translate a validated cart snapshot into a payment request body."""
    validate_cart_for_submission(snapshot)
    return PaymentRequest(
        total_amount=format_amount(snapshot.totals.grand_total),
        total_items=snapshot.totals.total_items,
        data=[
            PaymentItem(
                cuisine_id=line.dish.cuisine_id,
                item_id=line.dish.id,
                item_price=float(line.dish.price),
                item_quantity=line.quantity,
            )
            for line in snapshot.lines
        ],
    )
