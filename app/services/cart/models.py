"""Cart models."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Tuple

from app.services.catalog.models import Dish

ZERO = Decimal("0")


@dataclass(frozen=True)
class CartLine:
    """One distinct dish in the cart. Quantity is always at least 1."""

    dish: Dish
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.dish.price * self.quantity


@dataclass(frozen=True)
class CartTotals:
    """Totals derived from the cart lines."""

    net_total: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    grand_total: Decimal = ZERO
    total_items: int = 0

    @classmethod
    def compute(
        cls, lines: Tuple[CartLine, ...], cgst_rate: Decimal, sgst_rate: Decimal
    ) -> "CartTotals":
        net_total = sum((line.line_total for line in lines), ZERO)
        cgst = net_total * cgst_rate
        sgst = net_total * sgst_rate
        return cls(
            net_total=net_total,
            cgst=cgst,
            sgst=sgst,
            grand_total=net_total + cgst + sgst,
            total_items=sum(line.quantity for line in lines),
        )


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable view of the cart handed to readers and observers."""

    lines: Tuple[CartLine, ...] = ()
    totals: CartTotals = field(default_factory=CartTotals)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def quantity_of(self, dish_id: str) -> int:
        for line in self.lines:
            if line.dish.id == dish_id:
                return line.quantity
        return 0
