"""Cart store: sole owner of the cart lines."""
import logging
import threading
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from app.core.events import EventEmitter
from app.services.cart.models import CartLine, CartSnapshot, CartTotals
from app.services.catalog.models import Dish

logger = logging.getLogger(__name__)

CGST_RATE = Decimal("0.025")
SGST_RATE = Decimal("0.025")


class CartStore:
    """
    Quantity-indexed collection of selected dishes with derived totals.

    Lines are kept in insertion order with at most one line per dish id.
    Observers registered through ``subscribe`` receive a ``CartSnapshot``
    after each mutation has completed. Handlers run while the store lock is
    held, so snapshots arrive in mutation order.
    """

    def __init__(self, cgst_rate: Decimal = CGST_RATE, sgst_rate: Decimal = SGST_RATE):
        self.cgst_rate = cgst_rate
        self.sgst_rate = sgst_rate
        self._lines: List[CartLine] = []
        self._lock = threading.RLock()
        self._changes: EventEmitter[CartSnapshot] = EventEmitter("cart")

    def subscribe(self, handler: Callable[[CartSnapshot], None]) -> Callable[[], None]:
        """Register a change handler. Returns an unsubscribe callable."""
        return self._changes.subscribe(handler)

    def _index_of(self, dish_id: str) -> Optional[int]:
        for index, line in enumerate(self._lines):
            if line.dish.id == dish_id:
                return index
        return None

    def add_dish(self, dish: Dish) -> CartSnapshot:
        """Add one unit of a dish, creating its line if needed."""
        with self._lock:
            index = self._index_of(dish.id)
            if index is not None:
                line = self._lines[index]
                self._lines[index] = CartLine(dish=line.dish, quantity=line.quantity + 1)
                logger.info(
                    f"[CART] Increased quantity for dish: {dish.name}. "
                    f"New quantity: {line.quantity + 1}"
                )
            else:
                self._lines.append(CartLine(dish=dish, quantity=1))
                logger.info(f"[CART] Added new dish to cart: {dish.name} (id={dish.id})")
            snapshot = self._snapshot()
            self._changes.emit(snapshot)
        return snapshot

    def remove_dish(self, dish: Dish) -> CartSnapshot:
        """Remove one unit of a dish. Does nothing if the dish is not in the cart."""
        with self._lock:
            index = self._index_of(dish.id)
            if index is None:
                logger.debug(f"[CART] Dish {dish.id} not in cart, nothing to remove")
                return self._snapshot()
            line = self._lines[index]
            if line.quantity > 1:
                self._lines[index] = CartLine(dish=line.dish, quantity=line.quantity - 1)
                logger.info(
                    f"[CART] Decreased quantity for dish: {dish.name}. "
                    f"New quantity: {line.quantity - 1}"
                )
            else:
                del self._lines[index]
                logger.info(f"[CART] Removed dish from cart: {dish.name}")
            snapshot = self._snapshot()
            self._changes.emit(snapshot)
        return snapshot

    def clear(self) -> CartSnapshot:
        """Empty the cart."""
        with self._lock:
            self._lines.clear()
            snapshot = self._snapshot()
            logger.info("[CART] Cart cleared.")
            self._changes.emit(snapshot)
        return snapshot

    def get_line(self, dish_id: str) -> Optional[CartLine]:
        with self._lock:
            index = self._index_of(dish_id)
            return self._lines[index] if index is not None else None

    def lines(self) -> Tuple[CartLine, ...]:
        with self._lock:
            return tuple(self._lines)

    def snapshot(self) -> CartSnapshot:
        """Current lines and totals as one consistent view."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> CartSnapshot:
        lines = tuple(self._lines)
        return CartSnapshot(
            lines=lines,
            totals=CartTotals.compute(lines, self.cgst_rate, self.sgst_rate),
        )

    def net_total(self) -> Decimal:
        return self.snapshot().totals.net_total

    def cgst_amount(self) -> Decimal:
        return self.snapshot().totals.cgst

    def sgst_amount(self) -> Decimal:
        return self.snapshot().totals.sgst

    def grand_total(self) -> Decimal:
        return self.snapshot().totals.grand_total

    def total_items(self) -> int:
        return self.snapshot().totals.total_items

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
