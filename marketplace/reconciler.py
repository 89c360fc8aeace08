"""
Cart rules that do not touch the database.

The store-level operations in `cart_store` call into these helpers, so the
quantity bounds and the pricing arithmetic can be checked without a session.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Optional

from .schemas import Direction

CENTS = Decimal("0.01")
DISCOUNT_FACTOR = Decimal("0.95")  # fixed 5% off the sub total
MIN_LINE_QUANTITY = 1


# ---------- errors ----------
class CartError(Exception):
    """Base error of the cart core, carries the HTTP status it maps to."""

    status_code = 400
    message = "Cart operation failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class ProductNotFound(CartError):
    status_code = 404
    message = "Product does not exist."


class CartNotFound(CartError):
    status_code = 403
    message = "Cart does not exist."


class LineNotFound(CartError):
    status_code = 403
    message = "Product is not in the cart."


class QuantityExceedsStock(CartError):
    status_code = 403
    message = "Order quantity cannot be greater than available quantity."


class QuantityBelowMinimum(CartError):
    status_code = 403
    message = "Order quantity cannot be less than 1."


class QuantityOutOfRange(CartError):
    status_code = 400
    message = "Order quantity is too large."


class CartWriteConflict(CartError):
    status_code = 409
    message = "Cart was modified concurrently, please retry."


# ---------- quantity rules ----------
def next_quantity(current: int, direction: Direction, available: int) -> int:
    """Return the line quantity after one increase/decrease step.

    Both bounds reject instead of saturating: the caller has to stop asking.
    """
    candidate = current + direction.step
    if candidate > available:
        raise QuantityExceedsStock()
    if candidate < MIN_LINE_QUANTITY:
        raise QuantityBelowMinimum()
    return candidate


# ---------- pricing ----------
@dataclass(frozen=True)
class LineRef:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class CatalogEntry:
    product_id: int
    name: str
    brand: str
    price: Decimal
    available_quantity: int
    image: Optional[str] = None


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    order_quantity: int
    available_quantity: int
    image: Optional[str]
    name: str
    brand: str
    price: Decimal

    @property
    def total(self) -> Decimal:
        return self.price * self.order_quantity


@dataclass(frozen=True)
class CartTotals:
    lines: List[PricedLine]
    sub_total: Decimal
    grand_total: Decimal


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    return f"{round_money(value):.2f}"


def price_lines(lines: Iterable[LineRef], catalog: Mapping[int, CatalogEntry]) -> CartTotals:
    """Join cart lines with the current catalog and compute the totals.

    Lines whose product is gone from the catalog are left out of both the
    result and the totals.
    """
    priced: List[PricedLine] = []
    for line in lines:
        entry = catalog.get(line.product_id)
        if entry is None:
            continue
        priced.append(PricedLine(
            product_id=line.product_id,
            order_quantity=line.quantity,
            available_quantity=entry.available_quantity,
            image=entry.image,
            name=entry.name,
            brand=entry.brand,
            price=Decimal(entry.price),
        ))

    sub_total = round_money(sum((p.total for p in priced), Decimal("0")))
    grand_total = round_money(sub_total * DISCOUNT_FACTOR)
    return CartTotals(lines=priced, sub_total=sub_total, grand_total=grand_total)
