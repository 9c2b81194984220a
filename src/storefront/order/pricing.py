"""Pricing calculator — turns a cart into a priced quote.

Resolves every line against the live product, checks stock, and computes
subtotal, coupon discount and total. Money is computed with ``Decimal`` and
rounded half-up to cents; callers convert to floats at the edges.

Pricing has no side effects. Placing an order reuses the product instances
held by the quote, so stock is withdrawn from exactly what was priced.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.coupon import CouponBook, get_coupon_book
from storefront.product.product import Product
from storefront.shared.errors import InsufficientStock
from storefront.shared.money import CENTS, to_money

logger = structlog.get_logger(__name__)

INVALID_COUPON_MESSAGE = "Invalid coupon code"


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    def as_dict(self):
        return {
            "product": self.product.summary(),
            "unit_price": float(self.unit_price),
            "quantity": self.quantity,
            "line_total": float(self.line_total),
        }


@dataclass(frozen=True)
class CouponOutcome:
    """What happened to the coupon code supplied with a cart."""

    code: str
    valid: bool
    percentage: int | float | None = None
    savings: Decimal = Decimal("0.00")

    def as_dict(self):
        if not self.valid:
            return {"code": self.code, "valid": False, "message": INVALID_COUPON_MESSAGE}
        return {"code": self.code, "percentage": self.percentage, "savings": float(self.savings)}


@dataclass(frozen=True)
class Quote:
    lines: tuple[PricedLine, ...]
    subtotal: Decimal
    discount_amount: Decimal
    total_price: Decimal
    coupon: CouponOutcome | None = None

    @property
    def coupon_code(self) -> str | None:
        """The code recorded on an order: only set when the coupon applied."""
        if self.coupon and self.coupon.valid:
            return self.coupon.code
        return None

    def products(self) -> list[Product]:
        """Distinct products in the order they first appear."""
        seen = {}
        for line in self.lines:
            seen.setdefault(str(line.product.id), line.product)
        return list(seen.values())

    def quantities(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for line in self.lines:
            product_id = str(line.product.id)
            totals[product_id] = totals.get(product_id, 0) + line.quantity
        return totals

    def as_dict(self):
        return {
            "items": [line.as_dict() for line in self.lines],
            "subtotal": float(self.subtotal),
            "coupon": self.coupon.as_dict() if self.coupon else None,
            "discount_amount": float(self.discount_amount),
            "total_price": float(self.total_price),
        }


def parse_cart_lines(items) -> list[CartLine]:
    """Validate raw ``[{product_id, quantity}]`` input into cart lines."""
    if not items:
        raise ValidationError({"items": ["Please provide at least one product"]})

    lines = []
    for item in items:
        if isinstance(item, CartLine):
            lines.append(item)
            continue
        if not isinstance(item, Mapping):
            raise ValidationError({"items": ["Each product must have a product ID and quantity"]})

        product_id = item.get("product_id")
        quantity = item.get("quantity")
        if not product_id or quantity is None:
            raise ValidationError({"items": ["Each product must have a product ID and quantity"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": [f"Quantity must be a whole number of at least 1, got {quantity!r}"]})

        lines.append(CartLine(product_id=str(product_id), quantity=quantity))
    return lines


def apply_coupon(subtotal: Decimal, code: str | None, book: CouponBook | None = None) -> CouponOutcome | None:
    """Look the code up and work out the savings on ``subtotal``."""
    if not code or not code.strip():
        return None

    book = book or get_coupon_book()
    coupon = book.lookup(code)
    if coupon is None:
        return CouponOutcome(code=code.strip(), valid=False)

    savings = (subtotal * Decimal(str(coupon.percentage)) / Decimal("100")).quantize(CENTS, rounding=ROUND_HALF_UP)
    return CouponOutcome(code=coupon.code, valid=True, percentage=coupon.percentage, savings=savings)


def price_cart(lines: Iterable[CartLine], coupon_code: str | None = None, book: CouponBook | None = None) -> Quote:
    """Price ``lines`` against live products.

    Fails fast with ProductNotFound for a missing product and with
    InsufficientStock as soon as the quantity requested for a product (summed
    across repeated lines) exceeds its stock.
    """
    product_repo = current_domain.repository_for(Product)

    products: dict[str, Product] = {}
    requested: dict[str, int] = {}
    priced = []

    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            product = product_repo.load(line.product_id)
            products[line.product_id] = product

        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
        if product.stock < requested[line.product_id]:
            raise InsufficientStock(
                product.id, product.title, available=product.stock, requested=requested[line.product_id]
            )

        unit_price = Decimal(str(product.price))
        priced.append(
            PricedLine(
                product=product,
                quantity=line.quantity,
                unit_price=unit_price,
                line_total=to_money(unit_price * line.quantity),
            )
        )

    if not priced:
        raise ValidationError({"items": ["Please provide at least one product"]})

    subtotal = sum((line.line_total for line in priced), Decimal("0.00"))
    coupon = apply_coupon(subtotal, coupon_code, book)
    discount = coupon.savings if coupon and coupon.valid else Decimal("0.00")

    logger.debug(
        "Priced cart",
        line_count=len(priced),
        subtotal=str(subtotal),
        coupon_code=coupon.code if coupon else None,
        coupon_valid=coupon.valid if coupon else None,
    )

    return Quote(
        lines=tuple(priced),
        subtotal=subtotal,
        discount_amount=discount,
        total_price=subtotal - discount,
        coupon=coupon,
    )
