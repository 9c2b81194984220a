"""Order aggregate — a priced, stock-validated purchase and its lifecycle.

Line items carry the unit price captured when the order was placed. They are
never re-read from the live product, so later catalogue price changes do not
alter historical orders.

State Machine:
    Placed → Processing → Delivered
    Placed | Processing → Cancelled
    Delivered and Cancelled are terminal.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from storefront.shared.email import normalize_email
from storefront.shared.errors import InvalidTransition
from storefront.shared.money import to_money

# Tolerance when comparing float money fields (half a cent)
_MONEY_TOLERANCE = 0.005


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "Placed"
    PROCESSING = "Processing"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# State machine transition map; allowed targets are listed in display order
_VALID_TRANSITIONS = {
    OrderStatus.PLACED: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),  # Terminal
    OrderStatus.CANCELLED: (),  # Terminal
}


def parse_status(value):
    """Coerce a status name or enum member into an OrderStatus."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        valid = ", ".join(status.value for status in OrderStatus)
        raise ValidationError({"status": [f"Status must be one of: {valid}"]}) from None


def allowed_transitions(status):
    """Statuses reachable in one step from ``status``."""
    return _VALID_TRANSITIONS[parse_status(status)]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A line item: product reference, quantity and the unit price paid."""

    product_id = Identifier(required=True)
    title = String(max_length=200)  # Title at time of purchase
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return float(to_money(Decimal(str(self.unit_price)) * self.quantity))


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    email = String(required=True, max_length=254)  # Lowercase copy for guest lookup
    items = HasMany(OrderItem)
    subtotal = Float(required=True, min_value=0.0)
    coupon_code = String(max_length=50)
    discount_amount = Float(default=0.0, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_subtotal_less_discount(self):
        if self.subtotal is None or self.total_price is None:
            return
        expected = self.subtotal - (self.discount_amount or 0.0)
        if abs(self.total_price - expected) > _MONEY_TOLERANCE:
            raise ValidationError({"total_price": ["Total price must equal subtotal minus discount"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if self.subtotal is None or not self.discount_amount:
            return
        if self.discount_amount - self.subtotal > _MONEY_TOLERANCE:
            raise ValidationError({"discount_amount": ["Discount cannot exceed the subtotal"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, email, quote):
        """Create a Placed order from a priced quote.

        Args:
            customer_id: The customer placing the order.
            email: Customer email; stored lowercase.
            quote: A pricing quote whose ``lines`` carry the resolved product,
                   quantity and unit price for each cart line.
        """
        if not quote.lines:
            raise ValidationError({"items": ["Order must contain at least one product"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=str(line.product.id),
                title=line.product.title,
                quantity=line.quantity,
                unit_price=float(line.unit_price),
            )
            for line in quote.lines
        ]

        order = cls(
            customer_id=str(customer_id),
            email=normalize_email(email),
            items=items,
            subtotal=float(quote.subtotal),
            coupon_code=quote.coupon_code,
            discount_amount=float(quote.discount_amount),
            total_price=float(quote.total_price),
            status=OrderStatus.PLACED.value,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                email=order.email,
                item_count=len(items),
                subtotal=order.subtotal,
                coupon_code=order.coupon_code,
                discount_amount=order.discount_amount,
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def transition_to(self, target_status):
        """Move the order to ``target_status`` if the lifecycle allows it.

        Returns the previous status. Stock restoration on cancellation is the
        caller's job; the OrderCancelled event lists what to put back.
        """
        target = parse_status(target_status)
        current = OrderStatus(self.status)
        allowed = _VALID_TRANSITIONS[current]
        if target not in allowed:
            raise InvalidTransition(current, target, allowed)

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

        if target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    previous_status=current.value,
                    items=json.dumps([{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]),
                    cancelled_at=now,
                )
            )

        return current

    def restock_quantities(self):
        """Quantities to return to stock per product, summed across lines."""
        quantities = {}
        for item in self.items:
            product_id = str(item.product_id)
            quantities[product_id] = quantities.get(product_id, 0) + item.quantity
        return quantities
