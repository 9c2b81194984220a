"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A priced cart was committed as an order and its stock withdrawn."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    email = String(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    coupon_code = String()
    discount_amount = Float(required=True)
    total_price = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An order moved along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """An open order was cancelled; its line quantities go back to stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    cancelled_at = DateTime(required=True)
