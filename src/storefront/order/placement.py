"""Order placement — command and handler.

Pricing, stock withdrawal and the new order all run inside the handler's unit
of work. Validation happens before any aggregate is changed, and any failure
rolls back everything, so a rejected cart leaves stock untouched.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.pricing import parse_cart_lines, price_cart
from storefront.product.product import Product

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    coupon_code = String(max_length=50)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        quote = price_cart(parse_cart_lines(items), command.coupon_code)

        order = Order.place(command.customer_id, command.email, quote)

        product_repo = current_domain.repository_for(Product)
        quantities = quote.quantities()
        for product in quote.products():
            product.withdraw_stock(quantities[str(product.id)])
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            total_price=order.total_price,
            coupon_code=order.coupon_code,
        )
        return str(order.id)
