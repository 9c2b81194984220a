"""Order status changes — command and handler.

The guard reads the persisted status on every call. Cancelling returns each
line's quantity to stock in the same unit of work; products that have since
been removed from the catalogue are skipped.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product
from storefront.shared.errors import ProductNotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.load(command.order_id)

        previous = order.transition_to(command.status)

        if order.status == OrderStatus.CANCELLED.value:
            _restore_stock(order)

        order_repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous.value,
            new_status=order.status,
        )
        return order.status


def _restore_stock(order):
    product_repo = current_domain.repository_for(Product)
    for product_id, quantity in order.restock_quantities().items():
        try:
            product = product_repo.load(product_id)
        except ProductNotFound:
            logger.warning(
                "Skipped stock restore for missing product",
                order_id=str(order.id),
                product_id=product_id,
                quantity=quantity,
            )
            continue

        product.restore_stock(quantity)
        product_repo.add(product)
