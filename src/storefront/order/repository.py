"""Repository for the Order aggregate.

All listings come back newest first.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.domain import storefront
from storefront.order.order import Order, parse_status
from storefront.shared.email import EMAIL_REQUIRED_MESSAGE
from storefront.shared.errors import OrderNotFound


@storefront.repository(part_of=Order)
class OrderRepository:
    def load(self, order_id) -> Order:
        """Fetch an order, raising OrderNotFound when it does not exist."""
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFound(order_id) from None

    def for_email(self, email: str) -> list[Order]:
        """Orders placed with ``email``, matched on the stored lowercase copy."""
        normalized = (email or "").strip().lower()
        if not normalized:
            raise ValidationError({"email": [EMAIL_REQUIRED_MESSAGE]})
        return self._dao.query.filter(email=normalized).order_by("-created_at").all().items

    def for_customer(self, customer_id) -> list[Order]:
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def listing(self, status=None) -> list[Order]:
        """All orders, optionally restricted to one status."""
        query = self._dao.query
        if status:
            query = query.filter(status=parse_status(status).value)
        return query.order_by("-created_at").all().items
