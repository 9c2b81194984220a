"""Error taxonomy for the storefront domain.

Every error carries a ``messages`` dict (field → list of messages) so the API
layer can render them uniformly. Lookups that miss are ``ObjectNotFoundError``
subclasses; rule violations are ``ValidationError`` subclasses.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class RecordNotFound(ObjectNotFoundError):
    """A lookup miss carrying a ``messages`` payload like ValidationError does."""

    def __init__(self, messages):
        super().__init__(messages)
        self.messages = messages

    def __str__(self):
        return flatten_messages(self.messages)


class ProductNotFound(RecordNotFound):
    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__({"product": [f"Product with ID {product_id} not found"]})


class OrderNotFound(RecordNotFound):
    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__({"order": [f"Order with ID {order_id} not found"]})


class InsufficientStock(ValidationError):
    """Requested quantity exceeds what the product has on hand."""

    def __init__(self, product_id, title, available, requested):
        self.product_id = str(product_id)
        self.title = title
        self.available = available
        self.requested = requested
        super().__init__({"stock": [f"Insufficient stock for {title}. Available: {available}"]})


class InvalidTransition(ValidationError):
    """An order status change that the lifecycle table does not permit."""

    def __init__(self, current, attempted, allowed):
        self.current = current
        self.attempted = attempted
        self.allowed = tuple(allowed)
        allowed_text = ", ".join(status.value for status in self.allowed) or "none"
        super().__init__(
            {
                "status": [
                    f"Cannot change status from '{current.value}' to '{attempted.value}'. Allowed: {allowed_text}"
                ]
            }
        )


def flatten_messages(messages) -> str:
    """Join a Protean ``messages`` payload into one human-readable line."""
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            if isinstance(value, list | tuple):
                parts.extend(str(v) for v in value)
            else:
                parts.append(str(value))
        return ". ".join(parts)
    return str(messages)
