"""Product aggregate — the sellable item and its stock level.

Catalogue management (create/update/delete through an admin surface) lives
outside this domain; here the product matters for its live price, which
orders read at checkout, and its stock, which orders draw down and
cancellations put back.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.product.events import ProductAdded, StockRestored, StockWithdrawn
from storefront.shared.errors import InsufficientStock


@storefront.aggregate
class Product:
    title = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category_id = Identifier()
    images = Text()  # JSON array of image URLs
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def add(cls, title, price, stock=0, description=None, category_id=None, images=None):
        now = datetime.now(UTC)
        product = cls(
            title=title,
            description=description,
            price=price,
            stock=stock,
            category_id=category_id,
            images=json.dumps(list(images or [])),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                title=title,
                price=price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def withdraw_stock(self, quantity):
        """Take ``quantity`` units out of stock, refusing to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if self.stock < quantity:
            raise InsufficientStock(self.id, self.title, available=self.stock, requested=quantity)

        self.stock -= quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                remaining_stock=self.stock,
            )
        )

    def restore_stock(self, quantity):
        """Put ``quantity`` units back into stock."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
            )
        )

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    def summary(self):
        """Display-friendly view used when rendering carts and orders."""
        return {
            "product_id": str(self.id),
            "title": self.title,
            "price": self.price,
            "images": self.image_urls,
        }
