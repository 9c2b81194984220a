"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductNotFound


@storefront.repository(part_of=Product)
class ProductRepository:
    def load(self, product_id) -> Product:
        """Fetch a product, raising ProductNotFound when it does not exist."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise ProductNotFound(product_id) from None
