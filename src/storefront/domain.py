"""Storefront bounded context — product stock, order pricing and order lifecycle.

Turns a cart into a priced, stock-validated order (optionally discounted by a
coupon) and then walks the order through its status lifecycle:
Placed → Processing → Delivered, with Cancelled reachable from either open
state.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging(log_file_prefix="storefront")

storefront = Domain(name="storefront")
