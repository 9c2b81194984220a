"""Order preview — price a cart without committing to it."""

import structlog

from storefront.order.pricing import Quote, parse_cart_lines, price_cart

logger = structlog.get_logger(__name__)


def preview_order(items, coupon_code=None) -> Quote:
    """Quote ``items`` at live prices. Stock is checked but never touched."""
    quote = price_cart(parse_cart_lines(items), coupon_code)
    logger.info(
        "Previewed order",
        line_count=len(quote.lines),
        total_price=float(quote.total_price),
        coupon_code=quote.coupon.code if quote.coupon else None,
    )
    return quote
