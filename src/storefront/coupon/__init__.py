"""Coupon book factory.

Provides get_coupon_book() / set_coupon_book() so the coupon table is
injected rather than hardcoded:
- by default it is read from the domain configuration ([custom.coupons])
- tests and callers can swap in their own table
"""

from storefront.coupon.book import DEFAULT_COUPONS, Coupon, CouponBook

_current_book: CouponBook | None = None


def get_coupon_book() -> CouponBook:
    """Return the active coupon book, building it from config on first use."""
    global _current_book
    if _current_book is None:
        from storefront.domain import storefront

        _current_book = CouponBook.from_config(storefront.config)
    return _current_book


def set_coupon_book(book: CouponBook) -> None:
    """Override the active coupon book (useful for tests)."""
    global _current_book
    _current_book = book


def reset_coupon_book() -> None:
    """Drop the active book so the next lookup rebuilds it from config."""
    global _current_book
    _current_book = None


__all__ = ["DEFAULT_COUPONS", "Coupon", "CouponBook", "get_coupon_book", "reset_coupon_book", "set_coupon_book"]
