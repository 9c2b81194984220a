"""Storefront domain API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import order_router

__all__ = ["order_router", "register_error_handlers"]
