"""Marketplace HTTP API package."""

from marketplace.api.errors import register_exception_handlers
from marketplace.api.routes import cart_router, product_router, profile_router, purchase_router

__all__ = [
    "profile_router",
    "product_router",
    "cart_router",
    "purchase_router",
    "register_exception_handlers",
]
