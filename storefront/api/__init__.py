"""API routers."""

from storefront.api import categories, products

__all__ = ["categories", "products"]
