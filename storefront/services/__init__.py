"""Business logic services."""

from storefront.services.category_service import CategoryService
from storefront.services.category_store import CategoryStore
from storefront.services.category_sync import ProductCategorySynchronizer
from storefront.services.descendant_propagator import DescendantPropagator
from storefront.services.filter_service import FilterService
from storefront.services.product_service import ProductService
from storefront.services.tree_cache import TreeCache

__all__ = [
    "CategoryService",
    "CategoryStore",
    "ProductCategorySynchronizer",
    "DescendantPropagator",
    "FilterService",
    "ProductService",
    "TreeCache",
]
