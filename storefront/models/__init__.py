"""Database models."""

from storefront.models.database import Base, engine, get_db
from storefront.models.category import Category
from storefront.models.product import Product

__all__ = ["Base", "engine", "get_db", "Category", "Product"]
