"""Product database model."""

import json
from datetime import datetime

from sqlalchemy import Boolean, Column, String, Text, DateTime, Integer, Numeric

from storefront.models.database import Base, generate_uuid


class Product(Base):
    """Product model (catalog item sold in the storefront)."""

    __tablename__ = "products"

    id = Column(String, primary_key=True, default=generate_uuid, index=True)
    sku = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    show_if_out_of_stock = Column(Boolean, nullable=False, default=False)
    # Free-form description of the product's configurable options
    _customization_schema = Column("customization_schema", Text, nullable=True)
    # Ordered root-to-leaf category ids, stored as JSON text for SQLite compatibility
    _categories = Column("categories", Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def categories(self) -> list[str]:
        """Get category ids as a list."""
        if self._categories:
            return json.loads(self._categories)
        return []

    @categories.setter
    def categories(self, value: list[str] | None):
        """Set category ids from a list."""
        self._categories = json.dumps(list(value or []))

    @property
    def customization_schema(self) -> dict | None:
        """Get the customization schema as a dict."""
        if self._customization_schema:
            return json.loads(self._customization_schema)
        return None

    @customization_schema.setter
    def customization_schema(self, value: dict | None):
        """Set the customization schema from a dict."""
        self._customization_schema = json.dumps(value) if value is not None else None

    @property
    def leaf_category_id(self) -> str | None:
        """The chosen (deepest) category, i.e. the last entry."""
        categories = self.categories
        return categories[-1] if categories else None

    @property
    def price_float(self) -> float | None:
        """Get price as float."""
        if self.price is not None:
            return float(self.price)
        return None

    @classmethod
    def references_category(cls, category_id: str):
        """SQL condition matching products whose category list holds ``category_id``."""
        return cls._categories.like(f'%"{category_id}"%')

    def __repr__(self):
        return f"<Product(id='{self.id}', sku='{self.sku}', name='{self.name}')>"
