"""Pydantic schemas for Product."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|webp|gif)$", re.IGNORECASE)


def _check_image(value: str | None) -> str | None:
    """Validate an optional image path."""
    if value is None:
        return None
    value = value.strip()
    if value and not IMAGE_PATTERN.search(value):
        raise ValueError("Image must be a valid path ending in jpg, png, webp, or gif")
    return value


class ProductBase(BaseModel):
    """Base product schema with common fields."""

    sku: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = Field(min_length=1, max_length=1000)
    details: str | None = Field(None, max_length=10000)
    price: float = Field(ge=0)
    image: str | None = Field(None, max_length=255)
    quantity: int = Field(0, ge=0)
    show_if_out_of_stock: bool = False
    customization_schema: dict[str, Any] | None = None


class ProductCreate(ProductBase):
    """Schema for creating a product.

    ``category`` is the single chosen (leaf) category; the stored category
    list is its full ancestor chain.
    """

    category: str

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        """Validate image path extension."""
        return _check_image(v)


class ProductUpdate(BaseModel):
    """Schema for updating a product."""

    sku: str | None = Field(None, min_length=1)
    name: str | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=1, max_length=1000)
    details: str | None = Field(None, max_length=10000)
    price: float | None = Field(None, ge=0)
    image: str | None = Field(None, max_length=255)
    quantity: int | None = Field(None, ge=0)
    show_if_out_of_stock: bool | None = None
    customization_schema: dict[str, Any] | None = None
    category: str | None = None

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        """Validate image path extension."""
        return _check_image(v)


class ProductCategoryAssign(BaseModel):
    """Schema for assigning a product to a leaf category."""

    category: str


class ProductCategoriesResponse(BaseModel):
    """Stored ancestor chain of a product, root to leaf."""

    product_id: str
    categories: list[str]


class CategoryRef(BaseModel):
    """Category summary embedded in product responses."""

    id: str
    name: str
    slug: str


class ProductResponse(BaseModel):
    """Schema for product response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    sku: str
    name: str
    description: str
    details: str | None = None
    price: float
    image: str | None = None
    quantity: int | None = None  # Staff only
    show_if_out_of_stock: bool
    customization_schema: dict[str, Any] | None = None
    categories: list[CategoryRef] = []
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    """Schema for paginated product list response."""

    items: list[ProductResponse]
    total: int
    page: int
    limit: int
    total_pages: int
