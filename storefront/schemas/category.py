"""Pydantic schemas for Category."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from storefront.services.path_materializer import slugify


def _check_name(v: str) -> str:
    """Trim a category name and make sure it yields a usable slug."""
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters long")
    if not slugify(v):
        raise ValueError("Name must contain at least one letter or digit")
    return v


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str
    parent: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate category name."""
        return _check_name(v)


class CategoryUpdate(BaseModel):
    """Schema for updating a category.

    Omitting ``parent`` leaves the parent unchanged; an explicit ``null``
    moves the category to the root.
    """

    name: str | None = None
    parent: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate category name."""
        if v is None:
            return v
        return _check_name(v)


class CategoryResponse(BaseModel):
    """Schema for category response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    parent_id: str | None = None
    path: str
    created_at: datetime
    updated_at: datetime


class CategoryUpdateResponse(CategoryResponse):
    """Category response with the size of the cascade it triggered."""

    descendants_updated: int = 0
    products_updated: int = 0


class CategoryListResponse(BaseModel):
    """Schema for paginated category list response."""

    items: list[CategoryResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CategoryTreeNode(BaseModel):
    """A category with its nested children."""

    id: str
    name: str
    slug: str
    parent_id: str | None = None
    path: str
    children: list["CategoryTreeNode"] = []


class CategoryFlatNode(BaseModel):
    """A category in the flattened tree listing."""

    id: str
    name: str
    slug: str
    parent_id: str | None = None
    path: str
    depth: int
    has_children: bool


class RelatedCategoriesResponse(BaseModel):
    """Ids of a category and all of its descendants."""

    slug: str
    category_ids: list[str]


class CascadeFailureResponse(BaseModel):
    """A single failed update inside a partial cascade."""

    entity: str
    id: str
    error: str


class CascadeErrorResponse(BaseModel):
    """Body returned when a cascade was only partially applied."""

    message: str
    succeeded: int
    failed: int
    failures: list[CascadeFailureResponse]
