"""Category API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from storefront.api.errors import to_http_exception
from storefront.dependencies import (
    Categories,
    CategoryCreator,
    CategoryDeleter,
    CategoryReader,
    CategoryUpdater,
    CurrentUser,
)
from storefront.schemas.category import (
    CategoryCreate,
    CategoryFlatNode,
    CategoryListResponse,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    CategoryUpdateResponse,
    RelatedCategoriesResponse,
)
from storefront.services.category_store import UNSET
from storefront.services.errors import CategoryError
from storefront.utils.pagination import parse_pagination, total_pages

router = APIRouter()


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    categories: Categories,
    user: CategoryReader,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int | None = Query(None, ge=1, description="Page size"),
):
    """List categories ordered by path."""
    page, limit, skip = parse_pagination(page, limit)
    items, total = categories.list_categories(skip, limit)
    return CategoryListResponse(
        items=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit),
    )


@router.get("/tree", response_model=list[CategoryTreeNode])
async def get_category_tree(
    categories: Categories,
    user: CurrentUser,
):
    """Get all categories as a nested tree.

    Served from cache for up to an hour, or until any category changes.
    """
    return categories.get_tree()


@router.get("/tree/flat", response_model=list[CategoryFlatNode])
async def get_flat_category_tree(
    categories: Categories,
    user: CurrentUser,
):
    """Get the category tree as a flat, depth-annotated listing."""
    return categories.get_flat_tree()


@router.get("/related", response_model=RelatedCategoriesResponse)
async def get_related_categories(
    categories: Categories,
    user: CategoryReader,
    slug: str = Query(..., min_length=1, description="Category slug"),
):
    """Get the ids of a category and all of its subcategories.

    Unknown slugs yield an empty list.
    """
    slug = slug.lower()
    return RelatedCategoriesResponse(
        slug=slug,
        category_ids=categories.related_category_ids(slug),
    )


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    categories: Categories,
    user: CategoryReader,
):
    """Get a category by ID."""
    category = categories.get(category_id)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category '{category_id}' not found",
        )

    return category


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: CategoryCreate,
    categories: Categories,
    user: CategoryCreator,
):
    """Create a new category."""
    try:
        categories.validate_parent(None, category_in.parent)
        return categories.create(category_in.name, category_in.parent)
    except CategoryError as e:
        raise to_http_exception(e)


@router.put("/{category_id}", response_model=CategoryUpdateResponse)
async def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    categories: Categories,
    user: CategoryUpdater,
):
    """Rename and/or move a category.

    The new path cascades to all descendants, and products in the affected
    subtree get their category chains rebuilt. Send ``"parent": null`` to
    move a category to the root.
    """
    category = categories.get(category_id)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category '{category_id}' not found",
        )

    parent_id = category_in.parent if "parent" in category_in.model_fields_set else UNSET

    try:
        if parent_id is not UNSET:
            categories.validate_parent(category, parent_id)
        result = categories.update(category, name=category_in.name, parent_id=parent_id)
    except CategoryError as e:
        raise to_http_exception(e)

    response = CategoryUpdateResponse.model_validate(result.category)
    response.descendants_updated = result.descendants_updated
    response.products_updated = result.products_updated
    return response


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    categories: Categories,
    user: CategoryDeleter,
):
    """Delete a category.

    Its children move up to its parent, and it is removed from every
    product that references it.
    """
    category = categories.get(category_id)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category '{category_id}' not found",
        )

    try:
        categories.delete(category)
    except CategoryError as e:
        raise to_http_exception(e)
