"""Product API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from storefront.api.errors import to_http_exception
from storefront.dependencies import (
    Categories,
    CurrentPermissions,
    DbSession,
    ProductCreator,
    ProductDeleter,
    ProductReader,
    ProductUpdater,
)
from storefront.schemas.product import (
    ProductCategoriesResponse,
    ProductCategoryAssign,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from storefront.services.errors import CategoryError
from storefront.services.filter_service import FilterService
from storefront.services.product_service import ProductService
from storefront.utils.pagination import parse_pagination, parse_sort, total_pages

router = APIRouter()

STAFF_PERMISSION = "read:inventory"
PUBLIC_SORT_FIELDS = ["name", "price"]
STAFF_SORT_FIELDS = ["name", "price", "quantity", "sku", "created_at"]


@router.get("", response_model=ProductListResponse)
async def list_products(
    db: DbSession,
    categories: Categories,
    user: ProductReader,
    permissions: CurrentPermissions,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int | None = Query(None, ge=1, description="Page size"),
    category: str | None = Query(None, description="Category slug, includes subcategories"),
    search: str | None = Query(None, description="Search in name and SKU"),
    min_price: float | None = Query(None, ge=0, description="Minimum price"),
    max_price: float | None = Query(None, ge=0, description="Maximum price"),
    max_inventory: int | None = Query(None, ge=0, description="Maximum stock (staff only)"),
    sort: str | None = Query(None, description="Sort field, prefix with '-' for descending"),
):
    """List and filter products.

    Filtering by category matches products in that category or any of its
    subcategories. Stock levels are only visible to staff.
    """
    is_staff = STAFF_PERMISSION in permissions
    page, limit, skip = parse_pagination(page, limit)

    category_ids = None
    if category:
        category_ids = categories.related_category_ids(category.lower())
        if not category_ids:
            return ProductListResponse(items=[], total=0, page=page, limit=limit, total_pages=0)

    sort_by, sort_order = parse_sort(sort, STAFF_SORT_FIELDS if is_staff else PUBLIC_SORT_FIELDS)

    filter_service = FilterService(db)
    query = filter_service.build_query(
        category_ids=category_ids,
        search=search,
        min_price=min_price,
        max_price=max_price,
        max_inventory=max_inventory if is_staff else None,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    products, total = filter_service.execute_with_pagination(query, skip, limit)

    product_service = ProductService(db)
    items = [product_service.enrich(p, include_inventory=is_staff) for p in products]

    return ProductListResponse(
        items=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit),
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: DbSession,
    user: ProductReader,
    permissions: CurrentPermissions,
):
    """Get a product by ID."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    return product_service.enrich(product, include_inventory=STAFF_PERMISSION in permissions)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    db: DbSession,
    user: ProductCreator,
):
    """Create a new product in the given (leaf) category."""
    product_service = ProductService(db)

    # Check for duplicate SKU
    existing = product_service.get_by_sku(product_in.sku)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Product with SKU '{product_in.sku}' already exists",
        )

    if product_service.get_by_name(product_in.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Product named '{product_in.name}' already exists",
        )

    try:
        product = product_service.create(product_in)
    except CategoryError as e:
        raise to_http_exception(e)

    return product_service.enrich(product, include_inventory=True)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    product_in: ProductUpdate,
    db: DbSession,
    user: ProductUpdater,
):
    """Update an existing product."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    # Check for duplicate SKU if being updated
    if product_in.sku and product_in.sku != product.sku:
        existing = product_service.get_by_sku(product_in.sku)
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product with SKU '{product_in.sku}' already exists",
            )

    # Check for duplicate name if being updated
    if product_in.name and product_in.name != product.name:
        if product_service.get_by_name(product_in.name):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product named '{product_in.name}' already exists",
            )

    try:
        product = product_service.update(product, product_in)
    except CategoryError as e:
        raise to_http_exception(e)

    return product_service.enrich(product, include_inventory=True)


@router.put("/{product_id}/category", response_model=ProductCategoriesResponse)
async def assign_product_category(
    product_id: str,
    assignment: ProductCategoryAssign,
    db: DbSession,
    user: ProductUpdater,
):
    """Assign a product to a leaf category.

    The stored category list becomes the leaf's full ancestor chain.
    """
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    try:
        chain = product_service.assign_category(product, assignment.category)
    except CategoryError as e:
        raise to_http_exception(e)

    return ProductCategoriesResponse(product_id=product.id, categories=chain)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    db: DbSession,
    user: ProductDeleter,
):
    """Delete a product."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    product_service.delete(product)
