"""Filter service for dynamic product queries."""

from sqlalchemy import false, or_
from sqlalchemy.orm import Session, Query

from storefront.models.product import Product


class FilterService:
    """Service for building dynamic product queries."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def build_query(
        self,
        category_ids: list[str] | None = None,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        max_inventory: int | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> Query:
        """Build a SQLAlchemy query with the given filters.

        Args:
            category_ids: Match products referencing any of these categories
            search: Search term for name and SKU
            min_price: Minimum price
            max_price: Maximum price
            max_inventory: Maximum stock quantity
            sort_by: Sort field (name, price, quantity)
            sort_order: Sort direction (asc, desc)

        Returns:
            SQLAlchemy Query object
        """
        query = self.db.query(Product)

        # Category filter (already expanded to the category's subtree)
        if category_ids is not None:
            if not category_ids:
                query = query.filter(false())
            else:
                query = query.filter(
                    or_(*[Product.references_category(cid) for cid in category_ids])
                )

        # Search filter
        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Product.name.ilike(search_term),
                    Product.sku.ilike(search_term),
                )
            )

        # Price range filters
        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)

        # Inventory filter
        if max_inventory is not None:
            query = query.filter(Product.quantity <= max_inventory)

        # Sorting
        query = self._apply_sorting(query, sort_by, sort_order)

        return query

    def _apply_sorting(
        self, query: Query, sort_by: str, sort_order: str
    ) -> Query:
        """Apply sorting to query.

        Args:
            query: Current query
            sort_by: Field to sort by
            sort_order: asc or desc

        Returns:
            Modified query with sorting
        """
        # Map sort_by to actual columns
        sort_columns = {
            "name": Product.name,
            "price": Product.price,
            "quantity": Product.quantity,
            "sku": Product.sku,
            "created_at": Product.created_at,
        }

        column = sort_columns.get(sort_by, Product.name)

        if sort_order.lower() == "desc":
            query = query.order_by(column.desc())
        else:
            query = query.order_by(column.asc())

        return query

    def execute_with_pagination(
        self, query: Query, skip: int = 0, limit: int = 50
    ) -> tuple[list[Product], int]:
        """Execute query with pagination and return results with total count.

        Args:
            query: SQLAlchemy query to execute
            skip: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (products list, total count)
        """
        total = query.count()
        products = query.offset(skip).limit(limit).all()
        return products, total
