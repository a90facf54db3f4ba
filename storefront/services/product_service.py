"""Product service for CRUD operations."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.services.category_store import CategoryStore
from storefront.services.category_sync import ProductCategorySynchronizer
from storefront.services.errors import CategoryError

logger = logging.getLogger(__name__)


class ProductService:
    """Service for product CRUD operations.

    Category assignments go through the synchronizer before anything is
    written, so a product is never stored with a partial ancestor chain.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db
        self.store = CategoryStore(db)
        self.synchronizer = ProductCategorySynchronizer(db, self.store)

    def get(self, product_id: str) -> Product | None:
        """Get a product by ID."""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_sku(self, sku: str) -> Product | None:
        """Get a product by SKU."""
        return self.db.query(Product).filter(Product.sku == sku).first()

    def get_by_name(self, name: str) -> Product | None:
        """Get a product by name."""
        return self.db.query(Product).filter(Product.name == name).first()

    def count(self) -> int:
        """Count total products."""
        return self.db.query(Product).count()

    def create(self, product_in: ProductCreate) -> Product:
        """Create a new product assigned to the given leaf category.

        Raises:
            CategoryError: If the category chain cannot be resolved
        """
        product = Product(
            sku=product_in.sku,
            name=product_in.name,
            description=product_in.description,
            details=product_in.details or product_in.description,
            price=Decimal(str(product_in.price)),
            image=product_in.image or "",
            quantity=product_in.quantity,
            show_if_out_of_stock=product_in.show_if_out_of_stock,
        )
        product.customization_schema = product_in.customization_schema
        product.categories = [product_in.category]
        self.synchronizer.sync(product)

        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Created product {product.id} in categories {product.categories}")
        return product

    def update(self, product: Product, product_in: ProductUpdate) -> Product:
        """Update an existing product.

        Raises:
            CategoryError: If a new category chain cannot be resolved
        """
        update_data = product_in.model_dump(exclude_unset=True)

        # The leaf category is expanded separately
        category = update_data.pop("category", None)
        if "price" in update_data and update_data["price"] is not None:
            update_data["price"] = Decimal(str(update_data["price"]))

        for field, value in update_data.items():
            setattr(product, field, value)

        if category is not None:
            product.categories = [category]
            try:
                self.synchronizer.sync(product)
            except CategoryError:
                self.db.rollback()
                raise

        self.db.commit()
        self.db.refresh(product)
        return product

    def assign_category(self, product: Product, category_id: str) -> list[str]:
        """Assign a product to a leaf category and store its ancestor chain.

        Returns:
            The stored root-to-leaf category ids

        Raises:
            CategoryError: If the category chain cannot be resolved
        """
        chain = self.synchronizer.expand(category_id)
        product.categories = chain

        self.db.commit()
        self.db.refresh(product)
        return product.categories

    def delete(self, product: Product) -> None:
        """Delete a product."""
        self.db.delete(product)
        self.db.commit()

    def enrich(self, product: Product, include_inventory: bool = False) -> dict:
        """Build response data with category names resolved.

        Stock quantity is only exposed to staff.
        """
        category_ids = product.categories
        categories = {}
        if category_ids:
            rows = self.db.query(Category).filter(Category.id.in_(category_ids)).all()
            categories = {c.id: c for c in rows}

        data = {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "description": product.description,
            "details": product.details,
            "price": product.price_float,
            "image": product.image,
            "quantity": product.quantity if include_inventory else None,
            "show_if_out_of_stock": product.show_if_out_of_stock,
            "customization_schema": product.customization_schema,
            "categories": [
                {"id": c.id, "name": c.name, "slug": c.slug}
                for c in (categories.get(cid) for cid in category_ids)
                if c is not None
            ],
            "created_at": product.created_at,
            "updated_at": product.updated_at,
        }
        return data
