"""Keeps product category lists expanded to the full ancestor chain."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.product import Product
from storefront.services.category_store import CategoryStore
from storefront.services.errors import (
    CascadeError,
    CascadeFailure,
    CategoryError,
    CategoryNotFoundError,
    UnresolvableAncestorError,
)
from storefront.services.path_materializer import split_path

logger = logging.getLogger(__name__)


class ProductCategorySynchronizer:
    """Expands a product's chosen leaf category into its ancestor chain.

    A product assigned to ``laptops`` (path ``electronics/computers/laptops``)
    stores the ids of electronics, computers and laptops in that order, so a
    filter on any ancestor also matches the product.
    """

    def __init__(self, db: Session, store: CategoryStore):
        """Initialize with database session and category store."""
        self.db = db
        self.store = store

    def expand(self, leaf_id: str) -> list[str]:
        """Resolve the root-to-leaf chain of category ids for a leaf.

        Raises:
            CategoryNotFoundError: If the leaf does not exist
            UnresolvableAncestorError: If a slug in the leaf's path is unknown
        """
        leaf = self.store.find_by_id(leaf_id)
        if leaf is None:
            raise CategoryNotFoundError(leaf_id)

        slugs = split_path(leaf.path)
        by_slug = {c.slug: c.id for c in self.store.find_by_slugs(slugs)}

        missing = [slug for slug in slugs if slug not in by_slug]
        if missing:
            raise UnresolvableAncestorError(leaf.path, missing)

        return [by_slug[slug] for slug in slugs]

    def sync(self, product: Product) -> list[str]:
        """Replace the product's categories with its leaf's ancestor chain.

        Runs before the product is persisted; does not commit.
        """
        leaf_id = product.leaf_category_id
        if leaf_id is None:
            return []

        chain = self.expand(leaf_id)
        product.categories = chain
        return chain

    def find_products_referencing(self, category_ids: list[str]) -> list[Product]:
        """Get every product whose category list holds any of ``category_ids``."""
        if not category_ids:
            return []
        conditions = [Product.references_category(cid) for cid in category_ids]
        return self.db.query(Product).filter(or_(*conditions)).all()

    def resync_products(self, category_ids: list[str]) -> int:
        """Re-expand every product that references any of ``category_ids``.

        Products are independent; each is committed on its own.

        Returns:
            Number of products whose stored chain changed

        Raises:
            CascadeError: If any product could not be re-synchronized
        """
        updated = 0
        failures: list[CascadeFailure] = []

        for product in self.find_products_referencing(category_ids):
            product_id = product.id
            before = product.categories
            try:
                after = self.sync(product)
                if after == before:
                    continue
                self.db.commit()
            except (CategoryError, SQLAlchemyError) as e:
                self.db.rollback()
                logger.error(f"Failed to re-sync categories of product {product_id}: {e}")
                failures.append(CascadeFailure(entity="product", id=product_id, error=str(e)))
                continue
            updated += 1

        logger.info(f"Re-synced {updated} product(s), {len(failures)} failure(s)")

        if failures:
            raise CascadeError(
                "Product category re-synchronization was partial",
                succeeded=updated,
                failures=failures,
            )
        return updated

    def remove_category(self, category_id: str) -> int:
        """Strip a category id from every product that references it.

        Returns:
            Number of products changed
        """
        products = self.find_products_referencing([category_id])
        for product in products:
            product.categories = [cid for cid in product.categories if cid != category_id]

        if products:
            self.db.commit()
            logger.info(f"Removed category {category_id} from {len(products)} product(s)")
        return len(products)
