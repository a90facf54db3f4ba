"""Category service: create, update, delete and read the category tree."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.services.category_store import UNSET, CategoryStore
from storefront.services.category_sync import ProductCategorySynchronizer
from storefront.services.category_tree import build_category_tree, flatten_category_tree
from storefront.services.descendant_propagator import DescendantPropagator
from storefront.services.errors import (
    CascadeError,
    CascadeFailure,
    CategoryError,
    CategoryNotFoundError,
    CategoryValidationError,
)
from storefront.services.path_materializer import PATH_SEPARATOR
from storefront.services.tree_cache import TreeCache

logger = logging.getLogger(__name__)


@dataclass
class CategoryUpdateResult:
    """Outcome of a successful category update."""

    category: Category
    descendants_updated: int = 0
    products_updated: int = 0


@dataclass
class CategoryDeleteResult:
    """Outcome of a successful category deletion."""

    children_reparented: int = 0
    descendants_updated: int = 0
    products_updated: int = 0


class CategoryService:
    """Orchestrates category mutations and their side effects.

    Each mutation persists through the store, cascades path changes to
    descendants, keeps product ancestor chains in sync and evicts the cached
    tree, even when the cascade only partially succeeded.
    """

    def __init__(self, db: Session, cache: TreeCache):
        """Initialize with database session and tree cache."""
        self.db = db
        self.cache = cache
        self.store = CategoryStore(db)
        self.propagator = DescendantPropagator(self.store)
        self.synchronizer = ProductCategorySynchronizer(db, self.store)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, category_id: str) -> Category | None:
        """Get a category by ID."""
        return self.store.find_by_id(category_id)

    def list_categories(self, skip: int = 0, limit: int = 100) -> tuple[list[Category], int]:
        """Get a page of categories ordered by path, with the total count."""
        return self.store.get_multi(skip, limit), self.store.count()

    def get_tree(self) -> list[dict]:
        """Get the nested category forest, served from cache when possible."""
        return self.cache.get_or_build(lambda: build_category_tree(self.store.find_all()))

    def get_flat_tree(self) -> list[dict]:
        """Get the forest as a depth-annotated, pre-order list."""
        return list(flatten_category_tree(self.get_tree()))

    def related_category_ids(self, slug: str) -> list[str]:
        """Get the ids of the category with ``slug`` and all its descendants.

        Returns an empty list for an unknown slug.
        """
        category = self.store.find_by_slug(slug)
        if category is None:
            return []
        return [c.id for c in self.store.find_by_path_prefix(category.path)]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_parent(self, category: Category | None, parent_id: str | None) -> None:
        """Reject a parent assignment that is unknown or would create a cycle.

        Args:
            category: The category being edited, or None when creating
            parent_id: Requested parent ID (None for a root category)

        Raises:
            CategoryNotFoundError: If the parent does not exist
            CategoryValidationError: If the parent is the category itself or
                one of its descendants
        """
        if parent_id is None:
            return

        if category is not None and parent_id == category.id:
            raise CategoryValidationError("Cannot set a category to be its own parent")

        parent = self.store.find_by_id(parent_id)
        if parent is None:
            raise CategoryNotFoundError(parent_id)

        if category is None:
            return

        if parent.path.startswith(f"{category.path}{PATH_SEPARATOR}"):
            raise CategoryValidationError(
                "A category cannot have its own descendant as a parent"
            )

        # Walk the parent chain as well, in case stored paths are stale
        seen = set()
        ancestor = parent
        while ancestor is not None and ancestor.parent_id is not None:
            if ancestor.parent_id == category.id:
                raise CategoryValidationError(
                    "A category cannot have its own descendant as a parent"
                )
            if ancestor.parent_id in seen:
                break
            seen.add(ancestor.parent_id)
            ancestor = self.store.find_by_id(ancestor.parent_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, name: str, parent_id: str | None = None) -> Category:
        """Create a category."""
        try:
            return self.store.create(name, parent_id)
        finally:
            self.cache.invalidate()

    def update(self, category: Category, name: str | None = None, parent_id=UNSET) -> CategoryUpdateResult:
        """Rename and/or move a category.

        The new path cascades to every descendant. When the name or parent
        changed, every product referencing the category or a descendant has
        its ancestor chain re-expanded.

        Raises:
            CascadeError: If some descendants or products failed to update
        """
        hierarchy_changing = (name is not None and name != category.name) or (
            parent_id is not UNSET and parent_id != category.parent_id
        )

        try:
            self.store.update(category, name=name, parent_id=parent_id)
            result = CategoryUpdateResult(category=category)

            failures: list[CascadeFailure] = []
            succeeded = 0
            try:
                result.descendants_updated = self.propagator.propagate(category)
            except CascadeError as e:
                failures.extend(e.failures)
                succeeded += e.succeeded

            if hierarchy_changing:
                affected_ids = self.related_category_ids(category.slug)
                try:
                    result.products_updated = self.synchronizer.resync_products(affected_ids)
                except CascadeError as e:
                    failures.extend(e.failures)
                    succeeded += e.succeeded

            if failures:
                raise CascadeError(
                    f"Update of category '{category.id}' was applied partially",
                    succeeded=succeeded + result.descendants_updated + result.products_updated,
                    failures=failures,
                )

            logger.info(
                f"Updated category {category.id}: {result.descendants_updated} descendant(s), "
                f"{result.products_updated} product(s) updated"
            )
            return result
        finally:
            self.cache.invalidate()

    def delete(self, category: Category) -> CategoryDeleteResult:
        """Delete a category, splicing it out of the tree.

        Direct children move up to the deleted category's parent (their
        subtrees follow), and the category is removed from every product
        that references it.

        Raises:
            CascadeError: If a direct child could not be re-parented (the
                category is then kept), or if some deeper descendants failed
                to update after the category was deleted
        """
        category_id = category.id
        new_parent_id = category.parent_id
        result = CategoryDeleteResult()
        failures: list[CascadeFailure] = []
        blocking = False

        try:
            for child in self.store.find_direct_children(category_id):
                child_id = child.id
                try:
                    self.store.update(child, parent_id=new_parent_id)
                except CategoryError as e:
                    logger.error(f"Failed to re-parent child {child_id} of {category_id}: {e}")
                    failures.append(CascadeFailure(entity="category", id=child_id, error=str(e)))
                    blocking = True
                    continue
                result.children_reparented += 1

                try:
                    result.descendants_updated += self.propagator.propagate(child)
                except CascadeError as e:
                    result.descendants_updated += e.succeeded
                    failures.extend(e.failures)

            if blocking:
                raise CascadeError(
                    f"Category '{category_id}' was not deleted: some children could not be re-parented",
                    succeeded=result.children_reparented + result.descendants_updated,
                    failures=failures,
                )

            result.products_updated = self.synchronizer.remove_category(category_id)
            self.store.delete(category)
            logger.info(
                f"Deleted category {category_id}: {result.children_reparented} child(ren) re-parented, "
                f"{result.products_updated} product(s) updated"
            )

            if failures:
                raise CascadeError(
                    f"Category '{category_id}' was deleted but some descendants were not updated",
                    succeeded=result.children_reparented + result.descendants_updated,
                    failures=failures,
                )
            return result
        finally:
            self.cache.invalidate()
