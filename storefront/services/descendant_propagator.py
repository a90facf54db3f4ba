"""Descendant path propagation after a category's path changes."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from storefront.models.category import Category
from storefront.services.category_store import CategoryStore
from storefront.services.errors import CascadeError, CascadeFailure, CategoryError

logger = logging.getLogger(__name__)


class DescendantPropagator:
    """Re-derives the paths of every descendant of a category.

    The subtree is walked one level at a time through parent references, so
    each node is recomputed from its parent's freshly stored path. Siblings
    within a level are independent: each is committed on its own, and a
    failing node is recorded without abandoning the rest of the cascade.
    """

    def __init__(self, store: CategoryStore):
        """Initialize with the category store."""
        self.store = store

    def propagate(self, category: Category) -> int:
        """Bring the subtree under ``category`` in line with its current path.

        Args:
            category: A category whose path has just been persisted

        Returns:
            Number of descendants whose path was rewritten

        Raises:
            CascadeError: If any descendant failed to update. Descendants that
                were updated stay committed.
        """
        updated = 0
        failures: list[CascadeFailure] = []
        visited = {category.id}
        frontier = [category.id]

        while frontier:
            next_frontier = []
            for parent_id in frontier:
                for child in self.store.find_direct_children(parent_id):
                    if child.id in visited:
                        continue
                    visited.add(child.id)

                    child_id = child.id
                    try:
                        changed = self.store.refresh_path(child)
                    except (CategoryError, SQLAlchemyError) as e:
                        self.store.db.rollback()
                        logger.error(f"Failed to update descendant {child_id}: {e}")
                        failures.append(
                            CascadeFailure(entity="category", id=child_id, error=str(e))
                        )
                        continue

                    # An unchanged node means its own subtree is already consistent
                    if changed:
                        updated += 1
                        next_frontier.append(child_id)
            frontier = next_frontier

        if updated or failures:
            logger.info(
                f"Propagated '{category.path}' to {updated} descendant(s), "
                f"{len(failures)} failure(s)"
            )

        if failures:
            raise CascadeError(
                f"Path update of descendants of category '{category.id}' was partial",
                succeeded=updated,
                failures=failures,
            )
        return updated
