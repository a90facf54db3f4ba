"""Category store: the authoritative category tree and its query surface."""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.services.errors import (
    CategoryError,
    DanglingParentError,
    SlugCollisionError,
)
from storefront.services.path_materializer import PATH_SEPARATOR, materialize

logger = logging.getLogger(__name__)

# Sentinel distinguishing "parent not given" from "parent explicitly None"
UNSET = object()


class CategoryStore:
    """Persistence and queries for categories.

    The store is the only writer of ``Category.slug`` and ``Category.path``.
    Every write goes through the path materializer, resolving the parent's
    stored path first. Cycle prevention is the caller's job.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_id(self, category_id: str) -> Category | None:
        """Get a category by ID."""
        return self.db.query(Category).filter(Category.id == category_id).first()

    def find_by_slug(self, slug: str) -> Category | None:
        """Get a category by slug."""
        return self.db.query(Category).filter(Category.slug == slug).first()

    def find_by_slugs(self, slugs: list[str]) -> list[Category]:
        """Get every category whose slug is in ``slugs``."""
        if not slugs:
            return []
        return self.db.query(Category).filter(Category.slug.in_(slugs)).all()

    def find_by_path_prefix(self, prefix: str) -> list[Category]:
        """Get the node at ``prefix`` and every node below it.

        The match is anchored on whole path segments: ``electronics`` matches
        ``electronics`` and ``electronics/laptops`` but not ``electronics2``.
        """
        return (
            self.db.query(Category)
            .filter(
                or_(
                    Category.path == prefix,
                    Category.path.startswith(prefix + PATH_SEPARATOR, autoescape=True),
                )
            )
            .order_by(Category.path.asc())
            .all()
        )

    def find_direct_children(self, parent_id: str) -> list[Category]:
        """Get the immediate children of a category."""
        return (
            self.db.query(Category)
            .filter(Category.parent_id == parent_id)
            .order_by(Category.path.asc())
            .all()
        )

    def find_all(self) -> list[Category]:
        """Get every category ordered by path."""
        return self.db.query(Category).order_by(Category.path.asc()).all()

    def get_multi(self, skip: int = 0, limit: int = 100) -> list[Category]:
        """Get a page of categories ordered by path."""
        return (
            self.db.query(Category)
            .order_by(Category.path.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        """Count total categories."""
        return self.db.query(Category).count()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, name: str, parent_id: str | None = None) -> Category:
        """Create a category with its slug and path derived from name and parent."""
        category = Category(name=name, parent_id=parent_id)
        self._materialize(category, name_changed=True)

        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        logger.info(f"Created category {category.id} at '{category.path}'")
        return category

    def update(self, category: Category, name: str | None = None, parent_id=UNSET) -> bool:
        """Apply a name and/or parent change and recompute slug and path.

        Returns:
            True if the stored path changed
        """
        name_changed = name is not None and name != category.name
        if name_changed:
            category.name = name
        if parent_id is not UNSET:
            category.parent_id = parent_id

        old_path = category.path
        try:
            self._materialize(category, name_changed=name_changed)
        except CategoryError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(category)
        if category.path != old_path:
            logger.info(f"Category {category.id} moved '{old_path}' -> '{category.path}'")
        return category.path != old_path

    def refresh_path(self, category: Category) -> bool:
        """Re-derive a category's path from its parent's stored path.

        Returns:
            True if the path changed and was persisted
        """
        old_path = category.path
        self._materialize(category)
        if category.path == old_path:
            return False

        self.db.commit()
        return True

    def delete(self, category: Category) -> None:
        """Delete a category row. Children must already have been re-parented."""
        self.db.delete(category)
        self.db.commit()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parent_path(self, category: Category) -> str | None:
        """Resolve the stored path of the category's parent.

        Raises:
            DanglingParentError: If parent_id is set but the parent is missing
        """
        if category.parent_id is None:
            return None

        parent = self.find_by_id(category.parent_id)
        if parent is None:
            raise DanglingParentError(category.id, category.parent_id)
        return parent.path

    def _materialize(self, category: Category, name_changed: bool = False) -> None:
        """Set slug and path on ``category`` (no commit)."""
        slug, path = materialize(
            category.name,
            category.slug,
            self._parent_path(category),
            name_changed=name_changed,
        )

        if slug != category.slug:
            clash = (
                self.db.query(Category)
                .filter(Category.slug == slug, Category.id != category.id)
                .first()
            )
            if clash is not None:
                raise SlugCollisionError(slug)

        category.slug = slug
        category.path = path
