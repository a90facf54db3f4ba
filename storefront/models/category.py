"""Category database model."""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey

from storefront.models.database import Base, generate_uuid


class Category(Base):
    """Category node in the product category hierarchy.

    ``path`` is the slash-delimited chain of slugs from the root down to this
    node (e.g. ``electronics/computers/laptops``). It is derived data, written
    only by the category store.
    """

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=generate_uuid, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    parent_id = Column(String, ForeignKey("categories.id"), nullable=True, index=True)
    path = Column(String, nullable=False, default="", index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def depth(self) -> int:
        """Number of ancestors above this node."""
        return self.path.count("/") if self.path else 0

    def to_dict(self) -> dict:
        """Plain dict used by the tree builder and the tree cache."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "parent_id": self.parent_id,
            "path": self.path,
        }

    def __repr__(self):
        return f"<Category(id='{self.id}', path='{self.path}')>"
