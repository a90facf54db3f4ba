"""Exceptions raised by the category subsystem.

Everything derives from ``CategoryError`` (a ``ValueError``) so the routers can
translate service failures into HTTP responses the same way they handle any
other ``ValueError`` coming out of a service.
"""

from dataclasses import dataclass


class CategoryError(ValueError):
    """Base class for category subsystem errors."""


class CategoryValidationError(CategoryError):
    """The caller asked for an invalid change (bad parent, cycle, empty slug)."""


class CategoryNotFoundError(CategoryError):
    """A referenced category id or slug does not exist."""

    def __init__(self, category_id: str):
        super().__init__(f"Category '{category_id}' not found")
        self.category_id = category_id


class DanglingParentError(CategoryError):
    """A stored category points at a parent that no longer exists."""

    def __init__(self, category_id: str | None, parent_id: str):
        super().__init__(
            f"Category '{category_id}' references missing parent '{parent_id}'"
        )
        self.category_id = category_id
        self.parent_id = parent_id


class SlugCollisionError(CategoryError):
    """Two categories would share the same slug."""

    def __init__(self, slug: str):
        super().__init__(f"A category with slug '{slug}' already exists")
        self.slug = slug


class UnresolvableAncestorError(CategoryError):
    """A category path contains a slug that maps to no stored category."""

    def __init__(self, path: str, missing: list[str]):
        super().__init__(
            f"Cannot resolve ancestor chain '{path}': unknown slug(s) {', '.join(missing)}"
        )
        self.path = path
        self.missing = missing


@dataclass
class CascadeFailure:
    """A single entity that could not be updated during a cascade."""

    entity: str  # "category" or "product"
    id: str
    error: str


class CascadeError(CategoryError):
    """One or more updates failed during a best-effort batch.

    Updates that succeeded stay committed; ``succeeded`` counts them.
    """

    def __init__(
        self,
        message: str,
        succeeded: int = 0,
        failures: list[CascadeFailure] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.succeeded = succeeded
        self.failures = failures or []

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_detail(self) -> dict:
        """Response body describing the partial result."""
        return {
            "message": self.message,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failures": [
                {"entity": f.entity, "id": f.id, "error": f.error}
                for f in self.failures
            ],
        }

    def __str__(self):
        return f"{self.message} ({self.succeeded} succeeded, {self.failed} failed)"
