"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.models.database import get_db
from storefront.services.category_service import CategoryService
from storefront.services.tree_cache import TreeCache, get_redis_client
from storefront.utils.auth import get_current_permissions, get_current_user, require_permission


def get_tree_cache() -> TreeCache:
    """Dependency that provides the category tree cache."""
    return TreeCache(get_redis_client())


def get_category_service(
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[TreeCache, Depends(get_tree_cache)],
) -> CategoryService:
    """Dependency that provides a category service bound to the request session."""
    return CategoryService(db, cache)


# Type aliases for common dependencies
DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[str, Depends(get_current_user)]
CurrentPermissions = Annotated[set[str], Depends(get_current_permissions)]
Categories = Annotated[CategoryService, Depends(get_category_service)]

# Permission-gated callers
CategoryReader = Annotated[str, Depends(require_permission("read:categories"))]
CategoryCreator = Annotated[str, Depends(require_permission("create:categories"))]
CategoryUpdater = Annotated[str, Depends(require_permission("update:categories"))]
CategoryDeleter = Annotated[str, Depends(require_permission("delete:categories"))]
ProductReader = Annotated[str, Depends(require_permission("read:products"))]
ProductCreator = Annotated[str, Depends(require_permission("create:products"))]
ProductUpdater = Annotated[str, Depends(require_permission("update:products"))]
ProductDeleter = Annotated[str, Depends(require_permission("delete:products"))]
