"""Translation of service errors into HTTP errors."""

import logging

from fastapi import HTTPException, status

from storefront.services.errors import (
    CascadeError,
    CategoryError,
    CategoryNotFoundError,
    CategoryValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(
    error: CategoryError,
    not_found_status: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Map a category subsystem error to an HTTPException.

    Args:
        error: The service error
        not_found_status: Status used when a *referenced* category is missing

    Returns:
        HTTPException ready to be raised
    """
    if isinstance(error, CascadeError):
        logger.error(f"Partial cascade: {error}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error.to_detail(),
        )
    if isinstance(error, CategoryNotFoundError):
        return HTTPException(status_code=not_found_status, detail=str(error))
    if isinstance(error, CategoryValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))

    # Dangling parent, slug collision, unresolvable ancestor chain
    logger.error(f"Category consistency error: {error}")
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
