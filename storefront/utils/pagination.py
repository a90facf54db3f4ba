"""Pagination and sorting helpers shared by list endpoints."""

import math

from storefront.config import settings


def parse_pagination(page: int = 1, limit: int | None = None) -> tuple[int, int, int]:
    """Normalize page/limit query values.

    Returns:
        Tuple of (page, limit, skip)
    """
    page = max(page or 1, 1)
    limit = limit or settings.default_page_size
    limit = max(1, min(limit, settings.max_page_size))
    return page, limit, (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` items."""
    return math.ceil(total / limit) if limit else 0


def parse_sort(
    sort_by: str | None,
    allowed_fields: list[str],
    default_field: str = "name",
) -> tuple[str, str]:
    """Resolve a ``field`` / ``-field`` sort key against an allow-list.

    Unknown fields fall back to the default field in ascending order.

    Returns:
        Tuple of (field, "asc" | "desc")
    """
    if sort_by:
        field = sort_by.lstrip("-")
        if field in allowed_fields:
            return field, "desc" if sort_by.startswith("-") else "asc"
    return default_field, "asc"
