"""Slug and materialized path derivation for categories."""

import re

from storefront.services.errors import CategoryValidationError

PATH_SEPARATOR = "/"

_NON_WORD = re.compile(r"[^\w ]+", re.ASCII)
_SPACES = re.compile(r" +")


def slugify(name: str) -> str:
    """Derive a URL-safe slug from a display name.

    Lowercases and trims the name, strips everything that is not an ASCII word
    character or a space, then replaces runs of spaces with a single hyphen.

    >>> slugify("  Home & Garden ")
    'home-garden'
    """
    slug = _NON_WORD.sub("", name.lower().strip())
    return _SPACES.sub("-", slug)


def materialize(
    name: str,
    slug: str | None,
    parent_path: str | None,
    name_changed: bool = False,
) -> tuple[str, str]:
    """Compute ``(slug, path)`` for a category.

    Args:
        name: Current display name
        slug: Currently stored slug, if any
        parent_path: Stored path of the parent, or None for a root category
        name_changed: True when ``name`` differs from the persisted name

    Returns:
        Tuple of (slug, path)

    Raises:
        CategoryValidationError: If the name yields an empty slug
    """
    if name_changed or not slug:
        slug = slugify(name)
    if not slug:
        raise CategoryValidationError(
            f"Category name '{name}' must contain at least one letter or digit"
        )

    if parent_path is not None:
        return slug, f"{parent_path}{PATH_SEPARATOR}{slug}"
    return slug, slug


def split_path(path: str) -> list[str]:
    """Split a materialized path into its root-to-leaf slugs."""
    return [part for part in path.split(PATH_SEPARATOR) if part]
