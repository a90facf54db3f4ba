"""Helpers for turning the flat category set into a nested tree and back."""

import logging
from typing import Iterable, Iterator

from storefront.models.category import Category

logger = logging.getLogger(__name__)


def build_category_tree(categories: Iterable[Category]) -> list[dict]:
    """Build a nested forest from a flat list of categories.

    Each node is the category's plain dict plus a ``children`` list. Children
    keep the order of the input. A node whose parent is not part of the input
    is treated as a root.
    """
    categories = list(categories)

    nodes: dict[str, dict] = {}
    for category in categories:
        nodes[category.id] = {**category.to_dict(), "children": []}

    roots: list[dict] = []
    for category in categories:
        node = nodes[category.id]
        if category.parent_id and category.parent_id in nodes:
            nodes[category.parent_id]["children"].append(node)
        else:
            if category.parent_id:
                logger.warning(
                    f"Category {category.id} references missing parent "
                    f"{category.parent_id}; listing it as a root"
                )
            roots.append(node)

    return roots


def flatten_category_tree(nodes: Iterable[dict], depth: int = 0) -> Iterator[dict]:
    """Yield tree nodes in pre-order without children, annotated with depth."""
    for node in nodes:
        children = node.get("children", [])
        flat = {key: value for key, value in node.items() if key != "children"}
        flat["depth"] = depth
        flat["has_children"] = bool(children)
        yield flat
        yield from flatten_category_tree(children, depth + 1)
