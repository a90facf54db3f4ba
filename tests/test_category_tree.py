"""Tests for building and flattening the category tree."""

import logging

from storefront.models.category import Category
from storefront.services.category_tree import build_category_tree, flatten_category_tree


def make(id, name, parent_id=None, path=None):
    return Category(id=id, name=name, slug=name.lower(), parent_id=parent_id, path=path or name.lower())


def test_nests_children_under_parents_in_input_order():
    categories = [
        make("1", "Electronics"),
        make("2", "Laptops", "1", "electronics/laptops"),
        make("3", "Phones", "1", "electronics/phones"),
        make("4", "Garden"),
    ]

    tree = build_category_tree(categories)

    assert [n["slug"] for n in tree] == ["electronics", "garden"]
    assert [n["slug"] for n in tree[0]["children"]] == ["laptops", "phones"]
    assert tree[1]["children"] == []


def test_node_with_missing_parent_is_listed_as_root(caplog):
    categories = [make("1", "Electronics"), make("2", "Stray", "gone", "gone/stray")]

    with caplog.at_level(logging.WARNING):
        tree = build_category_tree(categories)

    assert [n["id"] for n in tree] == ["1", "2"]
    assert "missing parent" in caplog.text


def test_empty_input_builds_empty_forest():
    assert build_category_tree([]) == []


def test_flatten_is_preorder_with_depth():
    categories = [
        make("1", "Electronics"),
        make("2", "Computers", "1", "electronics/computers"),
        make("3", "Laptops", "2", "electronics/computers/laptops"),
        make("4", "Phones", "1", "electronics/phones"),
    ]

    flat = list(flatten_category_tree(build_category_tree(categories)))

    assert [(n["slug"], n["depth"], n["has_children"]) for n in flat] == [
        ("electronics", 0, True),
        ("computers", 1, True),
        ("laptops", 2, False),
        ("phones", 1, False),
    ]
    assert all("children" not in n for n in flat)
