"""Tests for slug and path derivation."""

import pytest

from storefront.services.errors import CategoryValidationError
from storefront.services.path_materializer import materialize, slugify, split_path


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Electronics", "electronics"),
        ("  Home & Garden ", "home-garden"),
        ("Men's   Shoes", "mens-shoes"),
        ("TV/Video", "tvvideo"),
        ("snake_case", "snake_case"),
        ("Café Décor", "caf-dcor"),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected


def test_root_category_path_is_its_slug():
    assert materialize("Electronics", None, None) == ("electronics", "electronics")


def test_child_path_is_prefixed_by_parent_path():
    slug, path = materialize("Laptops", None, "electronics/computers")
    assert slug == "laptops"
    assert path == "electronics/computers/laptops"


def test_unchanged_name_keeps_stored_slug():
    first = materialize("Laptops", None, "electronics")
    again = materialize("Laptops", first[0], "electronics")
    assert again == first


def test_stored_slug_survives_when_name_not_changed():
    # A slug is only recomputed from the name when the name changes
    assert materialize("Notebooks", "laptops", None) == ("laptops", "laptops")


def test_changed_name_recomputes_slug():
    assert materialize("Gadgets", "electronics", None, name_changed=True) == ("gadgets", "gadgets")


def test_name_without_word_characters_is_rejected():
    with pytest.raises(CategoryValidationError):
        materialize("!!!", None, None)


def test_split_path():
    assert split_path("a/b/c") == ["a", "b", "c"]
    assert split_path("") == []
