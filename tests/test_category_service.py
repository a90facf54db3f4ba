"""Tests for category mutations and their side effects."""

import pytest

from storefront.models.category import Category
from storefront.schemas.product import ProductCreate
from storefront.services.errors import (
    CascadeError,
    CategoryNotFoundError,
    CategoryValidationError,
    SlugCollisionError,
)


def assert_paths_consistent(db):
    """Every stored path is the parent's path plus the node's own slug."""
    by_id = {c.id: c for c in db.query(Category).all()}
    for category in by_id.values():
        if category.parent_id is None:
            assert category.path == category.slug
        else:
            parent = by_id[category.parent_id]
            assert category.path == f"{parent.path}/{category.slug}"


def new_product(sku, category_id):
    return ProductCreate(
        sku=sku,
        name=f"Product {sku}",
        description="A product",
        price=999.0,
        quantity=3,
        category=category_id,
    )


def test_rename_move_and_delete_walkthrough(db, category_service, product_service):
    electronics = category_service.create("Electronics")
    assert (electronics.slug, electronics.path) == ("electronics", "electronics")

    laptops = category_service.create("Laptops", electronics.id)
    assert (laptops.slug, laptops.path) == ("laptops", "electronics/laptops")

    result = category_service.update(electronics, name="Gadgets")
    assert electronics.path == "gadgets"
    assert result.descendants_updated == 1
    db.refresh(laptops)
    assert laptops.path == "gadgets/laptops"

    product = product_service.create(new_product("LAP-1", laptops.id))
    assert product.categories == [electronics.id, laptops.id]

    gadgets_id = electronics.id
    category_service.delete(electronics)
    db.refresh(laptops)
    db.refresh(product)
    assert laptops.parent_id is None
    assert laptops.path == "laptops"
    assert gadgets_id not in product.categories
    assert product.categories == [laptops.id]

    assert category_service.related_category_ids("laptops") == [laptops.id]
    assert_paths_consistent(db)


def test_related_ids_include_all_descendants(category_service):
    electronics = category_service.create("Electronics")
    computers = category_service.create("Computers", electronics.id)
    laptops = category_service.create("Laptops", computers.id)
    category_service.create("Garden")

    assert category_service.related_category_ids("electronics") == [
        electronics.id,
        computers.id,
        laptops.id,
    ]
    assert category_service.related_category_ids("unknown") == []


def test_move_resyncs_product_chains(db, category_service, product_service):
    electronics = category_service.create("Electronics")
    computers = category_service.create("Computers", electronics.id)
    laptops = category_service.create("Laptops", computers.id)
    phones = category_service.create("Phones", electronics.id)
    product = product_service.create(new_product("LAP-1", laptops.id))

    result = category_service.update(laptops, parent_id=phones.id)

    assert laptops.path == "electronics/phones/laptops"
    assert result.products_updated == 1
    db.refresh(product)
    assert product.categories == [electronics.id, phones.id, laptops.id]
    assert_paths_consistent(db)


def test_self_parent_is_rejected(category_service):
    electronics = category_service.create("Electronics")

    with pytest.raises(CategoryValidationError):
        category_service.validate_parent(electronics, electronics.id)


def test_descendant_as_parent_is_rejected(category_service):
    electronics = category_service.create("Electronics")
    computers = category_service.create("Computers", electronics.id)
    laptops = category_service.create("Laptops", computers.id)

    with pytest.raises(CategoryValidationError):
        category_service.validate_parent(electronics, laptops.id)


def test_unknown_parent_is_rejected(category_service):
    with pytest.raises(CategoryNotFoundError):
        category_service.validate_parent(None, "missing")


def test_valid_parent_passes(category_service):
    electronics = category_service.create("Electronics")
    garden = category_service.create("Garden")

    category_service.validate_parent(garden, electronics.id)
    category_service.validate_parent(garden, None)


def test_delete_middle_node_splices_children_up(db, category_service):
    electronics = category_service.create("Electronics")
    computers = category_service.create("Computers", electronics.id)
    laptops = category_service.create("Laptops", computers.id)
    gaming = category_service.create("Gaming", laptops.id)

    result = category_service.delete(computers)

    assert result.children_reparented == 1
    assert result.descendants_updated == 1
    db.refresh(laptops)
    db.refresh(gaming)
    assert laptops.parent_id == electronics.id
    assert laptops.path == "electronics/laptops"
    assert gaming.path == "electronics/laptops/gaming"
    assert_paths_consistent(db)


def test_delete_keeps_category_when_child_cannot_move(db, category_service, monkeypatch):
    electronics = category_service.create("Electronics")
    laptops = category_service.create("Laptops", electronics.id)

    def failing_update(category, name=None, parent_id=None):
        raise CategoryValidationError("write rejected")

    monkeypatch.setattr(category_service.store, "update", failing_update)

    with pytest.raises(CascadeError) as exc_info:
        category_service.delete(electronics)

    assert [f.id for f in exc_info.value.failures] == [laptops.id]
    assert category_service.get(electronics.id) is not None


def test_tree_reflects_every_mutation(category_service):
    electronics = category_service.create("Electronics")
    assert [n["slug"] for n in category_service.get_tree()] == ["electronics"]

    category_service.create("Laptops", electronics.id)
    tree = category_service.get_tree()
    assert [n["slug"] for n in tree[0]["children"]] == ["laptops"]

    category_service.update(electronics, name="Gadgets")
    assert category_service.get_tree()[0]["children"][0]["path"] == "gadgets/laptops"

    category_service.delete(electronics)
    assert [n["path"] for n in category_service.get_tree()] == ["laptops"]


def test_failed_update_still_invalidates_cache(category_service, fake_redis):
    category_service.create("Gadgets")
    electronics = category_service.create("Electronics")
    category_service.get_tree()

    with pytest.raises(SlugCollisionError):
        category_service.update(electronics, name="Gadgets")

    assert fake_redis.calls[-1] == ("delete", "test_category_tree")
    assert fake_redis.data == {}


def test_flat_tree_annotates_depth(category_service):
    electronics = category_service.create("Electronics")
    category_service.create("Laptops", electronics.id)

    flat = category_service.get_flat_tree()

    assert [(n["slug"], n["depth"]) for n in flat] == [("electronics", 0), ("laptops", 1)]
