"""Tests for exporting and reloading seed data."""

import json
import logging

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate
from storefront.scripts.seed import export_seed_data, load_seed_data
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService


def test_export_then_load_into_empty_database(tmp_path, db, category_service, product_service, tree_cache):
    electronics = category_service.create("Electronics")
    laptops = category_service.create("Laptops", electronics.id)
    product_service.create(
        ProductCreate(
            sku="LAP-1",
            name="Ultrabook",
            description="Thin and light",
            price=1200.0,
            quantity=2,
            category=laptops.id,
        )
    )
    seed_file = tmp_path / "seed.json"

    exported = export_seed_data(db, seed_file)
    assert [c["path"] for c in exported["categories"]] == ["electronics", "electronics/laptops"]

    # Clearing and reloading derives fresh ids, slugs and paths
    stats = load_seed_data(db, tree_cache, seed_file, clear_existing=True)

    assert stats == {"categories": 2, "products": 1, "skipped": 0}
    reloaded = {c.slug: c for c in db.query(Category).all()}
    assert reloaded["laptops"].path == "electronics/laptops"
    product = db.query(Product).filter(Product.sku == "LAP-1").one()
    assert product.categories == [reloaded["electronics"].id, reloaded["laptops"].id]


def test_load_skips_existing_records(tmp_path, db, category_service, tree_cache):
    category_service.create("Electronics")
    seed_file = tmp_path / "seed.json"
    export_seed_data(db, seed_file)

    stats = load_seed_data(db, tree_cache, seed_file)

    assert stats == {"categories": 0, "products": 0, "skipped": 1}
    assert CategoryService(db, tree_cache).store.count() == 1
    assert ProductService(db).count() == 0


def test_children_of_unloaded_parents_are_skipped(tmp_path, db, tree_cache, caplog):
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps({
        "categories": [
            {"id": "p", "name": "!!", "parent_id": None, "path": ""},
            {"id": "c", "name": "Laptops", "parent_id": "p", "path": "x/laptops"},
            {"id": "g", "name": "Gaming", "parent_id": "c", "path": "x/laptops/gaming"},
            {"id": "r", "name": "Garden", "parent_id": None, "path": "garden"},
        ],
        "products": [],
    }))

    with caplog.at_level(logging.WARNING):
        stats = load_seed_data(db, tree_cache, seed_file)

    assert stats == {"categories": 1, "products": 0, "skipped": 3}
    assert [c.path for c in db.query(Category).all()] == ["garden"]
    assert "parent 'p' was not loaded" in caplog.text
