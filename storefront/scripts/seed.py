"""Seed data export and import utilities.

Usage:
    # Export current database to seed file
    python -m storefront.scripts.seed export

    # Load seed data into database
    python -m storefront.scripts.seed load

    # Load seed data (clear existing first)
    python -m storefront.scripts.seed load --clear
"""

import json
import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.models.database import create_tables, session_scope
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate
from storefront.services.category_service import CategoryService
from storefront.services.errors import CategoryError
from storefront.services.path_materializer import slugify
from storefront.services.product_service import ProductService
from storefront.services.tree_cache import TreeCache, get_redis_client

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).parent.parent.parent / "seed_data.json"


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def export_seed_data(db: Session, output_path: Path = SEED_FILE) -> dict:
    """Export all categories and products to JSON.

    Categories are written parents first so a load can recreate them in order.
    """
    categories = []
    ordered = sorted(db.query(Category).all(), key=lambda c: (c.depth, c.path))
    for c in ordered:
        categories.append({
            "id": c.id,
            "name": c.name,
            "parent_id": c.parent_id,
            "path": c.path,
        })

    products = []
    for p in db.query(Product).order_by(Product.sku).all():
        products.append({
            "id": p.id,
            "sku": p.sku,
            "name": p.name,
            "description": p.description,
            "details": p.details,
            "price": p.price,
            "image": p.image,
            "quantity": p.quantity,
            "show_if_out_of_stock": p.show_if_out_of_stock,
            "customization_schema": p.customization_schema,
            "category": p.leaf_category_id,
        })

    seed_data = {
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "version": "1.0",
        "categories": categories,
        "products": products,
    }

    with open(output_path, "w") as f:
        json.dump(seed_data, f, indent=2, cls=DecimalEncoder)

    logger.info(
        f"Exported seed data to {output_path}: "
        f"{len(categories)} categories, {len(products)} products"
    )
    return seed_data


def load_seed_data(
    db: Session,
    cache: TreeCache,
    input_path: Path = SEED_FILE,
    clear_existing: bool = False,
) -> dict:
    """Load seed data from JSON into database.

    Slugs, paths and product category chains are derived again rather than
    trusted from the file; ids in the file are only used to link records.

    Args:
        db: Database session
        cache: Category tree cache, evicted by every category write
        input_path: Path to seed JSON file
        clear_existing: If True, delete all existing data first

    Returns:
        Dict with counts of loaded items
    """
    with open(input_path) as f:
        seed_data = json.load(f)

    if clear_existing:
        logger.info("Clearing existing data...")
        db.query(Product).delete()
        db.query(Category).delete()
        db.commit()
        cache.invalidate()

    stats = {"categories": 0, "products": 0, "skipped": 0}
    category_service = CategoryService(db, cache)
    product_service = ProductService(db)

    # Seed ids mapped to the ids of the categories actually stored
    id_map: dict[str, str] = {}
    for c_data in seed_data.get("categories", []):
        parent_id = None
        if c_data.get("parent_id"):
            parent_id = id_map.get(c_data["parent_id"])
            if parent_id is None:
                logger.warning(
                    f"Skipping category '{c_data['name']}': parent "
                    f"'{c_data['parent_id']}' was not loaded"
                )
                stats["skipped"] += 1
                continue

        existing = category_service.store.find_by_slug(slugify(c_data["name"]))
        if existing is not None:
            id_map[c_data["id"]] = existing.id
            stats["skipped"] += 1
            continue

        try:
            category = category_service.create(c_data["name"], parent_id)
        except CategoryError as e:
            logger.warning(f"Skipping category '{c_data['name']}': {e}")
            stats["skipped"] += 1
            continue
        stats["categories"] += 1
        id_map[c_data["id"]] = category.id

    for p_data in seed_data.get("products", []):
        if product_service.get_by_sku(p_data["sku"]) or product_service.get_by_name(p_data["name"]):
            stats["skipped"] += 1
            continue

        leaf_id = id_map.get(p_data.get("category"))
        if leaf_id is None:
            logger.warning(f"Skipping product {p_data['sku']}: unknown category")
            stats["skipped"] += 1
            continue

        product_in = ProductCreate(
            sku=p_data["sku"],
            name=p_data["name"],
            description=p_data["description"],
            details=p_data.get("details"),
            price=p_data["price"],
            image=p_data.get("image") or None,
            quantity=p_data.get("quantity", 0),
            show_if_out_of_stock=p_data.get("show_if_out_of_stock", False),
            customization_schema=p_data.get("customization_schema"),
            category=leaf_id,
        )
        try:
            product_service.create(product_in)
        except CategoryError as e:
            logger.warning(f"Skipping product {p_data['sku']}: {e}")
            stats["skipped"] += 1
            continue
        stats["products"] += 1

    logger.info(
        f"Loaded seed data from {input_path}: {stats['categories']} categories, "
        f"{stats['products']} products, {stats['skipped']} skipped"
    )
    return stats


def main():
    """CLI entry point."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    if command not in ("export", "load"):
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)

    if command == "load" and not SEED_FILE.exists():
        print(f"Error: Seed file not found: {SEED_FILE}")
        sys.exit(1)

    create_tables()
    with session_scope() as db:
        if command == "export":
            export_seed_data(db)
        else:
            clear = "--clear" in sys.argv
            load_seed_data(db, TreeCache(get_redis_client()), clear_existing=clear)


if __name__ == "__main__":
    main()
