"""Storefront database management CLI.

Creates and drops the database schema for the storefront domain and loads
products from a JSON file.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db                       # Drop all tables
    python src/manage.py seed-products products.json   # Add catalogue products

The seed file holds a JSON array of objects with ``title``, ``price`` and
optionally ``stock``, ``description``, ``category_id`` and ``images``.
"""

import argparse
import json
import sys
from pathlib import Path


def setup_database():
    """Create the database schema for the storefront domain."""
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    """Drop the database schema for the storefront domain."""
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def add_products(records):
    """Add a product per record through the active domain; returns them."""
    from protean.utils.globals import current_domain
    from storefront.product.product import Product

    repo = current_domain.repository_for(Product)
    products = []
    for record in records:
        product = Product.add(
            title=record["title"],
            price=record["price"],
            stock=record.get("stock", 0),
            description=record.get("description"),
            category_id=record.get("category_id"),
            images=record.get("images"),
        )
        repo.add(product)
        products.append(product)
    return products


def seed_products(path):
    """Add every product listed in the JSON file at ``path``."""
    from storefront.domain import storefront

    records = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise SystemExit(f"{path}: expected a JSON array of products")

    storefront.init()
    with storefront.domain_context():
        for product in add_products(records):
            print(f"  Added {product.title} ({product.id})")

    print(f"Seeded {len(records)} product(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-products", help="Add products from a JSON file")
    seed_parser.add_argument("path", help="JSON file holding an array of products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-products":
        seed_products(args.path)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
