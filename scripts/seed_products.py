"""Seed the products table with sample inventory.

Inserts a handful of sample products through ProductService. It is
idempotent - products whose SKU already exists are skipped.

Usage:
    python scripts/seed_products.py

Environment variables:
    DATABASE_URL: Database to seed (defaults to the local SQLite file)
"""

import asyncio
import sys

from src.config import settings
from src.database import Database
from src.schemas.product import ProductCreate
from src.services.products import DuplicateSku, ProductService

SAMPLE_PRODUCTS = [
    {
        "name": "Wireless Bluetooth Headphones",
        "description": "Over-ear headphones with active noise cancellation",
        "price": 99.99,
        "sku": "WBH-001",
        "stock_quantity": 50,
    },
    {
        "name": "Smartphone Stand",
        "description": "Adjustable aluminium desk stand for phones",
        "price": 24.99,
        "sku": "SMS-002",
        "stock_quantity": 100,
    },
    {
        "name": "USB-C Charging Cable",
        "description": "Braided 2m USB-C to USB-C cable, 100W",
        "price": 12.99,
        "sku": "UCC-003",
        "stock_quantity": 200,
    },
    {
        "name": "Wireless Mouse",
        "description": "Ergonomic 2.4GHz wireless mouse",
        "price": 39.99,
        "sku": "WM-004",
        "stock_quantity": 75,
    },
    {
        "name": "Portable Power Bank",
        "description": "10000mAh power bank with fast charging",
        "price": 29.99,
        "sku": "PPB-005",
        "stock_quantity": 30,
    },
]


async def seed_products(database: Database) -> int:
    """Insert the sample products that are not already present.

    Returns:
        Number of products created.
    """
    created = 0
    async with database.session() as session:
        service = ProductService(session)
        for fields in SAMPLE_PRODUCTS:
            result = await service.create(ProductCreate(**fields))
            if isinstance(result, DuplicateSku):
                print(f"Skipping existing product: {fields['name']} ({fields['sku']})")
                continue
            print(f"Created product: {result.name} (ID: {result.id})")
            created += 1
    return created


async def _run() -> int:
    database = Database(settings.database_url)
    database.connect()
    try:
        await database.create_tables()
        created = await seed_products(database)
    finally:
        await database.close()
    print(f"\nSeeded {created} of {len(SAMPLE_PRODUCTS)} products")
    return 0


def main() -> int:
    """Main entry point for seeding the database.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    print(f"Seeding products into: {settings.database_url}")
    try:
        return asyncio.run(_run())
    except Exception as e:
        print(f"Error seeding database: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
