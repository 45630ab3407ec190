"""Tests for Alembic migrations and the seed script."""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from scripts.seed_products import SAMPLE_PRODUCTS, seed_products
from src.database import Database
from src.schemas.product import ProductCreate
from src.services.products import ProductService

VERSIONS_DIR = Path(__file__).resolve().parent.parent / "migrations" / "versions"


def load_migration(filename: str) -> ModuleType:
    """Import a migration module by file name."""
    spec = importlib.util.spec_from_file_location(filename, VERSIONS_DIR / filename)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCreateProductsMigration:
    """Tests for the create_products_table migration (7c1e4a9b2d35)."""

    @pytest.fixture
    def migration(self) -> ModuleType:
        return load_migration("7c1e4a9b2d35_create_products_table.py")

    def test_is_initial_revision(self, migration: ModuleType) -> None:
        """Test that the products table is the root of the history."""
        assert migration.revision == "7c1e4a9b2d35"
        assert migration.down_revision is None

    def test_upgrade_and_downgrade(self, migration: ModuleType) -> None:
        """Test that upgrade creates the table and downgrade removes it."""
        engine = sa.create_engine("sqlite://")
        with engine.begin() as conn:
            context = MigrationContext.configure(conn)
            with Operations.context(context):
                migration.upgrade()

            inspector = sa.inspect(conn)
            columns = {column["name"] for column in inspector.get_columns("products")}
            assert columns == {
                "id",
                "name",
                "description",
                "price",
                "sku",
                "stock_quantity",
                "created_at",
                "updated_at",
            }
            indexes = {index["name"]: index for index in inspector.get_indexes("products")}
            assert indexes["ix_products_sku"]["unique"]

            with Operations.context(context):
                migration.downgrade()
            assert not sa.inspect(conn).has_table("products")
        engine.dispose()

    def test_stock_constraint_enforced(self, migration: ModuleType) -> None:
        """Test that the database rejects negative stock."""
        engine = sa.create_engine("sqlite://")
        with engine.connect() as conn:
            context = MigrationContext.configure(conn)
            with Operations.context(context):
                migration.upgrade()
            with pytest.raises(sa.exc.IntegrityError):
                conn.execute(
                    sa.text(
                        "INSERT INTO products (id, name, description, price, sku, "
                        "stock_quantity) VALUES ('a', 'n', 'd', 1.0, 's', -1)"
                    )
                )
        engine.dispose()


class TestSeedProducts:
    """Tests for the sample product seed."""

    def test_sample_products_are_valid(self) -> None:
        """Test that every sample passes create validation with a unique SKU."""
        products = [ProductCreate(**fields) for fields in SAMPLE_PRODUCTS]
        assert len({product.sku for product in products}) == len(products)

    async def test_seed_is_idempotent(self, database: Database) -> None:
        """Test that a second run skips existing SKUs."""
        assert await seed_products(database) == len(SAMPLE_PRODUCTS)
        assert await seed_products(database) == 0

        async with database.session() as session:
            product = await ProductService(session).get_by_sku("WM-004")
        assert product is not None
        assert product.stock_quantity == 75
