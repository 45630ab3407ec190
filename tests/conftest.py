"""Shared fixtures: an in-memory product store and API clients bound to it."""

from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from src.database import Database, get_db
from src.main import app
from src.schemas.product import ProductCreate
from src.services.products import ProductService


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create an in-memory SQLite store with the products table."""
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.connect()
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the in-memory store."""
    async with database.session() as session:
        yield session


@pytest.fixture
def service(session: AsyncSession) -> ProductService:
    """Provide a ProductService on the in-memory store."""
    return ProductService(session)


@pytest.fixture
def mouse() -> ProductCreate:
    """Payload for a wireless mouse with no stock."""
    return ProductCreate(
        name="Mouse",
        description="Wireless",
        price=39.99,
        sku="WM-004",
    )


@pytest.fixture
def asgi_transport(database: Database) -> Generator[httpx.ASGITransport, None, None]:
    """Route HTTP requests into the app, backed by the in-memory store."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with database.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        # Unhandled errors must surface as 500 responses, not test exceptions
        yield httpx.ASGITransport(app=app, raise_app_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def api_client(
    asgi_transport: httpx.ASGITransport,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an async test client whose requests use the in-memory store."""
    async with httpx.AsyncClient(
        transport=asgi_transport, base_url="http://test"
    ) as client:
        yield client
