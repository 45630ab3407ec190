"""MCP tool server exposing product operations to AI agents.

Each tool is a thin wrapper around ProductAPIClient: it calls the REST API,
renders the outcome as text, and reports failures as a message instead of
raising. Run standalone with ``python -m src.tools.server``.
"""

import logging
import sys
from typing import Annotated
from uuid import UUID

from fastmcp import FastMCP
from pydantic import Field

from src.config import settings
from src.schemas.product import MAX_INT
from src.services.product_api import ProductAPIClient, ProductAPIError
from src.tools.formatting import (
    NO_UPDATE_FIELDS_TEXT,
    format_created,
    format_deleted,
    format_error,
    format_product_details,
    format_product_list,
    format_stock_updated,
    format_updated,
)

logger = logging.getLogger(__name__)

mcp = FastMCP("Product Management")

ProductId = Annotated[UUID, Field(description="Product ID (UUID)")]


def _log_failure(tool_name: str, error: Exception) -> None:
    if isinstance(error, ProductAPIError):
        logger.warning("%s failed: %s", tool_name, error)
    else:
        logger.exception("%s failed unexpectedly", tool_name)


async def create_product(
    name: Annotated[str, Field(min_length=1, max_length=255, description="Product name")],
    description: Annotated[str, Field(min_length=1, description="Product description")],
    price: Annotated[float, Field(ge=0, description="Product price")],
    sku: Annotated[
        str,
        Field(min_length=1, max_length=100, description="Product SKU (unique identifier)"),
    ],
    stockQuantity: Annotated[
        int, Field(ge=0, le=MAX_INT, description="Initial stock quantity (default: 0)")
    ] = 0,
) -> str:
    """Create a new product in the inventory."""
    try:
        async with ProductAPIClient() as client:
            product = await client.create_product(
                name=name,
                description=description,
                price=price,
                sku=sku,
                stock_quantity=stockQuantity,
            )
    except Exception as e:
        _log_failure("create_product", e)
        return format_error("creating product", e)
    return format_created(product)


async def get_products(
    name: Annotated[
        str | None, Field(description="Filter by product name (partial match)")
    ] = None,
    sku: Annotated[str | None, Field(description="Filter by SKU (partial match)")] = None,
    minPrice: Annotated[
        float | None, Field(ge=0, description="Minimum price filter")
    ] = None,
    maxPrice: Annotated[
        float | None, Field(ge=0, description="Maximum price filter")
    ] = None,
    minStock: Annotated[
        int | None, Field(ge=0, le=MAX_INT, description="Minimum stock quantity")
    ] = None,
    maxStock: Annotated[
        int | None, Field(ge=0, le=MAX_INT, description="Maximum stock quantity")
    ] = None,
    limit: Annotated[
        int | None,
        Field(ge=1, le=100, description="Number of products to return (max 100)"),
    ] = None,
    offset: Annotated[
        int | None, Field(ge=0, le=MAX_INT, description="Number of products to skip")
    ] = None,
) -> str:
    """Retrieve products from inventory with optional filtering."""
    try:
        async with ProductAPIClient() as client:
            result = await client.get_products(
                name=name,
                sku=sku,
                min_price=minPrice,
                max_price=maxPrice,
                min_stock=minStock,
                max_stock=maxStock,
                limit=limit,
                offset=offset,
            )
    except Exception as e:
        _log_failure("get_products", e)
        return format_error("retrieving products", e)
    return format_product_list(result.data, result.pagination)


async def get_product_by_id(id: ProductId) -> str:
    """Retrieve a specific product by its ID."""
    try:
        async with ProductAPIClient() as client:
            product = await client.get_product_by_id(id)
    except Exception as e:
        _log_failure("get_product_by_id", e)
        return format_error("retrieving product", e)
    return format_product_details(product)


async def update_product(
    id: ProductId,
    name: Annotated[
        str | None, Field(min_length=1, max_length=255, description="New product name")
    ] = None,
    description: Annotated[
        str | None, Field(min_length=1, description="New product description")
    ] = None,
    price: Annotated[float | None, Field(ge=0, description="New product price")] = None,
    sku: Annotated[
        str | None, Field(min_length=1, max_length=100, description="New product SKU")
    ] = None,
    stockQuantity: Annotated[
        int | None, Field(ge=0, le=MAX_INT, description="New stock quantity")
    ] = None,
) -> str:
    """Update an existing product's information."""
    changes = {
        "name": name,
        "description": description,
        "price": price,
        "sku": sku,
        "stock_quantity": stockQuantity,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        return NO_UPDATE_FIELDS_TEXT

    try:
        async with ProductAPIClient() as client:
            product = await client.update_product(id, **changes)
    except Exception as e:
        _log_failure("update_product", e)
        return format_error("updating product", e)
    return format_updated(product)


async def delete_product(id: ProductId) -> str:
    """Delete a product from the inventory."""
    try:
        async with ProductAPIClient() as client:
            await client.delete_product(id)
    except Exception as e:
        _log_failure("delete_product", e)
        return format_error("deleting product", e)
    return format_deleted(str(id))


async def update_product_stock(
    id: ProductId,
    quantity: Annotated[
        int,
        Field(
            ge=-MAX_INT,
            le=MAX_INT,
            description="Quantity to add (positive) or subtract (negative)",
        ),
    ],
) -> str:
    """Add or subtract stock quantity for a product."""
    try:
        async with ProductAPIClient() as client:
            product = await client.update_product_stock(id, quantity)
    except Exception as e:
        _log_failure("update_product_stock", e)
        return format_error("updating stock", e)
    return format_stock_updated(product, quantity)


TOOLS = (
    create_product,
    get_products,
    get_product_by_id,
    update_product,
    delete_product,
    update_product_stock,
)

for tool in TOOLS:
    mcp.tool(tool)


def main() -> None:
    """Serve the tools over streamable HTTP."""
    # Logs go to stderr so they never mix with protocol output
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [MCP] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger.info(
        "MCP server listening on http://%s:%d%s (product API: %s)",
        settings.mcp_host,
        settings.mcp_port,
        settings.mcp_path,
        settings.product_api_url,
    )
    mcp.run(
        transport="http",
        host=settings.mcp_host,
        port=settings.mcp_port,
        path=settings.mcp_path,
    )


if __name__ == "__main__":
    main()
