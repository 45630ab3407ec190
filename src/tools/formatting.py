"""Text rendering for MCP tool results."""

from datetime import UTC, datetime

from src.schemas.product import Pagination, ProductResponse

NO_UPDATE_FIELDS_TEXT = (
    "⚠️ No fields provided for update. "
    "Please specify at least one field to update."
)
NO_PRODUCTS_TEXT = "📦 No products found matching the criteria."


def format_price(price: float) -> str:
    return f"${price:.2f}"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in UTC, e.g. ``2026-10-19 14:03:00 UTC``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_error(action: str, error: Exception) -> str:
    """Render a failure, e.g. ``❌ Error creating product: ...``."""
    message = str(error) or "Unknown error"
    return f"❌ Error {action}: {message}"


def format_created(product: ProductResponse) -> str:
    return (
        "✅ Product created successfully!\n\n"
        f"ID: {product.id}\n"
        f"Name: {product.name}\n"
        f"SKU: {product.sku}\n"
        f"Price: {format_price(product.price)}\n"
        f"Stock: {product.stock_quantity}"
    )


def format_pagination(pagination: Pagination) -> str:
    """Render the visible range, e.g. ``1-10 of 42 products``."""
    first = pagination.offset + 1
    last = min(pagination.offset + pagination.limit, pagination.total)
    return f"📊 **Pagination**: {first}-{last} of {pagination.total} products"


def format_product_list(
    products: list[ProductResponse], pagination: Pagination
) -> str:
    """Render a page of products as a bulleted list."""
    if not products:
        return NO_PRODUCTS_TEXT

    entries = [
        f"• **{product.name}** ({product.sku})\n"
        f"  Price: {format_price(product.price)} | Stock: {product.stock_quantity}\n"
        f"  {product.description}"
        for product in products
    ]
    return (
        "📦 **Products Found:**\n\n"
        + "\n\n".join(entries)
        + "\n\n"
        + format_pagination(pagination)
    )


def format_product_details(product: ProductResponse) -> str:
    return (
        "📦 **Product Details:**\n\n"
        f"**ID:** {product.id}\n"
        f"**Name:** {product.name}\n"
        f"**SKU:** {product.sku}\n"
        f"**Description:** {product.description}\n"
        f"**Price:** {format_price(product.price)}\n"
        f"**Stock:** {product.stock_quantity}\n"
        f"**Created:** {format_timestamp(product.created_at)}\n"
        f"**Updated:** {format_timestamp(product.updated_at)}"
    )


def format_updated(product: ProductResponse) -> str:
    return (
        "✅ Product updated successfully!\n\n"
        "**Updated Product:**\n"
        f"**ID:** {product.id}\n"
        f"**Name:** {product.name}\n"
        f"**SKU:** {product.sku}\n"
        f"**Price:** {format_price(product.price)}\n"
        f"**Stock:** {product.stock_quantity}\n"
        f"**Description:** {product.description}"
    )


def format_deleted(product_id: str) -> str:
    return f"✅ Product with ID {product_id} has been deleted successfully."


def format_stock_updated(product: ProductResponse, quantity: int) -> str:
    """Render a stock change; positive quantities were added."""
    action = "added to" if quantity > 0 else "removed from"
    return (
        "✅ Stock updated successfully!\n\n"
        f"{abs(quantity)} units {action} inventory.\n\n"
        "**Updated Product:**\n"
        f"**Name:** {product.name}\n"
        f"**SKU:** {product.sku}\n"
        f"**Current Stock:** {product.stock_quantity}"
    )
