"""Pydantic schemas for product payloads.

Request models validate raw input before it reaches the store; response
models define the JSON contract shared by the REST API and its clients.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

NO_UPDATE_FIELDS_MESSAGE = "No valid fields provided for update"

# Largest value a 32-bit Integer column holds
MAX_INT = 2**31 - 1

CAMEL_CASE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


# --- Request Schemas ---


class ProductCreate(BaseModel):
    """Request schema for creating a product."""

    model_config = CAMEL_CASE_CONFIG

    name: str = Field(min_length=1, max_length=255, description="Product name")
    description: str = Field(min_length=1, description="Product description")
    price: float = Field(ge=0, allow_inf_nan=False, description="Unit price")
    sku: str = Field(
        min_length=1,
        max_length=100,
        description="Stock keeping unit (unique identifier)",
    )
    stock_quantity: int = Field(
        default=0,
        ge=0,
        le=MAX_INT,
        description="Initial stock quantity",
    )


class ProductUpdate(BaseModel):
    """Request schema for a partial product update.

    Every field is optional but at least one must be supplied, and a
    supplied field may not be null.
    """

    model_config = CAMEL_CASE_CONFIG

    name: str | None = Field(
        default=None, min_length=1, max_length=255, description="New product name"
    )
    description: str | None = Field(
        default=None, min_length=1, description="New product description"
    )
    price: float | None = Field(
        default=None, ge=0, allow_inf_nan=False, description="New unit price"
    )
    sku: str | None = Field(
        default=None, min_length=1, max_length=100, description="New SKU"
    )
    stock_quantity: int | None = Field(
        default=None, ge=0, le=MAX_INT, description="New stock quantity"
    )

    @model_validator(mode="after")
    def check_fields_present(self) -> "ProductUpdate":
        """Reject empty updates and explicit nulls."""
        if not self.model_fields_set:
            raise ValueError(NO_UPDATE_FIELDS_MESSAGE)
        for field_name in self.model_fields_set:
            if getattr(self, field_name) is None:
                raise ValueError(f"{to_camel(field_name)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller supplied."""
        return self.model_dump(exclude_unset=True)


class ProductQuery(BaseModel):
    """Filters and pagination for listing products."""

    model_config = CAMEL_CASE_CONFIG

    name: str | None = Field(default=None, description="Name substring filter")
    sku: str | None = Field(default=None, description="SKU substring filter")
    min_price: float | None = Field(default=None, ge=0, description="Minimum price")
    max_price: float | None = Field(default=None, ge=0, description="Maximum price")
    min_stock: int | None = Field(
        default=None, ge=0, le=MAX_INT, description="Minimum stock quantity"
    )
    max_stock: int | None = Field(
        default=None, ge=0, le=MAX_INT, description="Maximum stock quantity"
    )
    limit: int = Field(default=50, ge=1, le=100, description="Page size")
    offset: int = Field(default=0, ge=0, le=MAX_INT, description="Rows to skip")


class StockAdjustment(BaseModel):
    """Request schema for a signed stock adjustment."""

    quantity: int = Field(
        ge=-MAX_INT,
        le=MAX_INT,
        description="Quantity to add (positive) or subtract (negative)",
    )


# --- Response Schemas ---


class ProductResponse(BaseModel):
    """Response schema for a product."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: UUID = Field(description="Product UUID")
    name: str = Field(description="Product name")
    description: str = Field(description="Product description")
    price: float = Field(description="Unit price")
    sku: str = Field(description="Stock keeping unit")
    stock_quantity: int = Field(description="Units on hand")
    created_at: datetime = Field(description="When the product was created")
    updated_at: datetime = Field(description="When the product was last updated")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps (SQLite drops the offset) as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    model_config = CAMEL_CASE_CONFIG

    total: int = Field(description="Rows matching the filters")
    limit: int = Field(description="Page size")
    offset: int = Field(description="Rows skipped")
    has_more: bool = Field(description="Whether more rows follow this page")


class ProductEnvelope(BaseModel):
    """Response envelope for single-product operations."""

    success: bool = True
    data: ProductResponse | None = None
    message: str | None = None
    error: str | None = None


class ProductListEnvelope(BaseModel):
    """Response envelope for product listings."""

    success: bool = True
    data: list[ProductResponse]
    pagination: Pagination
    message: str | None = None


class ErrorEnvelope(BaseModel):
    """Response envelope for failures."""

    success: bool = False
    error: str
