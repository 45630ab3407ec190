"""Pydantic schemas shared by the REST API and the MCP tool server."""

from src.schemas.product import (
    ErrorEnvelope,
    Pagination,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductQuery,
    ProductResponse,
    ProductUpdate,
    StockAdjustment,
)

__all__ = [
    "ErrorEnvelope",
    "Pagination",
    "ProductCreate",
    "ProductEnvelope",
    "ProductListEnvelope",
    "ProductQuery",
    "ProductResponse",
    "ProductUpdate",
    "StockAdjustment",
]
