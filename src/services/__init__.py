"""Business logic services for the product inventory service."""

from src.services.product_api import ProductAPIClient, ProductAPIError
from src.services.products import (
    Deleted,
    DuplicateSku,
    InsufficientStock,
    NotFound,
    ProductPage,
    ProductService,
    StockLimitExceeded,
)

__all__ = [
    "Deleted",
    "DuplicateSku",
    "InsufficientStock",
    "NotFound",
    "ProductAPIClient",
    "ProductAPIError",
    "ProductPage",
    "ProductService",
    "StockLimitExceeded",
]
