"""FastAPI routes for the product inventory service."""

from src.api.products import router as products_router

__all__ = ["products_router"]
