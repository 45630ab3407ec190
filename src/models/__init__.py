"""SQLAlchemy models for the product inventory service."""

from src.models.product import Product

__all__ = ["Product"]
