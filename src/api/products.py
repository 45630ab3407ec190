"""FastAPI routes for product management."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
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
from src.services.products import (
    DuplicateSku,
    InsufficientStock,
    NotFound,
    ProductService,
    StockLimitExceeded,
)

router = APIRouter(prefix="/api/products", tags=["products"])

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Validation failure"},
    404: {"model": ErrorEnvelope, "description": "Product not found"},
    409: {"model": ErrorEnvelope, "description": "Duplicate SKU"},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a failure envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(error=message).model_dump(),
    )


def get_product_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductService:
    """Dependency that provides the product service for a request."""
    return ProductService(db)


def get_product_query(
    name: Annotated[str | None, Query(description="Name substring filter")] = None,
    sku: Annotated[str | None, Query(description="SKU substring filter")] = None,
    min_price: Annotated[
        float | None, Query(alias="minPrice", description="Minimum price")
    ] = None,
    max_price: Annotated[
        float | None, Query(alias="maxPrice", description="Maximum price")
    ] = None,
    min_stock: Annotated[
        int | None, Query(alias="minStock", description="Minimum stock quantity")
    ] = None,
    max_stock: Annotated[
        int | None, Query(alias="maxStock", description="Maximum stock quantity")
    ] = None,
    limit: Annotated[int, Query(description="Page size (1-100)")] = 50,
    offset: Annotated[int, Query(description="Rows to skip")] = 0,
) -> ProductQuery:
    """Collect list filters from the query string.

    Range checks live on ProductQuery; a violation is reported as a
    request validation error (400).
    """
    try:
        return ProductQuery(
            name=name,
            sku=sku,
            min_price=min_price,
            max_price=max_price,
            min_stock=min_stock,
            max_stock=max_stock,
            limit=limit,
            offset=offset,
        )
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise RequestValidationError(
            [{**error, "loc": ("query", *error["loc"])} for error in errors]
        ) from e


ServiceDep = Annotated[ProductService, Depends(get_product_service)]


@router.get(
    "",
    response_model=ProductListEnvelope,
    response_model_exclude_none=True,
    responses={400: ERROR_RESPONSES[400]},
)
async def list_products(
    service: ServiceDep,
    query: Annotated[ProductQuery, Depends(get_product_query)],
) -> ProductListEnvelope:
    """List products with optional filtering and pagination.

    Name and SKU filters match substrings; price and stock filters are
    inclusive ranges. Results are ordered by creation time.
    """
    page = await service.list(query)
    return ProductListEnvelope(
        data=[ProductResponse.model_validate(item) for item in page.items],
        pagination=Pagination(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        ),
    )


@router.get(
    "/{product_id}",
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
async def get_product(
    product_id: UUID,
    service: ServiceDep,
) -> ProductEnvelope | JSONResponse:
    """Get a product by ID."""
    product = await service.get_by_id(product_id)
    if product is None:
        return error_response(status.HTTP_404_NOT_FOUND, "Product not found")
    return ProductEnvelope(data=ProductResponse.model_validate(product))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    responses={400: ERROR_RESPONSES[400], 409: ERROR_RESPONSES[409]},
)
async def create_product(
    payload: ProductCreate,
    service: ServiceDep,
) -> ProductEnvelope | JSONResponse:
    """Create a new product.

    Raises:
        409 if another product already uses the SKU.
    """
    result = await service.create(payload)
    if isinstance(result, DuplicateSku):
        return error_response(status.HTTP_409_CONFLICT, result.message)
    return ProductEnvelope(
        data=ProductResponse.model_validate(result),
        message="Product created successfully",
    )


@router.put(
    "/{product_id}",
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    service: ServiceDep,
) -> ProductEnvelope | JSONResponse:
    """Update any subset of a product's fields."""
    result = await service.update(product_id, payload)
    if isinstance(result, NotFound):
        return error_response(status.HTTP_404_NOT_FOUND, result.message)
    if isinstance(result, DuplicateSku):
        return error_response(status.HTTP_409_CONFLICT, result.message)
    return ProductEnvelope(
        data=ProductResponse.model_validate(result),
        message="Product updated successfully",
    )


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
async def delete_product(
    product_id: UUID,
    service: ServiceDep,
) -> Response:
    """Permanently delete a product."""
    result = await service.delete(product_id)
    if isinstance(result, NotFound):
        return error_response(status.HTTP_404_NOT_FOUND, result.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{product_id}/stock",
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
async def update_product_stock(
    product_id: UUID,
    payload: StockAdjustment,
    service: ServiceDep,
) -> ProductEnvelope | JSONResponse:
    """Add (positive quantity) or remove (negative quantity) stock.

    Raises:
        400 if the adjustment would leave the stock below zero or above
        the storable maximum.
    """
    result = await service.adjust_stock(product_id, payload.quantity)
    if isinstance(result, NotFound):
        return error_response(status.HTTP_404_NOT_FOUND, result.message)
    if isinstance(result, (InsufficientStock, StockLimitExceeded)):
        return error_response(status.HTTP_400_BAD_REQUEST, result.message)
    return ProductEnvelope(
        data=ProductResponse.model_validate(result),
        message="Stock updated successfully",
    )
