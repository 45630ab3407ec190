"""HTTP client for the product REST API."""

import logging
from typing import Any
from uuid import UUID

import httpx

from src.config import settings
from src.schemas.product import (
    ProductEnvelope,
    ProductListEnvelope,
    ProductResponse,
)

logger = logging.getLogger(__name__)


class ProductAPIError(Exception):
    """Raised when a product API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProductAPIClient:
    """Async client for the product REST API.

    Used by the MCP tool server. Every call is one request; failures are
    raised as ProductAPIError carrying the server's error text.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL including the /api prefix. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            transport: Optional httpx transport, e.g. an ASGI app in tests.
        """
        self.base_url = (base_url or settings.product_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.product_api_timeout
        self.transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ProductAPIClient":
        """Enter async context manager."""
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"Content-Type": "application/json"},
            transport=self.transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def _client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not in context manager."""
        if self._http_client is None:
            raise RuntimeError(
                "ProductAPIClient must be used as an async context manager"
            )
        return self._http_client

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Make an API request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path (without base URL)
            params: Optional query parameters
            json_data: Optional JSON body

        Returns:
            Parsed JSON response, or None for an empty (204) response.

        Raises:
            ProductAPIError: If the API call fails.
        """
        url = f"{self.base_url}{endpoint}"

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json_data,
            )
        except httpx.RequestError as e:
            logger.error("Product API request error: %s %s - %s", method, endpoint, e)
            raise ProductAPIError(f"Request failed: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "Product API error: %s %s - %s %s",
                method,
                endpoint,
                response.status_code,
                message,
            )
            raise ProductAPIError(
                f"API Error: {message}", status_code=response.status_code
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()  # type: ignore[no-any-return]

    async def create_product(
        self,
        name: str,
        description: str,
        price: float,
        sku: str,
        stock_quantity: int = 0,
    ) -> ProductResponse:
        """Create a product."""
        payload = {
            "name": name,
            "description": description,
            "price": price,
            "sku": sku,
            "stockQuantity": stock_quantity,
        }
        data = await self._request("POST", "/products", json_data=payload)
        return _product_from(data)

    async def get_products(
        self,
        name: str | None = None,
        sku: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        min_stock: int | None = None,
        max_stock: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ProductListEnvelope:
        """List products. Filters left as None are not sent."""
        filters = {
            "name": name,
            "sku": sku,
            "minPrice": min_price,
            "maxPrice": max_price,
            "minStock": min_stock,
            "maxStock": max_stock,
            "limit": limit,
            "offset": offset,
        }
        params = {key: value for key, value in filters.items() if value not in (None, "")}
        data = await self._request("GET", "/products", params=params or None)
        return ProductListEnvelope.model_validate(data)

    async def get_product_by_id(self, product_id: UUID | str) -> ProductResponse:
        """Fetch a single product."""
        data = await self._request("GET", _product_path(product_id))
        return _product_from(data)

    async def update_product(
        self, product_id: UUID | str, **changes: Any
    ) -> ProductResponse:
        """Update a product. Keyword arguments use snake_case field names."""
        payload = {
            _WIRE_NAMES.get(key, key): value
            for key, value in changes.items()
            if value is not None
        }
        data = await self._request("PUT", _product_path(product_id), json_data=payload)
        return _product_from(data)

    async def delete_product(self, product_id: UUID | str) -> None:
        """Delete a product."""
        await self._request("DELETE", _product_path(product_id))

    async def update_product_stock(
        self, product_id: UUID | str, quantity: int
    ) -> ProductResponse:
        """Add (positive) or remove (negative) stock."""
        data = await self._request(
            "PATCH",
            f"{_product_path(product_id)}/stock",
            json_data={"quantity": quantity},
        )
        return _product_from(data)


_WIRE_NAMES = {"stock_quantity": "stockQuantity"}


def _product_path(product_id: UUID | str) -> str:
    """Build the resource path for a product, rejecting malformed ids."""
    try:
        canonical = product_id if isinstance(product_id, UUID) else UUID(product_id)
    except ValueError as e:
        raise ProductAPIError(f"Invalid product ID: '{product_id}'") from e
    return f"/products/{canonical}"


def _error_message(response: httpx.Response) -> str:
    """Extract the error text from a failure envelope."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or "Unknown error")
    return "Unknown error"


def _product_from(data: dict[str, Any] | None) -> ProductResponse:
    """Unwrap the product from a single-product envelope."""
    envelope = ProductEnvelope.model_validate(data or {})
    if envelope.data is None:
        raise ProductAPIError("API Error: response did not include a product")
    return envelope.data
