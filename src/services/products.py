"""Product operations: CRUD and stock adjustment over the products table.

Business-rule failures (unknown id, duplicate SKU, insufficient stock) are
returned as outcome objects rather than raised, so callers handle every
outcome explicitly. Unexpected store errors propagate as exceptions.
"""

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, cast, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.product import Product, utcnow
from src.schemas.product import MAX_INT, ProductCreate, ProductQuery, ProductUpdate

logger = logging.getLogger(__name__)


# --- Outcomes ---


@dataclass(frozen=True)
class NotFound:
    """No product has the requested id."""

    product_id: UUID

    @property
    def message(self) -> str:
        return f"Product with ID '{self.product_id}' not found"


@dataclass(frozen=True)
class DuplicateSku:
    """Another product already uses the SKU."""

    sku: str

    @property
    def message(self) -> str:
        return f"Product with SKU '{self.sku}' already exists"


@dataclass(frozen=True)
class InsufficientStock:
    """A stock adjustment would drive the quantity below zero."""

    product_id: UUID
    current_stock: int
    requested_delta: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient stock quantity: current stock is {self.current_stock}, "
            f"requested change is {self.requested_delta}"
        )


@dataclass(frozen=True)
class StockLimitExceeded:
    """A stock adjustment would push the quantity past the storable maximum."""

    product_id: UUID
    current_stock: int
    requested_delta: int

    @property
    def message(self) -> str:
        return (
            f"Stock quantity cannot exceed {MAX_INT}: current stock is "
            f"{self.current_stock}, requested change is {self.requested_delta}"
        )


@dataclass(frozen=True)
class Deleted:
    """The product was removed."""

    product_id: UUID


@dataclass
class ProductPage:
    """One page of products plus the size of the full result set."""

    items: list[Product]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        """Whether rows exist beyond this page."""
        return self.offset + self.limit < self.total


# --- Service ---


class ProductService:
    """Product operations bound to a single database session.

    Every mutating operation touches exactly one row and commits its own
    transaction, so the returned product reflects the persisted state.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, data: ProductCreate) -> Product | DuplicateSku:
        """Create a product.

        Args:
            data: Validated product fields.

        Returns:
            The stored product, or DuplicateSku if the SKU is taken.
        """
        if await self.get_by_sku(data.sku) is not None:
            logger.warning("Rejected product create: SKU %s already exists", data.sku)
            return DuplicateSku(sku=data.sku)

        now = utcnow()
        product = Product(
            id=uuid4(),
            name=data.name,
            description=data.description,
            price=data.price,
            sku=data.sku,
            stock_quantity=data.stock_quantity,
            created_at=now,
            updated_at=now,
        )
        self.session.add(product)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same SKU
            await self.session.rollback()
            logger.warning("Rejected product create: SKU %s already exists", data.sku)
            return DuplicateSku(sku=data.sku)

        await self.session.refresh(product)
        logger.info("Created product %s (SKU %s)", product.id, product.sku)
        return product

    async def get_by_id(self, product_id: UUID) -> Product | None:
        """Fetch a product by id, or None if absent."""
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def get_by_sku(self, sku: str) -> Product | None:
        """Fetch a product by exact SKU, or None if absent."""
        result = await self.session.execute(select(Product).where(Product.sku == sku))
        return result.scalar_one_or_none()

    async def list(self, query: ProductQuery) -> ProductPage:
        """List products matching the query's filters.

        Name and SKU filters are substring matches; price and stock filters
        are inclusive ranges. All filters are combined with AND. Rows are
        ordered by creation time, then id, so paging is stable.
        """
        conditions = []
        if query.name:
            conditions.append(Product.name.contains(query.name, autoescape=True))
        if query.sku:
            conditions.append(Product.sku.contains(query.sku, autoescape=True))
        if query.min_price is not None:
            conditions.append(Product.price >= query.min_price)
        if query.max_price is not None:
            conditions.append(Product.price <= query.max_price)
        if query.min_stock is not None:
            conditions.append(Product.stock_quantity >= query.min_stock)
        if query.max_stock is not None:
            conditions.append(Product.stock_quantity <= query.max_stock)

        count_query = select(func.count()).select_from(Product).where(*conditions)
        total_result = await self.session.execute(count_query)
        total = total_result.scalar() or 0

        items_query = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at, Product.id)
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.session.execute(items_query)

        return ProductPage(
            items=list(result.scalars().all()),
            total=total,
            limit=query.limit,
            offset=query.offset,
        )

    async def update(
        self, product_id: UUID, data: ProductUpdate
    ) -> Product | NotFound | DuplicateSku:
        """Apply a partial update to a product.

        Only supplied fields change. updated_at is refreshed on every
        successful update.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            return NotFound(product_id=product_id)

        changes = data.changes()
        new_sku = changes.get("sku")
        if new_sku is not None and new_sku != product.sku:
            result = await self.session.execute(
                select(Product.id).where(Product.sku == new_sku, Product.id != product_id)
            )
            if result.first() is not None:
                logger.warning(
                    "Rejected update of product %s: SKU %s already exists",
                    product_id,
                    new_sku,
                )
                return DuplicateSku(sku=new_sku)

        for field_name, value in changes.items():
            setattr(product, field_name, value)
        product.updated_at = utcnow()

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            return DuplicateSku(sku=new_sku or product.sku)

        await self.session.refresh(product)
        logger.info("Updated product %s (%s)", product_id, ", ".join(sorted(changes)))
        return product

    async def delete(self, product_id: UUID) -> Deleted | NotFound:
        """Permanently remove a product."""
        product = await self.get_by_id(product_id)
        if product is None:
            return NotFound(product_id=product_id)

        await self.session.delete(product)
        await self.session.commit()
        logger.info("Deleted product %s (SKU %s)", product_id, product.sku)
        return Deleted(product_id=product_id)

    async def adjust_stock(
        self, product_id: UUID, delta: int
    ) -> Product | NotFound | InsufficientStock | StockLimitExceeded:
        """Add a signed delta to a product's stock quantity.

        The change is a single conditional UPDATE, so concurrent adjustments
        cannot drive the stock below zero or above MAX_INT. On rejection the
        row is untouched.
        """
        # Bounds are checked on a BIGINT sum; an INTEGER sum overflows on PostgreSQL
        new_stock = cast(Product.stock_quantity, BigInteger) + delta
        statement = (
            update(Product)
            .where(
                Product.id == product_id,
                new_stock >= 0,
                new_stock <= MAX_INT,
            )
            .values(
                stock_quantity=Product.stock_quantity + delta,
                updated_at=utcnow(),
            )
            .returning(Product)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(statement)
        product = result.scalar_one_or_none()

        if product is None:
            await self.session.rollback()
            current = await self.get_by_id(product_id)
            if current is None:
                return NotFound(product_id=product_id)
            if current.stock_quantity + delta > MAX_INT:
                logger.warning(
                    "Rejected stock adjustment of %d for product %s: limit exceeded",
                    delta,
                    product_id,
                )
                return StockLimitExceeded(
                    product_id=product_id,
                    current_stock=current.stock_quantity,
                    requested_delta=delta,
                )
            logger.warning(
                "Rejected stock adjustment of %d for product %s: stock is %d",
                delta,
                product_id,
                current.stock_quantity,
            )
            return InsufficientStock(
                product_id=product_id,
                current_stock=current.stock_quantity,
                requested_delta=delta,
            )

        await self.session.commit()
        await self.session.refresh(product)
        logger.info(
            "Adjusted stock of product %s by %d to %d",
            product_id,
            delta,
            product.stock_quantity,
        )
        return product
