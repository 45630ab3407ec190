"""FastAPI application entry point."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_exception_handlers
from src.api.products import router as products_router
from src.config import settings
from src.database import Database

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = settings.log_level) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the product store at startup and close it at shutdown."""
    database = Database(settings.database_url, echo=settings.debug)
    database.connect()
    if database.url.startswith("sqlite"):
        # Local SQLite files are created on demand; PostgreSQL uses migrations
        await database.create_tables()
    app.state.database = database
    app.state.started_at = time.monotonic()
    logger.info("Product API started")
    try:
        yield
    finally:
        await database.close()
        logger.info("Product API stopped")


def create_app() -> FastAPI:
    """Build the product API application."""
    application = FastAPI(
        title="Product Management API",
        description="Product inventory CRUD service with stock adjustments",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.state.started_at = time.monotonic()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    application.include_router(products_router)
    register_exception_handlers(application)

    @application.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": round(time.monotonic() - application.state.started_at, 3),
        }

    return application


app = create_app()


def run() -> None:
    """Run the API with uvicorn."""
    configure_logging()
    logger.info("Starting Product API on http://%s:%d", settings.api_host, settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
