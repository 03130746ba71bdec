"""
FastAPI main application for the Library API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request

from api.config import APIConfig, config
from api.database import BookRepository, MongoDBManager
from api.models import HealthResponse
from api.routes import router as books_router
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[APIConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The MongoDB client is created in the lifespan handler and the book
    repository is stored on ``app.state``; handlers receive it through
    ``api.dependencies.get_book_repository``.
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        setup_logging(
            log_level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            debug=settings.debug
        )
        logger.info("Starting Library API", port=settings.port)

        db_manager = MongoDBManager(
            connection_url=settings.mongodb_url,
            database_name=settings.mongodb_database,
            collection_name=settings.mongodb_collection
        )
        try:
            await db_manager.connect()
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            await db_manager.disconnect()
            raise

        app.state.db_manager = db_manager
        app.state.book_repository = BookRepository(db_manager.collection)

        yield

        logger.info("Shutting down Library API")
        await db_manager.disconnect()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        servers=[{"url": settings.get_server_url()}],
        openapi_tags=[{"name": "Books", "description": "The books managing API"}],
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        redoc_url=None,
        lifespan=lifespan
    )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        db_manager = getattr(request.app.state, "db_manager", None)
        db_status = "unavailable"
        if db_manager is not None:
            health_info = await db_manager.health_check()
            db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            database_status=db_status
        )

    app.include_router(books_router)
    return app


app = create_app()
