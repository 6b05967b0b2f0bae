"""
Enchanted Tome API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from sqlalchemy.exc import SQLAlchemyError

from enchantedtome import __version__
from enchantedtome.storage.seed import seed_books
from .schemas import HealthResponse
from .routes import auth, books, catalog, admin
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
)
from .dependencies import (
    get_settings,
    init_services,
    ServiceContainer,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Build services and load the identity provider keys
    - Seed an empty catalog
    - Release database connections on shutdown
    """
    settings = app.state.settings
    logger.info(f"Starting Enchanted Tome in {settings.environment} mode")

    if getattr(app.state, "services", None) is None:
        # A missing or malformed trust root is fatal: TrustRootError propagates.
        logger.info("Initializing services...")
        app.state.services = init_services(settings)

    services = app.state.services

    try:
        if settings.seed_on_startup:
            seeded = seed_books(services.book_repository)
            if seeded:
                logger.info(f"Seeded catalog with {seeded} sample books")

        logger.info("Enchanted Tome started successfully")

        yield

    finally:
        logger.info("Shutting down Enchanted Tome...")
        services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        services: Prebuilt service container. If None, the lifespan
            builds one at startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = services.settings if services is not None else get_settings()

    app = FastAPI(
        title="Enchanted Tome",
        description="Online bookstore catalog with admin-managed inventory.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_logging(app, structured=settings.environment != "development")

    setup_exception_handlers(app)

    setup_cors(app, settings.environment, settings.cors_allowed_origins)

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api"

    app.include_router(auth.router, prefix=api_prefix)
    app.include_router(books.router, prefix=api_prefix)
    app.include_router(catalog.router, prefix=api_prefix)
    app.include_router(admin.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Enchanted Tome",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """
        Health check endpoint.

        Returns status of all system components.
        """
        services = getattr(request.app.state, "services", None)

        components = {}
        overall_healthy = True

        if services is None:
            components["database"] = "not_initialized"
            overall_healthy = False
        else:
            try:
                services.book_repository.count()
                components["database"] = "healthy"
            except SQLAlchemyError as e:
                logger.error(f"Health check database failure: {e}")
                components["database"] = "unhealthy"
                overall_healthy = False

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "enchantedtome.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
