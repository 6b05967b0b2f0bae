"""
Enchanted Tome - FastAPI Backend.

Catalog, authentication gate and admin endpoints for the storefront.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    init_services,
    ServiceContainer,
    RequestContext,
)
from .schemas import (
    BookBase,
    BookCreate,
    BookUpdate,
    BookResponse,
    UserResponse,
    CatalogResponse,
    HealthResponse,
    ErrorResponse,
    ValidationErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "init_services",
    "ServiceContainer",
    "RequestContext",
    # Schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "UserResponse",
    "CatalogResponse",
    "HealthResponse",
    "ErrorResponse",
    "ValidationErrorResponse",
]
