"""
CORS for the storefront and admin console.

Development accepts any origin. Deployed environments accept their own
storefront plus whatever ``CORS_ALLOWED_ORIGINS`` adds.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .logging import REQUEST_ID_HEADER


STOREFRONT_ORIGINS = {
    "staging": ["https://staging.enchantedtome.example.com"],
    "production": [
        "https://enchantedtome.example.com",
        "https://www.enchantedtome.example.com",
    ],
}

# Bearer tokens travel in Authorization; the API sets no cookies.
ALLOWED_HEADERS = ["Authorization", "Content-Type", REQUEST_ID_HEADER]
ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def allowed_origins(environment: str, extra_origins: str = "") -> list[str]:
    """Origins for the environment; ``["*"]`` outside staging/production."""
    if environment not in STOREFRONT_ORIGINS:
        return ["*"]

    origins = list(STOREFRONT_ORIGINS[environment])
    origins.extend(o.strip() for o in extra_origins.split(",") if o.strip())
    return origins


def setup_cors(app: FastAPI, environment: str, extra_origins: str = "") -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Args:
        app: FastAPI application instance.
        environment: development, staging or production.
        extra_origins: Comma-separated origins to allow as well.
    """
    origins = allowed_origins(environment, extra_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=3600,
    )
