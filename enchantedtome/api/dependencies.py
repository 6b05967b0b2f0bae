"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Record store repositories
- Per-request authentication context and guards
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from ..security import DEFAULT_ALGORITHMS, Identity, TokenVerifier, load_key_set
from ..storage.book_repository import BookRepository
from ..storage.models import build_engine
from ..storage.user_repository import UserRecord, UserRepository
from .middleware.error_handler import ForbiddenError, UnauthorizedError


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./enchantedtome.db"
    database_echo: bool = False

    # Identity provider trust root (first one set wins)
    auth_jwks_json: Optional[str] = None
    auth_jwks_path: Optional[str] = None
    auth_jwks_url: Optional[str] = None
    auth_audience: Optional[str] = None
    auth_issuer: Optional[str] = None
    auth_algorithms: str = ",".join(DEFAULT_ALGORITHMS)

    # Catalog
    seed_on_startup: bool = True

    # Extra CORS origins (comma-separated)
    cors_allowed_origins: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def algorithms(self) -> list[str]:
        return [a.strip() for a in self.auth_algorithms.split(",") if a.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            auth_jwks_json=os.getenv("AUTH_JWKS_JSON"),
            auth_jwks_path=os.getenv("AUTH_JWKS_PATH"),
            auth_jwks_url=os.getenv("AUTH_JWKS_URL"),
            auth_audience=os.getenv("AUTH_AUDIENCE"),
            auth_issuer=os.getenv("AUTH_ISSUER"),
            auth_algorithms=os.getenv("AUTH_ALGORITHMS", cls.auth_algorithms),
            seed_on_startup=os.getenv("SEED_ON_STARTUP", "true").lower() == "true",
            cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", ""),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
            environment=os.getenv("ENCHANTEDTOME_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Container for lazily built service instances.

    One container per application; routes reach it through
    ``app.state.services`` rather than module globals.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._engine = None
        self._book_repository = None
        self._user_repository = None
        self._token_verifier = None

    @property
    def engine(self):
        """Shared database engine."""
        if self._engine is None:
            self._engine = build_engine(
                self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._engine

    @property
    def book_repository(self) -> BookRepository:
        """Get book repository instance."""
        if self._book_repository is None:
            self._book_repository = BookRepository(engine=self.engine)
        return self._book_repository

    @property
    def user_repository(self) -> UserRepository:
        """Get user repository instance."""
        if self._user_repository is None:
            self._user_repository = UserRepository(engine=self.engine)
        return self._user_repository

    @property
    def token_verifier(self) -> TokenVerifier:
        """
        Get token verifier instance.

        Raises:
            TrustRootError: The key set is missing or malformed.
        """
        if self._token_verifier is None:
            key_set = load_key_set(
                jwks_json=self.settings.auth_jwks_json,
                jwks_path=self.settings.auth_jwks_path,
                jwks_url=self.settings.auth_jwks_url,
                algorithms=self.settings.algorithms,
            )
            self._token_verifier = TokenVerifier(
                key_set,
                algorithms=self.settings.algorithms,
                audience=self.settings.auth_audience,
                issuer=self.settings.auth_issuer,
            )
        return self._token_verifier

    def close(self) -> None:
        """Release database connections."""
        if self._engine is not None:
            self._engine.dispose()


def init_services(settings: Settings) -> ServiceContainer:
    """
    Build the service container and load the trust root.

    Raises:
        TrustRootError: The gate cannot work without provider keys.
    """
    services = ServiceContainer(settings)
    _ = services.token_verifier
    return services


def get_service_container(request: Request) -> ServiceContainer:
    """Get the container attached to the running application."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Call init_services first.")
    return services


def get_book_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> BookRepository:
    """Dependency for book repository."""
    return container.book_repository


def get_user_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> UserRepository:
    """Dependency for user repository."""
    return container.user_repository


# =============================================================================
# Authentication Dependencies
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Who is calling. ``identity`` is None for anonymous requests."""

    identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


def get_request_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: ServiceContainer = Depends(get_service_container),
) -> RequestContext:
    """
    Resolve the bearer token (if any) to a request context.

    A verified caller is upserted into the user table with fresh
    profile claims. Failures of either step leave the request anonymous.
    The subject is recorded on ``request.state`` for the request log.
    """
    token = credentials.credentials if credentials else None
    identity = container.token_verifier.authenticate(token)
    if identity is None:
        return RequestContext()

    try:
        container.user_repository.upsert(
            identity.subject_id,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            profile_image_url=identity.picture_url,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to upsert user {identity.subject_id}: {e}")
        return RequestContext()

    request.state.subject_id = identity.subject_id
    return RequestContext(identity=identity)


def require_authenticated(
    context: RequestContext = Depends(get_request_context),
) -> Identity:
    """
    Require a verified caller.

    Raises:
        UnauthorizedError: If the request is anonymous.
    """
    if context.identity is None:
        raise UnauthorizedError("Valid bearer token required")
    return context.identity


def require_admin(
    identity: Identity = Depends(require_authenticated),
    users: UserRepository = Depends(get_user_repository),
) -> UserRecord:
    """
    Require a caller whose stored user record has the admin flag.

    The role is always re-read from the store, so revocation applies
    to the very next request.

    Raises:
        UnauthorizedError: No stored user for the identity.
        ForbiddenError: User exists but is not an admin.
    """
    user = users.get(identity.subject_id)
    if user is None:
        raise UnauthorizedError("Unknown user")
    if not user.is_admin:
        raise ForbiddenError()
    return user
