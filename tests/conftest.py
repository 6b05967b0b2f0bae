"""
Pytest configuration and fixtures for Enchanted Tome tests.
"""

import base64
import json
import time
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt

from enchantedtome.api.main import create_app
from enchantedtome.api.dependencies import Settings, ServiceContainer


# =============================================================================
# Test Settings
# =============================================================================

SIGNING_SECRET = "enchanted-tome-test-signing-secret-0123456789"
SIGNING_KID = "test-key"


def make_jwks(secret: str = SIGNING_SECRET, kid: str = SIGNING_KID) -> dict:
    """HMAC key set standing in for the identity provider's public keys."""
    k = base64.urlsafe_b64encode(secret.encode()).rstrip(b"=").decode()
    return {"keys": [{"kty": "oct", "kid": kid, "alg": "HS256", "k": k}]}


def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url="sqlite:///:memory:",
        database_echo=False,
        auth_jwks_json=json.dumps(make_jwks()),
        auth_algorithms="HS256",
        seed_on_startup=False,
        environment="development",
        debug=False,
    )


@pytest.fixture
def settings() -> Settings:
    return get_test_settings()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def services(settings):
    """Fresh in-memory store and verifier per test."""
    container = ServiceContainer(settings)
    yield container
    container.close()


@pytest.fixture
def book_repo(services):
    return services.book_repository


@pytest.fixture
def user_repo(services):
    return services.user_repository


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app(settings, services):
    """Create FastAPI application for testing."""
    yield create_app(settings=settings, services=services)


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Token Fixtures
# =============================================================================

@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory minting identity provider tokens."""

    def _make(
        sub: str = "user-1",
        email: str = "reader@example.com",
        name: str = "Ada Lovelace",
        expires_in: int = 3600,
        secret: str = SIGNING_SECRET,
        kid: str = SIGNING_KID,
        **claims,
    ) -> str:
        payload = {
            "sub": sub,
            "email": email,
            "name": name,
            "picture": f"https://images.example.com/{sub}.png",
            "iat": int(time.time()),
            "exp": int(time.time()) + expires_in,
            **claims,
        }
        return jwt.encode(payload, secret, algorithm="HS256", headers={"kid": kid})

    return _make


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(make_token) -> dict:
    """Headers for a signed-in, non-admin reader."""
    return bearer(make_token(sub="reader-1", name="Ada Lovelace"))


@pytest.fixture
def admin_headers(make_token, user_repo) -> dict:
    """Headers for a signed-in admin."""
    user_repo.upsert("admin-1", email="admin@example.com", first_name="Grace", last_name="Hopper")
    user_repo.update("admin-1", is_admin=True)
    return bearer(make_token(sub="admin-1", email="admin@example.com", name="Grace Hopper"))


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_book_data() -> dict:
    """Wire-format book payload."""
    return {
        "title": "Frankenstein",
        "author": "Mary Shelley",
        "description": "A scientist creates life and is horrified by the result.",
        "price": 9.99,
        "category": "Science Fiction",
        "coverUrl": "https://images.example.com/frankenstein.jpg",
        "publishedYear": 1818,
        "pages": 280,
        "inStock": True,
    }


@pytest.fixture
def priced_books(book_repo) -> dict:
    """Three books priced on the bracket boundaries, keyed by price."""
    return {
        price: book_repo.create(title=title, author=author, price=price, category=category)
        for title, author, price, category in [
            ("Dracula", "Bram Stoker", 9.99, "Classic"),
            ("Emma", "Jane Austen", 25.00, "Romance"),
            ("Ulysses", "James Joyce", 50.00, "Fiction"),
        ]
    }
