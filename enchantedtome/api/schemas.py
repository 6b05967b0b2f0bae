"""
API Schemas for Enchanted Tome

Pydantic models for request validation and response serialization:
- Book models
- User models
- Catalog browse models
- Error and health models

Design Decisions:
1. Strict validation: unknown fields are rejected on writes
2. Separate Request/Response: Clear distinction between inputs and outputs
3. camelCase on the wire, snake_case in Python (aliases, both accepted)
4. Examples: OpenAPI documentation with realistic examples
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)

# Bounds keep integers inside a 64-bit store column.
MIN_PUBLISHED_YEAR = -5000
MAX_PUBLISHED_YEAR = 9999
MAX_PAGES = 100_000


# =============================================================================
# Book Schemas
# =============================================================================

class BookBase(BaseModel):
    """Base book fields."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    price: float = Field(0.0, ge=0, allow_inf_nan=False)
    category: str = Field("Fiction", min_length=1, max_length=100)
    cover_url: Optional[str] = Field(None, max_length=500)
    published_year: Optional[int] = Field(None, ge=MIN_PUBLISHED_YEAR, le=MAX_PUBLISHED_YEAR)
    pages: Optional[int] = Field(None, gt=0, le=MAX_PAGES)
    in_stock: bool = True

    model_config = WIRE_CONFIG


class BookCreate(BookBase):
    """Book creation request."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "title": "Frankenstein",
                "author": "Mary Shelley",
                "description": "Victor Frankenstein's ambition leads him to create life from death.",
                "price": 9.99,
                "category": "Science Fiction",
                "coverUrl": "https://images.example.com/frankenstein.jpg",
                "publishedYear": 1818,
                "pages": 280,
                "inStock": True,
            }
        },
    )


class BookUpdate(BaseModel):
    """Book update request (partial)."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    cover_url: Optional[str] = Field(None, max_length=500)
    published_year: Optional[int] = Field(None, ge=MIN_PUBLISHED_YEAR, le=MAX_PUBLISHED_YEAR)
    pages: Optional[int] = Field(None, gt=0, le=MAX_PAGES)
    in_stock: Optional[bool] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    @field_validator("title", "author", "price", "category", "in_stock", mode="before")
    @classmethod
    def not_null(cls, value):
        # Omitting a field leaves it alone; null would blank a required column.
        if value is None:
            raise ValueError("may not be null")
        return value


class BookResponse(BookBase):
    """Book response model."""

    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# User Schemas
# =============================================================================

class UserResponse(BaseModel):
    """Stored user profile."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_admin: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Catalog Schemas
# =============================================================================

class CatalogResponse(BaseModel):
    """Filtered, ordered books plus category facets."""

    results: list[BookResponse]
    facet_categories: list[str]
    total: int

    model_config = WIRE_CONFIG


# =============================================================================
# Error / Health Schemas
# =============================================================================

class FieldError(BaseModel):
    """A single invalid field."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Book not found",
                "detail": "No Book with identifier 'abc123' exists",
                "code": "NOT_FOUND",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


class ValidationErrorResponse(ErrorResponse):
    """Validation error response with field-level detail."""

    errors: list[FieldError]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
