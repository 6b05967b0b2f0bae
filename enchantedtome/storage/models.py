"""
Database models for Enchanted Tome.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    create_engine,
    Column,
    String,
    Integer,
    Float,
    Text,
    DateTime,
    Boolean,
    Index,
    CheckConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserModel(Base):
    """User record keyed by the identity provider subject."""
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)  # provider "sub" claim
    email = Column(String(255), index=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    profile_image_url = Column(String(1000))
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)


class BookModel(Base):
    """SQLAlchemy model for catalog listings."""

    __tablename__ = "books"

    id = Column(String(64), primary_key=True)

    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    description = Column(Text)

    price = Column(Float, nullable=False, default=0.0)
    category = Column(String(100), nullable=False, default="Fiction", index=True)
    cover_url = Column(String(500))
    published_year = Column(Integer)
    pages = Column(Integer)
    in_stock = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_books_price_non_negative"),
        CheckConstraint("pages IS NULL OR pages > 0", name="ck_books_pages_positive"),
        Index("idx_books_title_author", "title", "author"),
        Index("idx_books_created", "created_at"),
    )


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine and make sure the schema exists.

    In-memory SQLite gets a StaticPool so every session (and every
    worker thread FastAPI runs sync routes on) sees the same database.
    """
    # Strip async drivers for sync engine
    database_url = database_url.replace("+aiosqlite", "").replace("+asyncpg", "")

    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    return engine
