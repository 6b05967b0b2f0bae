"""
Book Repository for Enchanted Tome

Structured storage for catalog listings using SQLAlchemy:
- SQLite for development/testing
- Any SQLAlchemy URL (PostgreSQL, MySQL) for production
- String (UUID) identifiers, immutable once assigned
- Last-write-wins field updates

Design Decisions:
1. SQLAlchemy ORM: Portable across databases
2. Hard deletes: the removed record is returned for confirmation
3. Ordering is left to the catalog query engine; list_all only
   pre-sorts newest first as a sensible default
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import BookModel, build_engine, utcnow


# Fields a caller may write; id and the timestamps belong to the store.
WRITABLE_FIELDS = frozenset({
    "title",
    "author",
    "description",
    "price",
    "category",
    "cover_url",
    "published_year",
    "pages",
    "in_stock",
})


@dataclass
class StoredBook:
    """Data class for book data transfer."""

    id: str
    title: str
    author: str

    description: Optional[str] = None
    price: float = 0.0
    category: str = "Fiction"
    cover_url: Optional[str] = None
    published_year: Optional[int] = None
    pages: Optional[int] = None
    in_stock: bool = True

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: BookModel) -> "StoredBook":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            title=model.title,
            author=model.author,
            description=model.description,
            price=model.price if model.price is not None else 0.0,
            category=model.category or "Fiction",
            cover_url=model.cover_url,
            published_year=model.published_year,
            pages=model.pages,
            in_stock=bool(model.in_stock) if model.in_stock is not None else True,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (wire field names)."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "coverUrl": self.cover_url,
            "publishedYear": self.published_year,
            "pages": self.pages,
            "inStock": self.in_stock,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class BookRepository:
    """
    Repository for book CRUD operations.

    Usage:
        repo = BookRepository(database_url="sqlite:///./enchantedtome.db")

        book = repo.create(title="Dracula", author="Bram Stoker", price=12.99)
        repo.update(book.id, in_stock=False)
        repo.delete(book.id)
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        engine: Optional[Engine] = None,
    ):
        """
        Initialize repository.

        Args:
            database_url: SQLAlchemy database URL
            engine: Existing engine to share with other repositories
        """
        if engine is None:
            # Default to in-memory SQLite
            engine = build_engine(database_url or "sqlite:///:memory:")

        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        logger.info(f"BookRepository initialized: {str(self.engine.url)[:50]}...")

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def create(self, title: str, author: str, **fields) -> StoredBook:
        """
        Create a new book.

        Args:
            title: Book title
            author: Book author
            **fields: Additional writable fields (unknown keys are ignored)

        Returns:
            Created StoredBook
        """
        values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS and v is not None}
        now = utcnow()

        with self.get_session() as session:
            book = BookModel(
                id=str(uuid.uuid4()),
                title=title,
                author=author,
                created_at=now,
                updated_at=now,
                **values,
            )
            session.add(book)
            session.commit()
            session.refresh(book)

            logger.debug(f"Created book {book.id}: {book.title}")
            return StoredBook.from_model(book)

    def get(self, book_id: str) -> Optional[StoredBook]:
        """
        Get book by ID.

        Args:
            book_id: Book ID

        Returns:
            StoredBook or None
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if book:
                return StoredBook.from_model(book)
            return None

    def update(self, book_id: str, **updates) -> Optional[StoredBook]:
        """
        Merge fields into an existing book.

        ``id`` and ``created_at`` can never be changed through here;
        ``updated_at`` is always refreshed.

        Args:
            book_id: Book ID
            **updates: Fields to update

        Returns:
            Updated StoredBook or None
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if not book:
                return None

            for key, value in updates.items():
                if key in WRITABLE_FIELDS:
                    setattr(book, key, value)

            book.updated_at = max(utcnow(), book.created_at)
            session.commit()
            session.refresh(book)

            return StoredBook.from_model(book)

    def delete(self, book_id: str) -> Optional[StoredBook]:
        """
        Delete a book.

        Args:
            book_id: Book ID

        Returns:
            The removed StoredBook, or None if it did not exist
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if not book:
                return None

            removed = StoredBook.from_model(book)
            session.delete(book)
            session.commit()

            logger.debug(f"Deleted book {book_id}")
            return removed

    def list_all(self) -> list[StoredBook]:
        """
        List every book, newest first.

        Returns:
            List of StoredBooks
        """
        with self.get_session() as session:
            books = session.query(BookModel).order_by(BookModel.created_at.desc()).all()
            return [StoredBook.from_model(b) for b in books]

    def count(self) -> int:
        """Number of books in the catalog."""
        with self.get_session() as session:
            return session.query(func.count(BookModel.id)).scalar() or 0

    def bulk_create(self, books: list[dict]) -> int:
        """
        Bulk create books.

        Args:
            books: List of book dicts (writable fields only)

        Returns:
            Number created
        """
        now = utcnow()
        with self.get_session() as session:
            models = [
                BookModel(
                    id=str(uuid.uuid4()),
                    created_at=now,
                    updated_at=now,
                    **{k: v for k, v in book.items() if k in WRITABLE_FIELDS},
                )
                for book in books
            ]
            session.add_all(models)
            session.commit()
            return len(models)
