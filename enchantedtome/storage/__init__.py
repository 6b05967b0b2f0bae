"""
Storage Module for Enchanted Tome

Record store for the two entity kinds:
- Books (catalog listings, string UUID ids)
- Users (keyed by identity provider subject)
- Sample catalog seeding
"""

from enchantedtome.storage.models import (
    Base,
    BookModel,
    UserModel,
    build_engine,
)
from enchantedtome.storage.book_repository import (
    BookRepository,
    StoredBook,
)
from enchantedtome.storage.user_repository import (
    UserRepository,
    UserRecord,
)
from enchantedtome.storage.seed import SAMPLE_BOOKS, seed_books

__all__ = [
    # Models
    "Base",
    "BookModel",
    "UserModel",
    "build_engine",
    # Repositories
    "BookRepository",
    "StoredBook",
    "UserRepository",
    "UserRecord",
    # Seeding
    "SAMPLE_BOOKS",
    "seed_books",
]
