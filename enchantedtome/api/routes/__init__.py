"""
API Routes for Enchanted Tome

Route modules:
- auth: Current user profile
- books: Book CRUD (writes are admin-only)
- catalog: Server-side browse (filter, sort, facets) and category list
- admin: Role bootstrap
"""

from enchantedtome.api.routes.auth import router as auth_router
from enchantedtome.api.routes.books import router as books_router
from enchantedtome.api.routes.catalog import router as catalog_router
from enchantedtome.api.routes.admin import router as admin_router

__all__ = [
    "auth_router",
    "books_router",
    "catalog_router",
    "admin_router",
]
