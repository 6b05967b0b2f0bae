"""
Catalog browsing for Enchanted Tome.

Search, category and price filtering, ordering and facets over the
book list.
"""

from enchantedtome.catalog.query import (
    ALL,
    SUGGESTED_CATEGORIES,
    PriceBracket,
    SortKey,
    CatalogQuery,
    CatalogResult,
    collation_key,
    facet_categories,
    query,
)

__all__ = [
    "ALL",
    "SUGGESTED_CATEGORIES",
    "PriceBracket",
    "SortKey",
    "CatalogQuery",
    "CatalogResult",
    "collation_key",
    "facet_categories",
    "query",
]
