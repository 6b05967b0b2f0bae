"""
Catalog Query Engine for Enchanted Tome

Turns the full book list plus a browse query into what the storefront
shows:
- Free-text search across title, author and description
- Category filter
- Price bracket filter
- Title / author / price / newest ordering
- Category facets for the filter controls

Design Decisions:
1. Pure functions over an in-memory snapshot: no I/O, no errors raised
2. Unknown bracket or sort values degrade to "all" / "title"
3. Stable sorting throughout, so ties keep their input order
4. Facets always describe the whole catalog, not the filtered view
5. Price brackets keep the storefront's inclusive 10/25/50 boundaries,
   so a book priced exactly 25.00 shows up under both middle brackets
"""

import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional, Sequence


ALL = "all"

SUGGESTED_CATEGORIES = [
    "Fiction",
    "Non-Fiction",
    "Fantasy",
    "Mystery",
    "Romance",
    "Science Fiction",
    "History",
    "Biography",
    "Poetry",
    "Philosophy",
    "Classic",
    "Adventure",
]


class PriceBracket(str, Enum):
    """Storefront price ranges."""
    UNDER_10 = "under10"
    FROM_10_TO_25 = "10to25"
    FROM_25_TO_50 = "25to50"
    OVER_50 = "over50"
    ALL = "all"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PriceBracket":
        """Parse a raw parameter, falling back to ALL."""
        try:
            return cls(value)
        except ValueError:
            return cls.ALL

    def matches(self, price: float) -> bool:
        """Check whether a price falls inside this bracket."""
        if self is PriceBracket.UNDER_10:
            return price < 10
        if self is PriceBracket.FROM_10_TO_25:
            return 10 <= price <= 25
        if self is PriceBracket.FROM_25_TO_50:
            return 25 <= price <= 50
        if self is PriceBracket.OVER_50:
            return price > 50
        return True


class SortKey(str, Enum):
    """Result ordering."""
    TITLE = "title"
    AUTHOR = "author"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NEWEST = "newest"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Parse a raw parameter, falling back to TITLE."""
        try:
            return cls(value)
        except ValueError:
            return cls.TITLE


@dataclass
class CatalogQuery:
    """A single browse request."""

    text: Optional[str] = None
    category: Optional[str] = None
    price_bracket: PriceBracket = PriceBracket.ALL
    sort_key: SortKey = SortKey.TITLE

    @classmethod
    def from_params(
        cls,
        text: Optional[str] = None,
        category: Optional[str] = None,
        price_bracket: Optional[str] = None,
        sort_key: Optional[str] = None,
    ) -> "CatalogQuery":
        """
        Build a query from raw request parameters.

        Empty text and the "all" category both mean "no filter".
        """
        if category == ALL or not category:
            category = None
        return cls(
            text=text or None,
            category=category,
            price_bracket=PriceBracket.parse(price_bracket),
            sort_key=SortKey.parse(sort_key),
        )


@dataclass
class CatalogResult:
    """Filtered, ordered books plus facet metadata."""

    results: list = field(default_factory=list)
    facet_categories: list[str] = field(default_factory=list)
    total: int = 0


def collation_key(value: Optional[str]) -> str:
    """
    Case- and accent-insensitive sort key.

    "Émile" sorts next to "emile", the way a browser's localeCompare
    would order them.
    """
    decomposed = unicodedata.normalize("NFKD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def _price(book: Any) -> float:
    price = getattr(book, "price", None)
    return price if price is not None else 0.0


def matches_text(book: Any, text: Optional[str]) -> bool:
    """Case-insensitive substring match on title, author or description."""
    if not text:
        return True
    needle = text.casefold()
    for attr in ("title", "author", "description"):
        if needle in (getattr(book, attr, None) or "").casefold():
            return True
    return False


def matches_category(book: Any, category: Optional[str]) -> bool:
    """Exact category match; None or "all" matches everything."""
    if not category or category == ALL:
        return True
    return getattr(book, "category", None) == category


def sort_books(books: Iterable[Any], sort_key: SortKey) -> list:
    """Stable sort by the requested key."""
    books = list(books)

    if sort_key is SortKey.AUTHOR:
        return sorted(books, key=lambda b: collation_key(getattr(b, "author", None)))
    if sort_key is SortKey.PRICE_LOW:
        return sorted(books, key=_price)
    if sort_key is SortKey.PRICE_HIGH:
        return sorted(books, key=_price, reverse=True)
    if sort_key is SortKey.NEWEST:
        return sorted(
            books,
            key=lambda b: getattr(b, "created_at", None) or datetime.min,
            reverse=True,
        )
    return sorted(books, key=lambda b: collation_key(getattr(b, "title", None)))


def facet_categories(books: Iterable[Any]) -> list[str]:
    """Sorted distinct categories."""
    return sorted({b.category for b in books if getattr(b, "category", None)})


def query(all_books: Sequence[Any], params: Optional[CatalogQuery] = None) -> CatalogResult:
    """
    Run a browse query over the full catalog.

    Args:
        all_books: Every book in the store (StoredBook or any object with
            title/author/description/category/price/created_at attributes)
        params: The query; defaults to "everything, sorted by title"

    Returns:
        CatalogResult with the visible books and catalog-wide facets
    """
    params = params or CatalogQuery()

    results = [
        book
        for book in all_books
        if matches_text(book, params.text)
        and matches_category(book, params.category)
        and params.price_bracket.matches(_price(book))
    ]

    return CatalogResult(
        results=sort_books(results, params.sort_key),
        facet_categories=facet_categories(all_books),
        total=len(all_books),
    )
