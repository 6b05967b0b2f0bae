"""
Catalog API Routes

Server-side browse over the whole catalog: free-text search, category
and price filters, sort order and category facets.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from enchantedtome.api.dependencies import get_book_repository
from enchantedtome.api.schemas import BookResponse, CatalogResponse
from enchantedtome.catalog import SUGGESTED_CATEGORIES, CatalogQuery, query
from enchantedtome.storage.book_repository import BookRepository

router = APIRouter(tags=["catalog"])


@router.get("/catalog", response_model=CatalogResponse)
def browse_catalog(
    q: Optional[str] = Query(None, description="Matches title, author or description"),
    category: Optional[str] = Query(None, description="Exact category, or 'all'"),
    price_bracket: Optional[str] = Query(
        None,
        alias="priceBracket",
        description="under10, 10to25, 25to50, over50 or all",
    ),
    sort: Optional[str] = Query(
        None,
        description="title, author, price-low, price-high or newest",
    ),
    repo: BookRepository = Depends(get_book_repository),
):
    """
    Browse the catalog.

    Unrecognised bracket or sort values fall back to "all" and "title".
    Facets always describe the whole catalog, not the filtered view.
    """
    params = CatalogQuery.from_params(
        text=q,
        category=category,
        price_bracket=price_bracket,
        sort_key=sort,
    )
    result = query(repo.list_all(), params)
    logger.debug(f"Catalog query {params} -> {len(result.results)}/{result.total}")

    return CatalogResponse(
        results=[BookResponse.model_validate(book) for book in result.results],
        facet_categories=result.facet_categories,
        total=result.total,
    )


@router.get("/categories", response_model=list[str])
def list_categories():
    """Suggested categories for the admin book form."""
    return list(SUGGESTED_CATEGORIES)
