"""
Book API Routes

CRUD operations for the catalog. Reads are public; create, update and
delete require an admin caller.
"""

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from enchantedtome.api.dependencies import (
    RequestContext,
    get_book_repository,
    get_request_context,
    require_admin,
)
from enchantedtome.api.middleware.error_handler import NotFoundError
from enchantedtome.api.schemas import (
    BookCreate,
    BookResponse,
    BookUpdate,
    ErrorResponse,
    ValidationErrorResponse,
)
from enchantedtome.storage.book_repository import BookRepository
from enchantedtome.storage.user_repository import UserRecord


router = APIRouter(prefix="/books", tags=["books"])

WRITE_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Not signed in"},
    403: {"model": ErrorResponse, "description": "Admin access required"},
}


# =============================================================================
# Read Endpoints
# =============================================================================

@router.get("", response_model=list[BookResponse])
def list_books(
    context: RequestContext = Depends(get_request_context),
    repo: BookRepository = Depends(get_book_repository),
):
    """
    List every book, newest first.

    Public, but a signed-in reader still passes through the auth gate:
    the catalog page is where a returning user's profile gets refreshed
    from their token.
    """
    books = repo.list_all()
    logger.debug(
        f"Listing {len(books)} books "
        f"({'signed in' if context.is_authenticated else 'anonymous'})"
    )
    return [BookResponse.model_validate(book) for book in books]


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={404: {"model": ErrorResponse, "description": "Book not found"}},
)
def get_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Get a book by ID."""
    book = repo.get(book_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return BookResponse.model_validate(book)


# =============================================================================
# Admin Endpoints
# =============================================================================

@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid book data"},
        **WRITE_RESPONSES,
    },
)
def create_book(
    book: BookCreate,
    admin: UserRecord = Depends(require_admin),
    repo: BookRepository = Depends(get_book_repository),
):
    """Add a book to the catalog."""
    created = repo.create(**book.model_dump())
    logger.info(f"Admin {admin.id} created book {created.id}: {created.title}")
    return BookResponse.model_validate(created)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid book data"},
        **WRITE_RESPONSES,
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def update_book(
    book_id: str,
    updates: BookUpdate,
    admin: UserRecord = Depends(require_admin),
    repo: BookRepository = Depends(get_book_repository),
):
    """Update the supplied fields of a book; omitted fields are unchanged."""
    updated = repo.update(book_id, **updates.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFoundError("Book", book_id)

    logger.info(f"Admin {admin.id} updated book {book_id}")
    return BookResponse.model_validate(updated)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        **WRITE_RESPONSES,
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def delete_book(
    book_id: str,
    admin: UserRecord = Depends(require_admin),
    repo: BookRepository = Depends(get_book_repository),
):
    """Remove a book from the catalog."""
    removed = repo.delete(book_id)
    if removed is None:
        raise NotFoundError("Book", book_id)

    logger.info(f"Admin {admin.id} deleted book {book_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
