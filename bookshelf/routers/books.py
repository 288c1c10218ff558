"""
Books Router

Catalog and rating endpoints.

- GET    /books               list all books
- GET    /books/bestrating    top rated books
- GET    /books/{book_id}     one book
- POST   /books               create (bearer, multipart: book JSON + image)
- PUT    /books/{book_id}     partial update, owner only (bearer, multipart)
- DELETE /books/{book_id}     delete, owner only (bearer)
- POST   /books/{book_id}/rating  rate once per user (bearer)

Image URLs in responses are absolute; the book JSON in multipart forms is a
string field named "book".
"""

from typing import Annotated

from fastapi import APIRouter, File, Form, Request, UploadFile
from pydantic import BaseModel, ValidationError

from bookshelf.config import get_settings
from bookshelf.dependencies import CurrentUserId, DbSession, RequiredBookId
from bookshelf.exceptions import InvalidBookPayloadError
from bookshelf.schemas import (
    BookCreate,
    BookResponse,
    BookUpdate,
    MessageResponse,
    RatingCreate,
)
from bookshelf.services import books as books_service
from bookshelf.services import ratings as ratings_service
from bookshelf.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def parse_book_payload(raw: str, schema: type[BaseModel]):
    """
    Validate the JSON string sent in the "book" form field.

    Raises:
        InvalidBookPayloadError: 400 if the string is not valid JSON for the schema
    """
    try:
        return schema.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidBookPayloadError(f"Invalid book data: {e.errors()[0]['msg']}")


def uploaded_image(image: UploadFile | None) -> UploadFile | None:
    """Browsers send an empty file part when no file was picked."""
    if image is None or not image.filename:
        return None
    return image


# =============================================================================
# Read Endpoints
# =============================================================================
@router.get(
    "",
    response_model=list[BookResponse],
    summary="List all books",
)
@limiter.limit(settings.rate_limit_default)
def list_books(request: Request, db: DbSession) -> list[BookResponse]:
    books = books_service.list_books(db)
    return [books_service.to_book_response(book) for book in books]


# Must be declared before /{book_id} so "bestrating" is not taken as an id
@router.get(
    "/bestrating",
    response_model=list[BookResponse],
    summary="Best rated books",
    description="The books with the highest average rating, best first (3 by default).",
)
@limiter.limit(settings.rate_limit_default)
def best_rated_books(request: Request, db: DbSession) -> list[BookResponse]:
    books = ratings_service.get_best_rated_books(db)
    return [books_service.to_book_response(book) for book in books]


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_book(request: Request, book_id: str, db: DbSession) -> BookResponse:
    book = books_service.get_book(db, book_id)
    return books_service.to_book_response(book)


# =============================================================================
# Write Endpoints
# =============================================================================
@router.post(
    "",
    response_model=MessageResponse,
    summary="Create a new book",
    description="Multipart form with a `book` JSON string and an optional `image` file. Requires a bearer token.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    db: DbSession,
    user_id: CurrentUserId,
    book: Annotated[str, Form(description="Book fields as a JSON string")],
    image: Annotated[UploadFile | None, File(description="Cover image")] = None,
) -> MessageResponse:
    data = parse_book_payload(book, BookCreate)
    books_service.create_book(db, user_id, data, uploaded_image(image))
    return MessageResponse(message="Book posted")


@router.put(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Update a book",
    description="Partial update by the book's owner. Only the fields present in `book` are changed.",
    responses={403: {"description": "Caller does not own the book"}},
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    book: Annotated[str | None, Form(description="Fields to change as a JSON string")] = None,
    image: Annotated[UploadFile | None, File(description="New cover image")] = None,
) -> MessageResponse:
    data = parse_book_payload(book, BookUpdate) if book else BookUpdate()
    books_service.update_book(db, book_id, user_id, data, uploaded_image(image))
    return MessageResponse(message="Book updated")


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
    responses={403: {"description": "Caller does not own the book"}},
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> MessageResponse:
    books_service.delete_book(db, book_id, user_id)
    return MessageResponse(message="Book deleted")


@router.post(
    "/{book_id}/rating",
    response_model=BookResponse,
    summary="Rate a book",
    description="Add the caller's grade to the book. Each user can rate a book once.",
)
@limiter.limit(settings.rate_limit_write)
def rate_book(
    request: Request,
    book_id: RequiredBookId,
    rating_data: RatingCreate,
    db: DbSession,
    user_id: CurrentUserId,
) -> BookResponse:
    book = ratings_service.rate_book(db, book_id, user_id, rating_data.rating)
    return books_service.to_book_response(book)
