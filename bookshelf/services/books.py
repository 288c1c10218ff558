"""
Books Service

CRUD orchestration for the catalog: composes the auth ownership check, the
image service and the database.

Update and delete check ownership before touching anything; a ForbiddenError
stops the request before any field is changed or any image is written.
"""

import logging

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookshelf.config import get_settings
from bookshelf.exceptions import BookNotFoundError
from bookshelf.models import Book
from bookshelf.schemas import BookCreate, BookResponse, BookUpdate
from bookshelf.services.auth import authorize_owner
from bookshelf.services.images import save_compressed_image

logger = logging.getLogger(__name__)
settings = get_settings()


# =============================================================================
# Helpers
# =============================================================================
def get_book(db: Session, book_id: str) -> Book:
    """
    Get a book by ID with its ratings loaded.

    Raises:
        BookNotFoundError: No book with this ID
    """
    stmt = (
        select(Book)
        .options(selectinload(Book.ratings))
        .where(Book.id == book_id)
    )
    book = db.execute(stmt).scalar_one_or_none()

    if book is None:
        raise BookNotFoundError()

    return book


def build_image_url(filename: str | None) -> str | None:
    """Absolute URL of a stored cover image, or None if there is none."""
    if not filename:
        return None
    return f"{settings.public_base_url}/images/{filename}"


def to_book_response(book: Book) -> BookResponse:
    """
    Serialize a book for the API.

    The stored image filename is rewritten to an absolute URL on the response
    only; the database keeps the relative name.
    """
    response = BookResponse.model_validate(book)
    return response.model_copy(update={"image_url": build_image_url(book.image_url)})


# =============================================================================
# CRUD
# =============================================================================
def list_books(db: Session) -> list[Book]:
    """All books, oldest first."""
    stmt = (
        select(Book)
        .options(selectinload(Book.ratings))
        .order_by(Book.created_at, Book.title)
    )
    return list(db.execute(stmt).scalars().all())


def create_book(
    db: Session,
    owner_id: str,
    data: BookCreate,
    image: UploadFile | None = None,
) -> Book:
    """
    Create a book owned by owner_id.

    Ratings start empty and average_rating stays null until the first rating.
    """
    book = Book(
        user_id=owner_id,
        title=data.title,
        author=data.author,
        year=data.year,
        genre=data.genre,
    )

    if image is not None:
        book.image_url = save_compressed_image(image)

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"User {owner_id} created book {book.id} ({book.title!r})")
    return book


def update_book(
    db: Session,
    book_id: str,
    caller_id: str,
    data: BookUpdate,
    image: UploadFile | None = None,
) -> Book:
    """
    Apply a partial update to a book owned by the caller.

    Only fields that are present and non-null are changed; a new image
    replaces the cover.

    Raises:
        BookNotFoundError: No book with this ID
        ForbiddenError: The caller does not own the book
    """
    book = get_book(db, book_id)
    authorize_owner(book.user_id, caller_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(book, field, value)

    if image is not None:
        book.image_url = save_compressed_image(image)

    db.commit()
    db.refresh(book)

    logger.info(f"User {caller_id} updated book {book.id}")
    return book


def delete_book(db: Session, book_id: str, caller_id: str) -> None:
    """
    Delete a book owned by the caller, together with its ratings.

    Raises:
        BookNotFoundError: No book with this ID
        ForbiddenError: The caller does not own the book
    """
    book = get_book(db, book_id)
    authorize_owner(book.user_id, caller_id)

    db.delete(book)
    db.commit()

    logger.info(f"User {caller_id} deleted book {book_id}")
