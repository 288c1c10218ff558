"""
Ratings Service

Single-vote-per-user ratings and the denormalized average on Book.

average_rating is the mean of all grades rounded half away from zero to an
integer. It is recomputed whenever a rating is added and never on read, so
every writer goes through rate_book().

Known limitation: two users rating the same book at the same moment can race
on the read-modify-write of average_rating. The unique constraint protects the
one-vote rule, and recalculate_all_book_ratings() repairs any stale average.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookshelf.config import get_settings
from bookshelf.exceptions import AlreadyRatedError
from bookshelf.models import Book, Rating
from bookshelf.services.books import get_book

logger = logging.getLogger(__name__)
settings = get_settings()


def compute_average_rating(grades: Iterable[int]) -> int | None:
    """
    Integer mean of the grades, or None when there are none.

    Decimal arithmetic keeps .5 ties exact: 4.5 rounds to 5, 3.5 to 4.

    Example:
        >>> compute_average_rating([5, 3])
        4
        >>> compute_average_rating([4, 5])
        5
    """
    grades = list(grades)
    if not grades:
        return None

    mean = Decimal(sum(grades)) / Decimal(len(grades))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rate_book(db: Session, book_id: str, user_id: str, grade: int) -> Book:
    """
    Add a user's grade to a book and refresh its average.

    Args:
        db: Database session
        book_id: Book to rate
        user_id: User giving the grade
        grade: The grade (range checked by the request schema)

    Returns:
        The updated book

    Raises:
        BookNotFoundError: The book does not exist
        AlreadyRatedError: The user already rated this book; nothing is changed
    """
    book = get_book(db, book_id)

    if any(rating.user_id == user_id for rating in book.ratings):
        raise AlreadyRatedError()

    book.ratings.append(Rating(user_id=user_id, grade=grade))
    book.average_rating = compute_average_rating(r.grade for r in book.ratings)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request from the same user got there first
        db.rollback()
        raise AlreadyRatedError()
    db.refresh(book)

    logger.info(
        f"User {user_id} rated book {book.id} with {grade}; "
        f"average is now {book.average_rating}"
    )
    return book


def get_best_rated_books(db: Session, limit: int | None = None) -> list[Book]:
    """
    Books with the highest average rating first.

    Unrated books sort after rated ones; ties go to the newest book.
    """
    if limit is None:
        limit = settings.best_rating_limit

    stmt = (
        select(Book)
        .options(selectinload(Book.ratings))
        .order_by(Book.average_rating.desc().nulls_last(), Book.created_at.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def recalculate_book_rating(db: Session, book: Book) -> int | None:
    """
    Rebuild a book's average from its stored ratings.

    Note:
        This function commits the changes to the database.
    """
    book.average_rating = compute_average_rating(r.grade for r in book.ratings)
    db.commit()
    return book.average_rating


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate the average rating of every book.

    Useful for repairing averages written by racing requests.

    Returns:
        Number of books updated
    """
    stmt = select(Book).options(selectinload(Book.ratings))
    books = db.execute(stmt).scalars().all()

    for book in books:
        recalculate_book_rating(db, book)

    return len(books)
