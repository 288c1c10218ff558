"""
Book Model

The central model of the Bookshelf API.

A book belongs to the user who created it (user_id); only that user may
update or delete it. Ratings live in their own table and are loaded in
insertion order. average_rating is denormalized onto the book and is
recomputed by the ratings service every time a rating is added, never on read.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base, generate_id

if TYPE_CHECKING:
    from bookshelf.models.rating import Rating
    from bookshelf.models.user import User


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - user_id: Owner, set at creation and never changed
    - title, author, year, genre: Descriptive fields
    - image_url: Filename of the compressed cover inside the uploads
      directory (relative; rewritten to an absolute URL in responses)
    - average_rating: Integer mean of all grades, NULL until first rating

    Relationships:
    - ratings: One-to-Many, ordered by insertion, deleted with the book

    Example:
        book = Book(
            user_id=user.id,
            title="Dune",
            author="Frank Herbert",
            year=1965,
            genre="Science Fiction",
        )
    """

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=generate_id,
    )

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id"),
        index=True,
        nullable=False,
        comment="Owner of the book"
    )

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Author name as entered by the owner"
    )

    year: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Publication year"
    )

    genre: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Free-form genre label"
    )

    image_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Cover image filename inside the uploads directory"
    )

    # -------------------------------------------------------------------------
    # Denormalized Rating
    # -------------------------------------------------------------------------
    average_rating: Mapped[int | None] = mapped_column(
        Integer,
        index=True,
        nullable=True,
        comment="Rounded mean of all grades, null if not rated yet"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="books",
    )

    ratings: Mapped[list["Rating"]] = relationship(
        "Rating",
        back_populates="book",
        cascade="all, delete-orphan",
        order_by="Rating.id",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', user_id={self.user_id})"
