"""
Rating Model

One user's grade for one book.

Business Rules:
- One rating per user per book (unique constraint, also checked before insert)
- Ratings are append-only: there is no update or delete path
"""

from datetime import UTC, datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base


class Rating(Base):
    """
    Rating model.

    Attributes:
        id: Autoincrement primary key, also the insertion order
        book_id: Foreign key to books table
        user_id: User who gave the grade
        grade: Integer grade
        created_at: When the grade was given
    """

    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    book_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    grade: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Grade given by the user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    book = relationship("Book", back_populates="ratings")

    __table_args__ = (
        # One rating per user per book
        UniqueConstraint("book_id", "user_id", name="uq_rating_book_user"),
    )

    def __repr__(self) -> str:
        return f"<Rating(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, grade={self.grade})>"
