"""
User Model

Represents an account that can log in, publish books and rate them.

Users are created on signup and never modified or deleted afterwards.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base, generate_id

if TYPE_CHECKING:
    from bookshelf.models.book import Book


class User(Base):
    """
    User model representing registered users.

    Table: users

    Indexes:
    - Primary key on id (automatic)
    - email: Unique index for login lookups; signup also checks for an
      existing row first so the common case gets a clean 400

    Example:
        user = User(
            email="john@example.com",
            hashed_password=hash_password("secret123"),
        )
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=generate_id,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user signed up"
    )

    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="owner",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}')"
