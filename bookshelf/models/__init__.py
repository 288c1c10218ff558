"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (a user owns the books they created)
- Book -> Rating: One-to-Many (each rating is one user's grade for the book)

Import all models here to:
1. Make them available as: from bookshelf.models import Book, Rating, User
2. Ensure Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from bookshelf.models.user import User
from bookshelf.models.book import Book
from bookshelf.models.rating import Rating

__all__ = [
    "User",
    "Book",
    "Rating",
]
