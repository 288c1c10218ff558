#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with demo readers, books and ratings for development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

    # Keep existing rows
    python scripts/seed_data.py --keep

Every demo account uses the password "bookshelf".
Ratings go through the ratings service so the stored averages are correct.
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import SessionLocal, create_tables
from bookshelf.models import Book, Rating, User
from bookshelf.schemas import BookCreate
from bookshelf.services.books import create_book
from bookshelf.services.ratings import rate_book
from bookshelf.services.security import hash_password

DEMO_PASSWORD = "bookshelf"

READERS = [
    "alice@example.com",
    "bruno@example.com",
    "chloe@example.com",
]

BOOKS = [
    {"title": "Dune", "author": "Frank Herbert", "year": 1965, "genre": "Science Fiction"},
    {"title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin", "year": 1969, "genre": "Science Fiction"},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "year": 1813, "genre": "Romance"},
    {"title": "The Hobbit", "author": "J.R.R. Tolkien", "year": 1937, "genre": "Fantasy"},
    {"title": "Nineteen Eighty-Four", "author": "George Orwell", "year": 1949, "genre": "Dystopian"},
]

# (book index, reader index, grade)
GRADES = [
    (0, 1, 5), (0, 2, 4),
    (1, 0, 4), (1, 2, 3),
    (2, 0, 3), (2, 1, 2),
    (3, 1, 5), (3, 2, 5),
    (4, 0, 4),
]


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Rating))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_readers(db: Session) -> list[User]:
    """Create demo accounts."""
    print("Creating readers...")
    users = [User(email=email, hashed_password=hash_password(DEMO_PASSWORD)) for email in READERS]
    db.add_all(users)
    db.commit()
    for user in users:
        db.refresh(user)
    print(f"Created {len(users)} readers.")
    return users


def create_books(db: Session, readers: list[User]) -> list[Book]:
    """Create demo books, spread across the readers."""
    print("Creating books...")
    books = [
        create_book(db, readers[i % len(readers)].id, BookCreate(**data))
        for i, data in enumerate(BOOKS)
    ]
    print(f"Created {len(books)} books.")
    return books


def add_ratings(db: Session, books: list[Book], readers: list[User]) -> None:
    """Rate the demo books."""
    print("Adding ratings...")
    for book_index, reader_index, grade in GRADES:
        rate_book(db, books[book_index].id, readers[reader_index].id, grade)
    print(f"Added {len(GRADES)} ratings.")


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    settings = get_settings()

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        readers = create_readers(db)
        books = create_books(db, readers)
        add_ratings(db, books, readers)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Readers: {len(readers)} (password: {DEMO_PASSWORD!r})")
        print(f"  - Books: {len(books)}")
        print(f"  - Ratings: {len(GRADES)}")
        print(f"\nAPI documentation at {settings.public_base_url}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Bookshelf database")
    parser.add_argument("--keep", action="store_true", help="Keep existing rows")
    args = parser.parse_args()

    seed_database(clear_existing=not args.keep)
