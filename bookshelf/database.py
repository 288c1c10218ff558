"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Bookshelf API.

We use SYNCHRONOUS SQLAlchemy: the API is plain CRUD and FastAPI already runs
sync endpoints in a threadpool.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

The engine is built once from settings and handed to routes only through the
get_db dependency, so tests can swap the store by overriding that dependency.
"""

import uuid
from collections.abc import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookshelf.config import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    SQLite does not support pool sizing and refuses cross-thread use of a
    connection unless check_same_thread is disabled.
    """
    if settings.is_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=settings.debug,  # Log SQL in debug mode
    )


engine = build_engine(get_settings())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


def generate_id() -> str:
    """Random primary key for users and books (32 hex characters)."""
    return uuid.uuid4().hex


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, code after yield closes it, even
    when the route raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(bind: Engine | None = None) -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    # Models register themselves on Base.metadata when imported
    import bookshelf.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

