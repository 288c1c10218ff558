"""
pytest Fixtures for Bookshelf API Tests

Shared fixtures used across all test files.

For database tests we use:
- session scope for the engine (expensive to create)
- function scope for sessions (each test runs in a transaction that is
  rolled back afterwards, so tests don't affect each other)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app.
# Settings are cached on first use, so these must win over any .env file.
import os
import tempfile

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="bookshelf-test-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://localhost:4000"

import io
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.config import get_settings
from bookshelf.database import Base, get_db
from bookshelf.main import app
from bookshelf.models import Book, User
from bookshelf.services.security import create_access_token, hash_password

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast, isolated, no external database needed.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is bound to a connection inside a transaction that's rolled
    back at the end; commits made by the code under test stay inside it.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# FILE FIXTURES
# =============================================================================
@pytest.fixture
def upload_dir() -> Path:
    """Directory the app writes compressed covers to."""
    return Path(get_settings().upload_dir)


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory producing small PNG images in any Pillow mode."""

    def _make_png(mode: str = "RGB", size: tuple[int, int] = (16, 12)) -> bytes:
        color = 0 if mode in ("P", "L", "1") else (200, 30, 30, 255)[: len(mode)]
        buffer = io.BytesIO()
        Image.new(mode, size, color=color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make_png


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header_for() -> Callable[[User], dict]:
    return get_auth_header


@pytest.fixture
def make_user(db_session: Session) -> Callable[[str], User]:
    """Factory creating users with the password "secret123"."""

    def _make_user(email: str) -> User:
        user = User(email=email, hashed_password=hash_password("secret123"))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def sample_user(make_user) -> User:
    """Create a sample user for testing."""
    return make_user("reader@example.com")


@pytest.fixture
def second_user(make_user) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user("other@example.com")


@pytest.fixture
def auth_headers(sample_user: User) -> dict:
    return get_auth_header(sample_user)


@pytest.fixture
def sample_book(db_session: Session, sample_user: User) -> Book:
    """Create a sample book owned by sample_user, without cover or ratings."""
    book = Book(
        user_id=sample_user.id,
        title="Dune",
        author="Frank Herbert",
        year=1965,
        genre="Science Fiction",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


# =============================================================================
# CONCURRENCY FIXTURES
# =============================================================================
@pytest.fixture
def file_session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """
    Session factory on a file-backed SQLite database.

    Each session gets its own connection, so two sessions behave like two
    concurrent requests. Nothing here joins the rolled-back test transaction,
    so rollbacks inside the code under test behave as in production.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrent.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    engine.dispose()
