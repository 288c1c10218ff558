"""
Tests for Ratings

- Average calculation (integer, half rounds up)
- One rating per user per book
- POST /api/books/{book_id}/rating
- GET /api/books/bestrating
"""

from unittest.mock import patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookshelf.exceptions import AlreadyRatedError, BookNotFoundError
from bookshelf.models import Book, Rating, User
from bookshelf.services.books import get_book
from bookshelf.services.ratings import (
    compute_average_rating,
    get_best_rated_books,
    rate_book,
    recalculate_all_book_ratings,
    recalculate_book_rating,
)
from bookshelf.services.security import hash_password


def add_book(db: Session, owner: User, title: str, average_rating: int | None = None) -> Book:
    book = Book(user_id=owner.id, title=title, average_rating=average_rating)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


class TestComputeAverageRating:
    """Tests for the average calculation."""

    @pytest.mark.parametrize(
        "grades, expected",
        [
            ([], None),
            ([5], 5),
            ([5, 3], 4),
            ([4, 5], 5),
            ([1, 2], 2),
            ([1, 1, 2], 1),
            ([0, 0], 0),
            ([2, 3, 3], 3),
        ],
    )
    def test_compute_average_rating(self, grades, expected):
        assert compute_average_rating(grades) == expected

    def test_accepts_generator(self):
        assert compute_average_rating(g for g in (3, 4)) == 4


class TestRateBookService:
    """Tests for rate_book() without the HTTP layer."""

    def test_running_average(
        self, db_session: Session, sample_book: Book, make_user
    ):
        """Test the average follows every new grade."""
        expected = [(5, 5), (3, 4), (1, 3), (4, 3)]

        for index, (grade, average) in enumerate(expected):
            user = make_user(f"rater{index}@example.com")
            book = rate_book(db_session, sample_book.id, user.id, grade)
            assert book.average_rating == average

        assert [r.grade for r in sample_book.ratings] == [5, 3, 1, 4]

    def test_already_rated_leaves_book_unchanged(
        self, db_session: Session, sample_book: Book, sample_user: User
    ):
        """Test a second grade from the same user is refused."""
        rate_book(db_session, sample_book.id, sample_user.id, 2)

        with pytest.raises(AlreadyRatedError):
            rate_book(db_session, sample_book.id, sample_user.id, 5)

        db_session.refresh(sample_book)
        assert len(sample_book.ratings) == 1
        assert sample_book.ratings[0].grade == 2
        assert sample_book.average_rating == 2

    def test_book_not_found(self, db_session: Session, sample_user: User):
        with pytest.raises(BookNotFoundError):
            rate_book(db_session, "doesnotexist", sample_user.id, 3)

    def test_owner_can_rate_own_book(
        self, db_session: Session, sample_book: Book, sample_user: User
    ):
        book = rate_book(db_session, sample_book.id, sample_user.id, 4)

        assert book.average_rating == 4

    def test_concurrent_duplicate_rating(self, file_session_factory):
        """Test a duplicate that slips past the check is rolled back as already rated."""
        with file_session_factory() as setup:
            reader = User(email="race@example.com", hashed_password=hash_password("pw"))
            setup.add(reader)
            setup.flush()
            book = Book(user_id=reader.id, title="Race Condition")
            setup.add(book)
            setup.commit()
            reader_id, book_id = reader.id, book.id

        with file_session_factory() as db:
            # This request reads the book while it has no ratings yet
            stale_book = get_book(db, book_id)
            assert stale_book.ratings == []

            with file_session_factory() as other_request:
                other_request.add(Rating(book_id=book_id, user_id=reader_id, grade=1))
                other_request.commit()

            with patch("bookshelf.services.ratings.get_book", return_value=stale_book):
                with pytest.raises(AlreadyRatedError):
                    rate_book(db, book_id, reader_id, 5)

            # The session was rolled back and is still usable
            stored = get_book(db, book_id)
            assert [r.grade for r in stored.ratings] == [1]
            assert stored.average_rating is None
            count = db.execute(
                select(func.count()).select_from(Rating).where(Rating.book_id == book_id)
            ).scalar()
            assert count == 1


class TestRateBookEndpoint:
    """Tests for POST /api/books/{book_id}/rating"""

    def test_rate_book_success(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
        auth_headers: dict,
    ):
        """Test the updated book is returned with the new grade."""
        response = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 5},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book.id
        assert data["ratings"] == [{"userId": sample_user.id, "grade": 5}]
        assert data["averageRating"] == 5
        assert data["imageUrl"] is None

    def test_rate_book_ignores_body_user_id(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
        second_user: User,
        auth_headers: dict,
    ):
        """Test the grader is the token's user even if the body names another."""
        response = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"userId": second_user.id, "rating": 3},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["ratings"][0]["userId"] == sample_user.id

    def test_rate_book_twice(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
        auth_headers: dict,
    ):
        """Test a user can only rate a book once."""
        client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 1},
            headers=auth_headers,
        )

        response = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 5},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "You have already rated this book"
        db_session.refresh(sample_book)
        assert sample_book.average_rating == 1

    def test_rate_book_not_found(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/books/doesnotexist/rating",
            json={"rating": 3},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book not found"

    @pytest.mark.parametrize("book_id", ["undefined", "null"])
    def test_rate_book_missing_id(
        self, client: TestClient, auth_headers: dict, book_id: str
    ):
        """Test placeholder ids from the client are rejected."""
        response = client.post(
            f"/api/books/{book_id}/rating",
            json={"rating": 3},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Book id is missing"

    @pytest.mark.parametrize("grade", [-1, 6, "great"])
    def test_rate_book_invalid_grade(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
        auth_headers: dict,
        grade,
    ):
        """Test grades outside 0..5 are a 400 and nothing is stored."""
        response = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": grade},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        db_session.refresh(sample_book)
        assert sample_book.ratings == []

    def test_rate_book_without_token(self, client: TestClient, sample_book: Book):
        response = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 3},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_two_readers_rate_dune(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
        second_user: User,
        auth_headers: dict,
        auth_header_for,
    ):
        """Test the running average over two readers: 5, then 5 and 3."""
        first = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 5},
            headers=auth_headers,
        )
        assert first.json()["averageRating"] == 5

        second = client.post(
            f"/api/books/{sample_book.id}/rating",
            json={"rating": 3},
            headers=auth_header_for(second_user),
        )

        assert second.status_code == status.HTTP_200_OK
        data = second.json()
        assert data["averageRating"] == 4
        assert data["ratings"] == [
            {"userId": sample_user.id, "grade": 5},
            {"userId": second_user.id, "grade": 3},
        ]

        listed = client.get(f"/api/books/{sample_book.id}").json()
        assert listed["averageRating"] == 4


class TestBestRating:
    """Tests for GET /api/books/bestrating"""

    def test_best_rating_empty(self, client: TestClient):
        response = client.get("/api/books/bestrating")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_best_rating_top_three(
        self, client: TestClient, db_session: Session, sample_user: User
    ):
        """Test only the three best books are returned, best first."""
        add_book(db_session, sample_user, "Meh", 2)
        add_book(db_session, sample_user, "Great", 5)
        add_book(db_session, sample_user, "Unrated")
        add_book(db_session, sample_user, "Good", 4)
        add_book(db_session, sample_user, "Fine", 3)

        response = client.get("/api/books/bestrating")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [book["title"] for book in data] == ["Great", "Good", "Fine"]
        assert [book["averageRating"] for book in data] == [5, 4, 3]

    def test_best_rating_unrated_last(
        self, client: TestClient, db_session: Session, sample_user: User
    ):
        """Test unrated books only fill the list after every rated one."""
        add_book(db_session, sample_user, "Unrated")
        add_book(db_session, sample_user, "Low", 0)
        add_book(db_session, sample_user, "High", 5)

        data = client.get("/api/books/bestrating").json()

        assert [book["title"] for book in data] == ["High", "Low", "Unrated"]
        assert data[2]["averageRating"] is None

    def test_best_rating_custom_limit(self, db_session: Session, sample_user: User):
        for grade in range(5):
            add_book(db_session, sample_user, f"Book {grade}", grade)

        books = get_best_rated_books(db_session, limit=2)

        assert [book.average_rating for book in books] == [4, 3]


class TestRecalculate:
    """Tests for rebuilding averages from stored ratings."""

    def test_recalculate_book_rating_repairs_stale_average(
        self,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        sample_book.ratings.append(Rating(user_id=sample_user.id, grade=4))
        sample_book.ratings.append(Rating(user_id=second_user.id, grade=5))
        sample_book.average_rating = 1
        db_session.commit()

        assert recalculate_book_rating(db_session, sample_book) == 5

        db_session.refresh(sample_book)
        assert sample_book.average_rating == 5

    def test_recalculate_all_book_ratings(
        self, db_session: Session, sample_book: Book, sample_user: User
    ):
        unrated = add_book(db_session, sample_user, "Stale", 3)
        sample_book.ratings.append(Rating(user_id=sample_user.id, grade=2))
        db_session.commit()

        assert recalculate_all_book_ratings(db_session) == 2

        db_session.refresh(sample_book)
        db_session.refresh(unrated)
        assert sample_book.average_rating == 2
        assert unrated.average_rating is None
