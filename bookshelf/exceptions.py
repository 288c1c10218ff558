"""
Domain Exceptions

Services raise these instead of HTTPException so they can be reused outside
a request (scripts, tests). create_app() registers a single handler that turns
any BookshelfError into a JSON response with the error's status code:

    {"detail": "Book not found"}

Taxonomy:
- 400: invalid input, duplicate email, missing book id, duplicate rating
- 401: missing/invalid/expired token, unknown email, wrong password
- 403: caller is not the owner of the book
- 404: book does not exist
- 500: failures raised by services (image processing). Database errors are
  not wrapped; main.py renders SQLAlchemyError as a 500 itself.
"""

from fastapi import status


class BookshelfError(Exception):
    """Base class for errors that map to an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Something went wrong"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


# -------------------------------------------------------------------------
# 400 Bad Request
# -------------------------------------------------------------------------
class ValidationError(BookshelfError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class InvalidCredentialsInputError(ValidationError):
    detail = "Invalid email or password"


class EmailTakenError(ValidationError):
    detail = "Email already exists"


class MissingBookIdError(ValidationError):
    detail = "Book id is missing"


class AlreadyRatedError(ValidationError):
    detail = "You have already rated this book"


class InvalidBookPayloadError(ValidationError):
    detail = "Invalid book data"


# -------------------------------------------------------------------------
# 401 Unauthorized
# -------------------------------------------------------------------------
class UnauthorizedError(BookshelfError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class UnknownEmailError(UnauthorizedError):
    detail = "Wrong email"


class WrongPasswordError(UnauthorizedError):
    detail = "Wrong password"


# -------------------------------------------------------------------------
# 403 / 404
# -------------------------------------------------------------------------
class ForbiddenError(BookshelfError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class BookNotFoundError(BookshelfError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Book not found"


# -------------------------------------------------------------------------
# 500 Internal Server Error
# -------------------------------------------------------------------------
class InternalError(BookshelfError):
    """Base for 500s a service raises on purpose."""


class ImageProcessingError(InternalError):
    detail = "Could not process image"
