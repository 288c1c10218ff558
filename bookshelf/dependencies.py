"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: per-request SQLAlchemy session (the injected store handle)
- CurrentUserId: id of the user carried by the bearer token (401 otherwise)
- RequiredBookId: path book id, rejected with 400 when the client sent none
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.exceptions import MissingBookIdError, UnauthorizedError
from bookshelf.services.auth import verify

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# HTTPBearer extracts the token from "Authorization: Bearer <token>" and adds
# the "Authorize" button to Swagger UI. auto_error=False lets us answer a
# missing header with the same 401 as an invalid token.

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Extract and validate the current user from the bearer token.

    Only the token is checked (signature and expiry); users are never deleted,
    so the id it carries is trusted without a database lookup.

    Raises:
        UnauthorizedError: 401 if the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    return verify(credentials.credentials)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


# =============================================================================
# Path Parameters
# =============================================================================
def require_book_id(book_id: str) -> str:
    """
    Reject placeholder ids sent by a client that lost track of the book.

    Raises:
        MissingBookIdError: 400 if the id is empty or the literal "undefined"
    """
    if not book_id.strip() or book_id in ("undefined", "null"):
        raise MissingBookIdError()
    return book_id


RequiredBookId = Annotated[str, Depends(require_book_id)]
