"""
Pydantic Schemas Package

Schema Naming Convention:
- XxxCreate / XxxRequest: Fields accepted when creating or submitting
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from bookshelf.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
    RatingResponse,
)
from bookshelf.schemas.rating import RatingCreate
from bookshelf.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
)

__all__ = [
    "BookBase",
    "BookCreate",
    "BookResponse",
    "BookUpdate",
    "RatingResponse",
    "RatingCreate",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "SignupRequest",
]
