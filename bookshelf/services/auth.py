"""
Authentication Service

Signup, login, token verification and ownership checks.

Every failure is raised as a BookshelfError subclass; callers do not need
to inspect return values to decide whether to continue.
"""

import logging
import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.exceptions import (
    EmailTakenError,
    ForbiddenError,
    InvalidCredentialsInputError,
    UnauthorizedError,
    UnknownEmailError,
    WrongPasswordError,
)
from bookshelf.models import User
from bookshelf.services.security import (
    USER_ID_CLAIM,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

# local@domain.tld, no whitespace and a single "@"
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalar_one_or_none()


def signup(db: Session, email: str, password: str) -> User:
    """
    Create a new account.

    Raises:
        EmailTakenError: An account with this email already exists
    """
    if get_user_by_email(db, email) is not None:
        raise EmailTakenError()

    user = User(email=email, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another signup with the same email won the race
        db.rollback()
        raise EmailTakenError()
    db.refresh(user)

    logger.info(f"New user signed up: {user.email}")
    return user


def login(db: Session, email: str | None, password: str | None) -> tuple[User, str]:
    """
    Check credentials and issue a bearer token.

    The email format is checked before the database is queried.

    Returns:
        Tuple of (user, token)

    Raises:
        InvalidCredentialsInputError: Missing password or malformed email
        UnknownEmailError: No account with this email
        WrongPasswordError: Password does not match
    """
    if not email or not password or not EMAIL_PATTERN.match(email):
        raise InvalidCredentialsInputError()

    user = get_user_by_email(db, email)
    if user is None:
        logger.warning(f"Login failed: user not found for {email}")
        raise UnknownEmailError()

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for {email}")
        raise WrongPasswordError()

    logger.info(f"User logged in: {user.email}")
    return user, create_access_token(user.id)


def verify(token: str) -> str:
    """
    Validate a bearer token and return the user id it carries.

    Raises:
        UnauthorizedError: Bad signature, expired token or missing claim
    """
    payload = decode_token(token)
    if payload is None:
        raise UnauthorizedError()

    user_id = payload.get(USER_ID_CLAIM)
    if not user_id:
        raise UnauthorizedError()

    return str(user_id)


def authorize_owner(resource_owner_id: str, caller_id: str) -> None:
    """
    Allow the call only if the caller owns the resource.

    Raises:
        ForbiddenError: The caller is not the owner
    """
    if resource_owner_id != caller_id:
        logger.warning(
            f"Forbidden: user {caller_id} tried to modify a resource owned by {resource_owner_id}"
        )
        raise ForbiddenError()
