"""
Authentication Router

Handles user authentication endpoints:
- Signup (email/password)
- Login (email/password → bearer token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Tokens are signed JWTs valid for 24 hours by default
"""

import logging

from fastapi import APIRouter, Request

from bookshelf.config import get_settings
from bookshelf.dependencies import DbSession
from bookshelf.schemas import LoginRequest, LoginResponse, MessageResponse, SignupRequest
from bookshelf.services import auth as auth_service
from bookshelf.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
    },
)


@router.post(
    "/signup",
    response_model=MessageResponse,
    summary="Create an account",
    description="Create a new account with email and password. Fails with 400 if the email is taken.",
)
@limiter.limit(settings.rate_limit_auth)
def signup(
    request: Request,
    user_data: SignupRequest,
    db: DbSession,
) -> MessageResponse:
    auth_service.signup(db, user_data.email, user_data.password)
    return MessageResponse(message="Sign up")


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a bearer token.

    **Usage:**
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> LoginResponse:
    """
    Check credentials and return the user id with a fresh token.

    - 400: missing password or malformed email (checked before any lookup)
    - 401: unknown email or wrong password
    """
    user, token = auth_service.login(db, credentials.email, credentials.password)
    return LoginResponse(user_id=user.id, token=token)
