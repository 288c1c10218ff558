"""
User Pydantic Schemas

These schemas define the shape of data for signup and login.

Schemas:
- SignupRequest: Email and password for a new account
- LoginRequest: Credentials for login (validated by the auth service so a
  malformed email is reported as "Invalid email or password")
- LoginResponse: User id and bearer token
- MessageResponse: Short confirmation message returned by write endpoints

Response fields are serialized in camelCase (userId) for the web client.
"""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """
    Schema for signup.

    No password strength rules are applied.
    """

    email: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's email address",
        examples=["john@example.com"],
    )

    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Password",
        examples=["secret123"],
    )


class LoginRequest(BaseModel):
    """
    Schema for email/password login.

    Both fields are optional at the schema level; missing or malformed values
    are rejected by the auth service before any database lookup.
    """

    email: str | None = Field(
        default=None,
        description="User's email address",
        examples=["john@example.com"],
    )

    password: str | None = Field(
        default=None,
        description="Password",
        examples=["secret123"],
    )


class LoginResponse(BaseModel):
    """
    Schema for a successful login.

    Send the token back as: Authorization: Bearer <token>
    """

    user_id: str = Field(
        ...,
        serialization_alias="userId",
        description="ID of the logged in user",
    )

    token: str = Field(
        ...,
        description="Signed bearer token, valid for 24 hours by default",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": "4f1c2b9a7d0e4c33a3b8f5e2d1c0b9a8",
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            }
        }
    )


class MessageResponse(BaseModel):
    """Short human readable confirmation."""

    message: str = Field(..., examples=["Book posted"])
