"""
Book Pydantic Schemas

Create and update payloads arrive as a JSON string in the `book` field of a
multipart form (next to the optional `image` file), so the router parses them
with model_validate_json().

Fields the client may send but the server owns (userId, ratings,
averageRating, imageUrl) are ignored on input: the owner always comes from
the bearer token and the rating fields are maintained by the ratings service.

Response fields are serialized in camelCase for the web client.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookBase(BaseModel):
    """Fields shared by create and update payloads."""

    author: str | None = Field(
        default=None,
        max_length=255,
        description="Author name",
        examples=["Frank Herbert"],
    )

    year: int | None = Field(
        default=None,
        description="Publication year",
        examples=[1965],
    )

    genre: str | None = Field(
        default=None,
        max_length=100,
        description="Genre label",
        examples=["Science Fiction"],
    )

    model_config = ConfigDict(extra="ignore")


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example `book` form field:
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "year": 1965,
        "genre": "Science Fiction"
    }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Dune"],
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize title."""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()


class BookUpdate(BookBase):
    """
    Schema for updating an existing book.

    All fields are optional; only the ones present and non-null are applied.
    """

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=500,
        description="Book title",
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str | None) -> str | None:
        """Validate title if provided."""
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip() if v else v


class RatingResponse(BaseModel):
    """One user's grade, as embedded in a book."""

    user_id: str = Field(..., serialization_alias="userId")
    grade: int

    model_config = ConfigDict(from_attributes=True)


class BookResponse(BaseModel):
    """
    Schema for book responses.

    image_url is the absolute URL of the cover (rewritten from the stored
    filename by the books service), or null when the book has no cover.
    """

    id: str = Field(..., description="Unique identifier")
    user_id: str = Field(..., serialization_alias="userId", description="Owner")
    title: str
    author: str | None = None
    year: int | None = None
    genre: str | None = None
    image_url: str | None = Field(default=None, serialization_alias="imageUrl")
    ratings: list[RatingResponse] = Field(default_factory=list)
    average_rating: int | None = Field(
        default=None,
        serialization_alias="averageRating",
        description="Rounded mean of all grades, null if not rated yet",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "9b2e4f6a1c3d4e5f8a7b6c5d4e3f2a1b",
                "userId": "4f1c2b9a7d0e4c33a3b8f5e2d1c0b9a8",
                "title": "Dune",
                "author": "Frank Herbert",
                "year": 1965,
                "genre": "Science Fiction",
                "imageUrl": "http://localhost:4000/images/3c6e0b8a-dune.webp",
                "ratings": [{"userId": "4f1c2b9a7d0e4c33a3b8f5e2d1c0b9a8", "grade": 5}],
                "averageRating": 5,
            }
        },
    )
