"""
Rating Pydantic Schemas

The client posts {"rating": <grade>}; the grader is taken from the bearer
token, so a userId sent in the body is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field

from bookshelf.config import get_settings

settings = get_settings()


class RatingCreate(BaseModel):
    """Schema for rating a book."""

    rating: int = Field(
        ...,
        ge=settings.min_grade,
        le=settings.max_grade,
        description=f"Grade from {settings.min_grade} to {settings.max_grade}",
        examples=[4, 5],
    )

    model_config = ConfigDict(extra="ignore")
