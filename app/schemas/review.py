"""
Review Pydantic Schemas

Schemas for movie reviews with ratings.

Schemas:
- ReviewBase: Shared rating/comment fields and their validation
- ReviewCreate: Create a new review for a movie
- ReviewUpdate: Replace rating and comment of an existing review
- ReviewResponse: Review with the reviewer's public projection
- ReviewWithMovie: Review with a summary of the reviewed movie

Business Rules:
- Rating must be an integer from 1 to 5 (floats and numeric strings rejected)
- Comment must not be empty after trimming
- One review per user per movie (enforced by the review service and database)
- movie_id and user_id never change after creation
"""
# ruff: noqa: I001
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Embedded Schemas (Minimal data for nested responses)
# =============================================================================


class ReviewAuthor(BaseModel):
    """
    Public projection of the user who wrote a review.

    Never exposes email, role or password data.
    """

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Username")

    model_config = ConfigDict(from_attributes=True)


class MovieSummary(BaseModel):
    """
    Movie fields shown next to a user's own reviews.

    Enough to render a poster card without loading the full movie.
    """

    id: int = Field(..., description="Movie ID")
    title: str = Field(..., description="Movie title")
    poster_url: str = Field(..., description="Poster image URL")
    release_year: int = Field(..., description="Year of release")
    genres: list[str] = Field(default_factory=list, description="Genre names")
    director: str = Field(..., description="Director name")
    average_rating: float = Field(..., description="Current average rating")

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Review Schemas
# =============================================================================


class ReviewBase(BaseModel):
    """
    Base schema with shared review fields.

    Contains validation for:
    - Rating (strict integer, 1-5)
    - Comment (trimmed, must not be empty)
    """

    rating: int = Field(
        ...,
        strict=True,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        description="Review text",
        examples=["Stunning visuals and a score that stays with you."],
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty(cls, v: str) -> str:
        """Trim the comment and reject whitespace-only text."""
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class ReviewCreate(ReviewBase):
    """
    Schema for creating a new review.

    The author is always the authenticated caller, never a body field.

    Example request body:
    {
        "movie_id": 42,
        "rating": 4,
        "comment": "Great pacing, weak ending."
    }
    """

    movie_id: int = Field(
        ...,
        gt=0,
        description="ID of the movie being reviewed",
        examples=[42],
    )


class ReviewUpdate(ReviewBase):
    """
    Schema for updating an existing review.

    Both rating and comment are replaced; the movie cannot be changed.
    """

    pass


class ReviewResponse(ReviewBase):
    """
    Schema for review responses.

    Includes:
    - Review data (rating, comment)
    - Database fields (id, timestamps)
    - Nested user info (who wrote the review)
    """

    id: int = Field(..., description="Unique review identifier")
    movie_id: int = Field(..., description="ID of the reviewed movie")
    user_id: int = Field(..., description="ID of the user who wrote the review")

    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    user: ReviewAuthor = Field(..., description="User who wrote the review")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "movie_id": 42,
                "user_id": 7,
                "rating": 5,
                "comment": "A must-watch classic!",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "user": {"id": 7, "username": "filmfan"},
            }
        },
    )


class ReviewWithMovie(ReviewBase):
    """
    A review as listed on the author's own profile.

    Carries the movie summary instead of the author.
    """

    id: int = Field(..., description="Unique review identifier")
    movie_id: int = Field(..., description="ID of the reviewed movie")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    movie: MovieSummary = Field(..., description="Movie being reviewed")

    model_config = ConfigDict(from_attributes=True)


class ReviewCount(BaseModel):
    """Number of reviews written by a user."""

    count: int = Field(..., ge=0, description="Number of reviews")


class MessageResponse(BaseModel):
    """Plain confirmation message for delete-style operations."""

    message: str = Field(..., description="Human readable result")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"message": "Review deleted successfully"}
        },
    )
