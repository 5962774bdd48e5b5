"""
Movie Pydantic Schemas

Handles:
- Release date validation (1888 up to five years ahead)
- Genre vocabulary and cast list validation
- Media URL validation
- Pagination for list responses

average_rating and total_reviews appear only in responses. The create and
update schemas forbid extra fields, so a client cannot set them.
"""

from datetime import UTC, datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from app.models.movie import Genre

FIRST_RELEASE_YEAR = 1888
MAX_YEARS_AHEAD = 5

_http_url = TypeAdapter(HttpUrl)


def _latest_release_year() -> int:
    return datetime.now(UTC).year + MAX_YEARS_AHEAD


def _check_release_year(v: int) -> int:
    if not FIRST_RELEASE_YEAR <= v <= _latest_release_year():
        raise ValueError(
            f"Release year must be between {FIRST_RELEASE_YEAR} "
            f"and {_latest_release_year()}"
        )
    return v


def _check_url(v: str, label: str) -> str:
    """Validate an http(s) URL, keeping the string exactly as sent (trimmed)."""
    v = v.strip()
    try:
        _http_url.validate_python(v)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid {label} URL") from exc
    return v


def _check_cast(v: list[str]) -> list[str]:
    names = [name.strip() for name in v]
    if any(not name for name in names):
        raise ValueError("Cast member name cannot be empty")
    return names


def _check_text(v: str, label: str) -> str:
    if not v.strip():
        raise ValueError(f"{label} cannot be empty")
    return v.strip()


class MovieBase(BaseModel):
    """
    Base schema with shared movie fields.

    Contains validation for:
    - Title, description and director (trimmed, non-empty)
    - Release year and month
    - Genres (at least one, from the fixed vocabulary)
    - Cast (at least one non-empty name)
    - Poster, banner and trailer URLs
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Movie title",
        examples=["Inception", "The Godfather"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Plot summary",
        examples=["A thief who steals corporate secrets through dream-sharing..."],
    )

    release_year: int = Field(
        ...,
        description="Year of release (1888 to five years from now)",
        examples=[2010, 1972],
    )

    release_month: int | None = Field(
        default=None,
        ge=1,
        le=12,
        description="Month of release",
        examples=[7],
    )

    genres: list[Genre] = Field(
        ...,
        min_length=1,
        description="One or more genres",
        examples=[["Action", "Science Fiction"]],
    )

    director: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Director name",
        examples=["Christopher Nolan"],
    )

    cast: list[str] = Field(
        ...,
        min_length=1,
        description="Cast member names",
        examples=[["Leonardo DiCaprio", "Elliot Page"]],
    )

    poster_url: str = Field(
        ...,
        description="Poster image URL",
        examples=["https://image.tmdb.org/t/p/w500/inception.jpg"],
    )

    banner_url: str | None = Field(
        default=None,
        description="Wide banner image URL",
    )

    trailer_url: str | None = Field(
        default=None,
        description="Trailer video URL",
    )

    @field_validator("title", "description", "director")
    @classmethod
    def text_must_not_be_empty(cls, v: str, info: ValidationInfo) -> str:
        return _check_text(v, info.field_name.capitalize())

    @field_validator("release_year")
    @classmethod
    def validate_release_year(cls, v: int) -> int:
        return _check_release_year(v)

    @field_validator("cast")
    @classmethod
    def validate_cast(cls, v: list[str]) -> list[str]:
        return _check_cast(v)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, v: str) -> str:
        return _check_url(v, "poster")

    @field_validator("banner_url", "trailer_url")
    @classmethod
    def validate_optional_urls(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None or not v.strip():
            return None
        return _check_url(v, info.field_name.split("_")[0])


class MovieCreate(MovieBase):
    """
    Schema for adding a movie to the catalog.

    Example request body:
    {
        "title": "Inception",
        "description": "A thief who steals corporate secrets...",
        "release_year": 2010,
        "genres": ["Action", "Science Fiction"],
        "director": "Christopher Nolan",
        "cast": ["Leonardo DiCaprio"],
        "poster_url": "https://example.com/inception.jpg"
    }
    """

    model_config = ConfigDict(extra="forbid")


class MovieUpdate(BaseModel):
    """
    Schema for updating an existing movie.

    All fields are optional for partial updates; fields that are sent
    replace the stored value (genres and cast are replaced as a whole).
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    release_year: int | None = Field(default=None)
    release_month: int | None = Field(default=None, ge=1, le=12)
    genres: list[Genre] | None = Field(default=None, min_length=1)
    director: str | None = Field(default=None, min_length=1, max_length=255)
    cast: list[str] | None = Field(default=None, min_length=1)
    poster_url: str | None = Field(default=None)
    banner_url: str | None = Field(default=None)
    trailer_url: str | None = Field(default=None)

    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "description", "director")
    @classmethod
    def text_must_not_be_empty(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return v
        return _check_text(v, info.field_name.capitalize())

    @field_validator("release_year")
    @classmethod
    def validate_release_year(cls, v: int | None) -> int | None:
        return v if v is None else _check_release_year(v)

    @field_validator("cast")
    @classmethod
    def validate_cast(cls, v: list[str] | None) -> list[str] | None:
        return v if v is None else _check_cast(v)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, v: str | None) -> str | None:
        return v if v is None else _check_url(v, "poster")

    @field_validator("banner_url", "trailer_url")
    @classmethod
    def validate_optional_urls(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None or not v.strip():
            return None
        return _check_url(v, info.field_name.split("_")[0])

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "MovieUpdate":
        """Fields that are mandatory on the movie cannot be cleared."""
        required = {
            "title", "description", "release_year", "genres",
            "director", "cast", "poster_url",
        }
        cleared = sorted(
            name for name in self.model_fields_set & required
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class MovieResponse(BaseModel):
    """
    Schema for movie responses.

    Includes the derived rating fields maintained by the ratings service.
    """

    id: int = Field(..., description="Unique identifier")
    title: str
    description: str
    release_year: int
    release_month: int | None = None
    genres: list[str] = Field(default_factory=list)
    director: str
    cast: list[str] = Field(default_factory=list)
    poster_url: str
    banner_url: str | None = None
    trailer_url: str | None = None

    average_rating: float = Field(
        default=0.0,
        description="Mean review rating, 0 when there are no reviews",
    )
    total_reviews: int = Field(
        default=0,
        description="Number of reviews for this movie",
    )

    created_by: int | None = Field(default=None, description="Admin who added the movie")
    created_at: datetime = Field(..., description="When the movie was added")
    updated_at: datetime = Field(..., description="When the movie was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Inception",
                "description": "A thief who steals corporate secrets...",
                "release_year": 2010,
                "release_month": 7,
                "genres": ["Action", "Science Fiction"],
                "director": "Christopher Nolan",
                "cast": ["Leonardo DiCaprio", "Elliot Page"],
                "poster_url": "https://example.com/inception.jpg",
                "banner_url": None,
                "trailer_url": None,
                "average_rating": 4.5,
                "total_reviews": 2,
                "created_by": 1,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class MovieListResponse(BaseModel):
    """
    Schema for paginated movie list responses.

    - total: Total number of movies matching the query
    - page: Current page number
    - per_page: Number of items per page
    - pages: Total number of pages
    """

    items: list[MovieResponse] = Field(..., description="Movies for this page")
    total: int = Field(..., ge=0, description="Total number of movies")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Number of items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "total": 100,
                "page": 1,
                "per_page": 20,
                "pages": 5,
            }
        },
    )
