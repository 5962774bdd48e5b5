"""
Movies Router

Endpoints for browsing and managing the movie catalog.

Endpoints:
- GET /movies - List movies (pagination, genre filter, text search)
- GET /movies/genres - The genre vocabulary
- GET /movies/{movie_id} - Get a single movie
- POST /movies - Add a movie (admin only)
- PUT /movies/{movie_id} - Update a movie (admin only)
- DELETE /movies/{movie_id} - Delete a movie and its reviews (admin only)

average_rating and total_reviews are read-only here; they change only
through review writes.
"""

import logging
import math

from fastapi import APIRouter, Request, status
from sqlalchemy import func, or_, select

from app.config import get_settings
from app.dependencies import AdminUser, DbSession, MovieFilters, Pagination
from app.exceptions import NotFoundError
from app.models.movie import Genre, Movie, MovieGenre
from app.schemas.movie import (
    MovieCreate,
    MovieListResponse,
    MovieResponse,
    MovieUpdate,
)
from app.schemas.review import MessageResponse
from app.services.access import Caller, authorize_operation
from app.services.rate_limiter import limiter

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/movies",
    tags=["Movies"],
    responses={
        404: {"description": "Movie not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_movie_or_404(db: DbSession, movie_id: int) -> Movie:
    """
    Get a movie by ID or raise NotFoundError.

    Genre links are loaded with the movie (selectin relationship).
    """
    movie = db.get(Movie, movie_id)

    if movie is None:
        raise NotFoundError("Movie not found")

    return movie


def apply_movie_filters(stmt, filters: MovieFilters):
    """
    Apply search and filter parameters to a movie query.

    - genre: Movies tagged with the genre
    - search: Case-insensitive substring of title or description
    """
    if filters.genre:
        stmt = stmt.where(
            Movie.genre_links.any(MovieGenre.name == filters.genre.value)
        )

    if filters.search:
        search_term = f"%{filters.search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Movie.title).like(search_term),
                func.lower(Movie.description).like(search_term),
            )
        )

    return stmt


# =============================================================================
# Read Endpoints
# =============================================================================


@router.get(
    "",
    response_model=MovieListResponse,
    summary="List movies",
    description="Get a paginated list of movies, newest first, with optional genre and search filters.",
)
@limiter.limit(settings.rate_limit_default)
def list_movies(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: MovieFilters,
) -> MovieListResponse:
    """
    List movies with pagination and optional filtering.

    Returns:
        Paginated list of movies with metadata
    """
    base_stmt = select(Movie)

    if filters.has_filters:
        base_stmt = apply_movie_filters(base_stmt, filters)

    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        base_stmt
        .order_by(Movie.created_at.desc(), Movie.id.desc())
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    movies = db.execute(stmt).scalars().all()

    return MovieListResponse(
        items=[MovieResponse.model_validate(movie) for movie in movies],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.get(
    "/genres",
    response_model=list[str],
    summary="List genres",
    description="The fixed genre vocabulary accepted by the catalog.",
)
def list_genres() -> list[str]:
    return [genre.value for genre in Genre]


@router.get(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Get a movie by ID",
    description="Retrieve a movie including its current rating aggregates.",
)
@limiter.limit(settings.rate_limit_default)
def get_movie(
    request: Request,
    movie_id: int,
    db: DbSession,
) -> MovieResponse:
    movie = get_movie_or_404(db, movie_id)
    return MovieResponse.model_validate(movie)


# =============================================================================
# Admin Endpoints
# =============================================================================


@router.post(
    "",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a movie",
    description="Add a movie to the catalog. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_write)
def create_movie(
    request: Request,
    movie_data: MovieCreate,
    db: DbSession,
    admin: AdminUser,
) -> MovieResponse:
    """
    Create a new movie.

    New movies start with average_rating 0 and total_reviews 0.
    """
    authorize_operation(Caller.from_user(admin), "movie.create")

    movie = Movie(
        **movie_data.model_dump(exclude={"genres"}),
        created_by=admin.id,
    )
    movie.genres = movie_data.genres

    db.add(movie)
    db.commit()
    db.refresh(movie)

    logger.info(f"Movie {movie.id} '{movie.title}' created by admin {admin.id}")

    return MovieResponse.model_validate(movie)


@router.put(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Update a movie",
    description="Partially update a movie. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_write)
def update_movie(
    request: Request,
    movie_id: int,
    movie_data: MovieUpdate,
    db: DbSession,
    admin: AdminUser,
) -> MovieResponse:
    """
    Update a movie.

    Only fields present in the request body are changed.
    """
    authorize_operation(Caller.from_user(admin), "movie.update")

    movie = get_movie_or_404(db, movie_id)

    update_data = movie_data.model_dump(exclude_unset=True)
    genres = update_data.pop("genres", None)

    for field, value in update_data.items():
        setattr(movie, field, value)
    if genres is not None:
        movie.genres = genres

    db.commit()
    db.refresh(movie)

    logger.info(f"Movie {movie_id} updated by admin {admin.id}: {sorted(movie_data.model_fields_set)}")

    return MovieResponse.model_validate(movie)


@router.delete(
    "/{movie_id}",
    response_model=MessageResponse,
    summary="Delete a movie",
    description="Delete a movie with its reviews and watchlist entries. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_write)
def delete_movie(
    request: Request,
    movie_id: int,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    authorize_operation(Caller.from_user(admin), "movie.delete")

    movie = get_movie_or_404(db, movie_id)

    db.delete(movie)
    db.commit()

    logger.info(f"Movie {movie_id} deleted by admin {admin.id}")

    return MessageResponse(message="Movie deleted successfully")
