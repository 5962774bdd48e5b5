"""
Reviews Router

CRUD endpoints for movie reviews.

Endpoints:
- GET /reviews/movie/{movie_id} - List reviews for a movie
- GET /movies/{movie_id}/reviews - Same list, nested under the movie
- GET /reviews/{review_id} - Get a specific review
- POST /reviews - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner or admin)

Business Rules:
- One review per user per movie
- Only the review author can update their review
- The review author or an admin can delete a review
- Every write refreshes the movie's average_rating and total_reviews
  before the response is sent
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import CurrentCaller, DbSession
from app.schemas.review import (
    MessageResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from app.services import reviews as review_service
from app.services.access import authorize_operation
from app.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or movie not found"},
    },
)


# =============================================================================
# Movie Review Endpoints
# =============================================================================


@router.get(
    "/reviews/movie/{movie_id}",
    response_model=list[ReviewResponse],
    summary="List reviews for a movie",
    description="Get all reviews of a movie, newest first.",
)
@router.get(
    "/movies/{movie_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews for a movie",
    description="Get all reviews of a movie, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_movie_reviews(
    request: Request,
    movie_id: int,
    db: DbSession,
) -> list[ReviewResponse]:
    """
    List all reviews for a specific movie.

    Each review carries the reviewer's id and username only.

    Raises:
        NotFoundError: 404 if the movie does not exist
    """
    reviews = review_service.list_movie_reviews(db, movie_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review",
    description="Get a specific review by ID.",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    db: DbSession,
) -> ReviewResponse:
    review = review_service.get_review(db, review_id)
    return ReviewResponse.model_validate(review)


@router.post(
    "/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a review for a movie. Requires authentication. One review per movie per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    review_data: ReviewCreate,
    db: DbSession,
    caller: CurrentCaller,
) -> ReviewResponse:
    """
    Create a new review.

    The author is always the authenticated caller.

    Raises:
        NotFoundError: 404 if the movie does not exist
        ConflictError: 400 if the caller already reviewed this movie
    """
    authorize_operation(caller, "review.create")

    review = review_service.create_review(
        db,
        movie_id=review_data.movie_id,
        user_id=caller.user_id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Replace the rating and comment of your own review.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    caller: CurrentCaller,
) -> ReviewResponse:
    """
    Update an existing review.

    Only the author may update a review; admins are not exempt.

    Raises:
        NotFoundError: 404 if the review does not exist
        ForbiddenError: 403 if the caller is not the author
    """
    review = review_service.update_review(
        db,
        review_id=review_id,
        caller=caller,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete a review. The author or an admin can delete it.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    caller: CurrentCaller,
) -> MessageResponse:
    """
    Delete a review.

    Raises:
        NotFoundError: 404 if the review does not exist
        ForbiddenError: 403 if the caller is neither the author nor an admin
    """
    review_service.delete_review(db, review_id=review_id, caller=caller)
    return MessageResponse(message="Review deleted successfully")
