"""
Reviews Service

Business logic for movie reviews, kept separate from HTTP handling so the
same rules apply wherever reviews are written.

Business Rules:
- A review needs an existing movie and a 1-5 integer rating with a
  non-empty comment (stored trimmed)
- One review per user per movie
- Only the author updates a review (rating and comment only)
- The author or an admin deletes a review
- Every successful create/update/delete recalculates the movie's rating
  aggregates before returning

Validation and permission checks all run before the first write, so a
rejected request leaves the review and the movie aggregates untouched.
A failed recalculation after a committed write surfaces as StoreError;
the review write is kept and the next recalculation repairs the movie.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Movie
from app.models.review import Review
from app.services.access import Caller, authorize_operation
from app.services.ratings import recalculate_movie_rating

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


# =============================================================================
# Validation
# =============================================================================


def validate_rating(rating: object) -> int:
    """Accept only integers (not bools) between 1 and 5."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("Rating must be an integer between 1 and 5")
    return rating


def validate_comment(comment: object) -> str:
    """Return the trimmed comment, rejecting empty or whitespace-only text."""
    if not isinstance(comment, str) or not comment.strip():
        raise ValidationError("Comment cannot be empty")
    return comment.strip()


# =============================================================================
# Lookups
# =============================================================================


def get_review(db: Session, review_id: int) -> Review:
    """Get a review by ID with user and movie loaded, or raise NotFoundError."""
    stmt = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.movie))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFoundError("Review not found")
    return review


def get_movie(db: Session, movie_id: int) -> Movie:
    movie = db.get(Movie, movie_id)
    if movie is None:
        raise NotFoundError("Movie not found")
    return movie


# =============================================================================
# Mutations
# =============================================================================


def create_review(
    db: Session,
    movie_id: int,
    user_id: int,
    rating: int,
    comment: str,
) -> Review:
    """
    Create a review and refresh the movie's rating aggregates.

    Raises:
        ValidationError: Rating out of range or empty comment
        NotFoundError: Movie does not exist
        ConflictError: The user already reviewed this movie
    """
    rating = validate_rating(rating)
    comment = validate_comment(comment)
    get_movie(db, movie_id)

    existing_stmt = select(Review.id).where(
        Review.movie_id == movie_id,
        Review.user_id == user_id,
    )
    if db.execute(existing_stmt).first() is not None:
        raise ConflictError("You have already reviewed this movie")

    review = Review(
        movie_id=movie_id,
        user_id=user_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent request inserted the same (movie, user) pair first
        db.rollback()
        raise ConflictError("You have already reviewed this movie") from exc

    logger.info(f"Review {review.id} created by user {user_id} for movie {movie_id}")

    recalculate_movie_rating(db, movie_id)
    return get_review(db, review.id)


def update_review(
    db: Session,
    review_id: int,
    caller: Caller,
    rating: int,
    comment: str,
) -> Review:
    """
    Overwrite the rating and comment of the caller's own review.

    The movie and user references are never changed.

    Raises:
        ValidationError: Rating out of range or empty comment
        NotFoundError: Review does not exist
        ForbiddenError: Caller is not the author
    """
    rating = validate_rating(rating)
    comment = validate_comment(comment)
    review = get_review(db, review_id)

    authorize_operation(
        caller,
        "review.update",
        owner_id=review.user_id,
        detail="Not authorized to update this review",
    )

    review.rating = rating
    review.comment = comment
    review.updated_at = datetime.now(UTC)
    db.commit()

    logger.info(f"Review {review_id} updated by user {caller.user_id}")

    recalculate_movie_rating(db, review.movie_id)
    return get_review(db, review_id)


def delete_review(db: Session, review_id: int, caller: Caller) -> None:
    """
    Delete a review as its author or as an admin.

    Raises:
        NotFoundError: Review does not exist
        ForbiddenError: Caller is neither the author nor an admin
    """
    review = get_review(db, review_id)

    authorize_operation(
        caller,
        "review.delete",
        owner_id=review.user_id,
        detail="Not authorized to delete this review",
    )

    movie_id = review.movie_id
    db.delete(review)
    db.commit()

    logger.info(
        f"Review {review_id} deleted by user {caller.user_id} "
        f"({caller.role.value})"
    )

    recalculate_movie_rating(db, movie_id)


# =============================================================================
# Queries
# =============================================================================


def list_movie_reviews(db: Session, movie_id: int) -> Sequence[Review]:
    """Reviews of a movie, newest first, with the reviewing user loaded."""
    get_movie(db, movie_id)

    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.movie_id == movie_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return db.execute(stmt).scalars().all()


def list_user_reviews(db: Session, user_id: int) -> Sequence[Review]:
    """Reviews written by a user, newest first, with the movie loaded."""
    stmt = (
        select(Review)
        .options(selectinload(Review.movie))
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return db.execute(stmt).scalars().all()


def count_user_reviews(db: Session, user_id: int) -> int:
    stmt = select(func.count()).select_from(Review).where(Review.user_id == user_id)
    return db.execute(stmt).scalar() or 0
