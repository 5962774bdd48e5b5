"""
Ratings Service

Maintains the denormalized rating fields on the Movie model:
- average_rating: The mean of all review ratings (0 when there are none)
- total_reviews: Total number of reviews

These fields are recalculated after every review create, update and
delete. The recalculation is never incremental: it always aggregates the
full review set of the movie and overwrites both fields, so running it
twice in a row yields the same values and a stale movie heals on the next
call. Concurrent recalculations for the same movie race, last writer wins,
and both converge on the true value.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, StoreError
from app.models import Movie
from app.models.review import Review

logger = logging.getLogger(__name__)


def compute_rating_stats(db: Session, movie_id: int) -> tuple[float, int]:
    """
    Aggregate the current review set of a movie.

    Returns:
        (average, count); average is exactly 0.0 when count is 0
    """
    stmt = select(
        func.avg(Review.rating),
        func.count(Review.id),
    ).where(Review.movie_id == movie_id)

    avg_rating, review_count = db.execute(stmt).one()
    if not review_count:
        return 0.0, 0
    return float(avg_rating), int(review_count)


def recalculate_movie_rating(db: Session, movie_id: int) -> tuple[float, int]:
    """
    Recalculate and store a movie's rating aggregations.

    Called after any review create/update/delete operation to keep
    the denormalized fields in sync.

    Args:
        db: Database session
        movie_id: ID of the movie to update

    Returns:
        The (average_rating, total_reviews) pair that was written

    Raises:
        NotFoundError: If the movie no longer exists
        StoreError: If the database fails during the recalculation

    Note:
        This function commits the changes to the database.
    """
    try:
        average, count = compute_rating_stats(db, movie_id)

        movie = db.get(Movie, movie_id)
        if movie is None:
            raise NotFoundError(f"Movie with id {movie_id} not found")

        # Written unconditionally, even when nothing changed
        movie.average_rating = average
        movie.total_reviews = count
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Rating recalculation failed for movie {movie_id}: {exc}")
        raise StoreError() from exc

    logger.debug(
        f"Recalculated rating for movie {movie_id}: "
        f"average={average}, total={count}"
    )
    return average, count


def recalculate_all_movie_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all movies.

    Useful for data migrations or healing movies left stale by a failed
    recalculation.

    Returns:
        Number of movies updated
    """
    movie_ids = db.execute(select(Movie.id)).scalars().all()

    for movie_id in movie_ids:
        recalculate_movie_rating(db, movie_id)

    return len(movie_ids)
