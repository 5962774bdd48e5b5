"""
Tests for the Reviews Service

Exercises the review rules directly against the database, without HTTP.

Tests cover:
- Input validation happens before any write
- One review per user per movie
- Owner-only update, owner-or-admin delete
- Movie aggregates after every successful write
- Listing and counting
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.models import Movie
from app.models.review import Review
from app.models.user import User
from app.services.access import Caller
from app.services.reviews import (
    count_user_reviews,
    create_review,
    delete_review,
    list_movie_reviews,
    list_user_reviews,
    update_review,
    validate_comment,
    validate_rating,
)


def aggregates(db: Session, movie: Movie) -> tuple[float, int]:
    db.refresh(movie)
    return movie.average_rating, movie.total_reviews


def review_count(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Review)).scalar()


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """Tests for rating and comment validation."""

    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_valid_ratings(self, rating):
        assert validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6, -1, 3.5, "4", None, True])
    def test_invalid_ratings(self, rating):
        with pytest.raises(ValidationError):
            validate_rating(rating)

    def test_comment_is_trimmed(self):
        assert validate_comment("  Great film  ") == "Great film"

    @pytest.mark.parametrize("comment", ["", "   ", "\n\t", None])
    def test_empty_comments(self, comment):
        with pytest.raises(ValidationError):
            validate_comment(comment)


# =============================================================================
# Create
# =============================================================================


class TestCreateReview:
    """Tests for create_review."""

    def test_create_updates_aggregates(
        self,
        db_session: Session,
        sample_movie: Movie,
        sample_user: User,
    ):
        review = create_review(db_session, sample_movie.id, sample_user.id, 4, "  Loved it ")

        assert review.id is not None
        assert review.comment == "Loved it"
        assert review.user.username == sample_user.username
        assert aggregates(db_session, sample_movie) == (4.0, 1)

    def test_missing_movie(self, db_session: Session, sample_user: User):
        with pytest.raises(NotFoundError):
            create_review(db_session, 99999, sample_user.id, 4, "Loved it")

    def test_duplicate_rejected_without_side_effects(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        sample_user: User,
    ):
        with pytest.raises(ConflictError):
            create_review(db_session, sample_movie.id, sample_user.id, 1, "Changed my mind")

        assert review_count(db_session) == 1
        assert aggregates(db_session, sample_movie) == (4.0, 1)

    def test_unique_constraint_race_is_conflict(self):
        """A duplicate inserted between the pre-check and the commit."""
        db = MagicMock()
        db.execute.return_value.first.return_value = None
        db.commit.side_effect = IntegrityError(
            "INSERT INTO reviews", {}, Exception("UNIQUE constraint failed")
        )

        with patch("app.services.reviews.recalculate_movie_rating") as recalc:
            with pytest.raises(ConflictError):
                create_review(db, 1, 2, 4, "Second attempt")

        db.add.assert_called_once()
        db.rollback.assert_called_once()
        recalc.assert_not_called()

    def test_invalid_rating_rejected_before_write(
        self,
        db_session: Session,
        sample_movie: Movie,
        sample_user: User,
    ):
        with patch("app.services.reviews.recalculate_movie_rating") as recalc:
            with pytest.raises(ValidationError):
                create_review(db_session, sample_movie.id, sample_user.id, 7, "Too good")

        recalc.assert_not_called()
        assert review_count(db_session) == 0

    def test_recalculation_failure_keeps_review(
        self,
        db_session: Session,
        sample_movie: Movie,
        sample_user: User,
    ):
        with patch(
            "app.services.reviews.recalculate_movie_rating",
            side_effect=StoreError(),
        ):
            with pytest.raises(StoreError):
                create_review(db_session, sample_movie.id, sample_user.id, 5, "Stays")

        assert review_count(db_session) == 1


# =============================================================================
# Update
# =============================================================================


class TestUpdateReview:
    """Tests for update_review."""

    def test_owner_updates(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        sample_user: User,
    ):
        updated = update_review(
            db_session, sample_review.id, Caller.from_user(sample_user), 2, "Rewatched it"
        )

        assert updated.rating == 2
        assert updated.comment == "Rewatched it"
        assert updated.movie_id == sample_movie.id
        assert updated.user_id == sample_user.id
        assert aggregates(db_session, sample_movie) == (2.0, 1)

    def test_other_user_forbidden(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        second_user: User,
    ):
        with pytest.raises(ForbiddenError):
            update_review(db_session, sample_review.id, Caller.from_user(second_user), 1, "Mine now")

        db_session.refresh(sample_review)
        assert sample_review.rating == 4
        assert aggregates(db_session, sample_movie) == (4.0, 1)

    def test_admin_cannot_edit_others_review(
        self,
        db_session: Session,
        sample_review: Review,
        admin_user: User,
    ):
        with pytest.raises(ForbiddenError):
            update_review(db_session, sample_review.id, Caller.from_user(admin_user), 1, "Edited")

    def test_missing_review(self, db_session: Session, sample_user: User):
        with pytest.raises(NotFoundError):
            update_review(db_session, 99999, Caller.from_user(sample_user), 3, "Nope")

    def test_validation_before_lookup(self, db_session: Session, sample_user: User):
        with pytest.raises(ValidationError):
            update_review(db_session, 99999, Caller.from_user(sample_user), 3, "   ")


# =============================================================================
# Delete
# =============================================================================


class TestDeleteReview:
    """Tests for delete_review."""

    def test_owner_deletes_last_review(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        sample_user: User,
    ):
        delete_review(db_session, sample_review.id, Caller.from_user(sample_user))

        assert review_count(db_session) == 0
        assert aggregates(db_session, sample_movie) == (0, 0)

    def test_admin_deletes(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        admin_user: User,
    ):
        delete_review(db_session, sample_review.id, Caller.from_user(admin_user))

        assert review_count(db_session) == 0

    def test_other_user_forbidden(
        self,
        db_session: Session,
        sample_review: Review,
        sample_movie: Movie,
        second_user: User,
    ):
        with pytest.raises(ForbiddenError):
            delete_review(db_session, sample_review.id, Caller.from_user(second_user))

        assert review_count(db_session) == 1
        assert aggregates(db_session, sample_movie) == (4.0, 1)

    def test_missing_review(self, db_session: Session, admin_user: User):
        with pytest.raises(NotFoundError):
            delete_review(db_session, 99999, Caller.from_user(admin_user))


# =============================================================================
# Full Lifecycle
# =============================================================================


class TestAggregateLifecycle:
    """Aggregates across a sequence of writes by several users."""

    def test_lifecycle(
        self,
        db_session: Session,
        sample_movie: Movie,
        sample_user: User,
        second_user: User,
        admin_user: User,
    ):
        user_a = Caller.from_user(sample_user)
        admin = Caller.from_user(admin_user)

        review_a = create_review(db_session, sample_movie.id, sample_user.id, 4, "Good")
        assert aggregates(db_session, sample_movie) == (4.0, 1)

        review_b = create_review(db_session, sample_movie.id, second_user.id, 2, "Meh")
        assert aggregates(db_session, sample_movie) == (3.0, 2)

        update_review(db_session, review_a.id, user_a, 5, "Great on rewatch")
        assert aggregates(db_session, sample_movie) == (3.5, 2)

        delete_review(db_session, review_b.id, admin)
        assert aggregates(db_session, sample_movie) == (5.0, 1)

        with pytest.raises(ConflictError):
            create_review(db_session, sample_movie.id, sample_user.id, 1, "Again")
        assert aggregates(db_session, sample_movie) == (5.0, 1)


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    """Tests for listing and counting."""

    def test_list_movie_reviews_newest_first(
        self,
        db_session: Session,
        sample_movie: Movie,
        sample_user: User,
        second_user: User,
    ):
        first = create_review(db_session, sample_movie.id, sample_user.id, 4, "First")
        second = create_review(db_session, sample_movie.id, second_user.id, 3, "Second")

        reviews = list_movie_reviews(db_session, sample_movie.id)

        assert [r.id for r in reviews] == [second.id, first.id]

    def test_list_movie_reviews_missing_movie(self, db_session: Session):
        with pytest.raises(NotFoundError):
            list_movie_reviews(db_session, 99999)

    def test_list_and_count_user_reviews(
        self,
        db_session: Session,
        sample_movie: Movie,
        second_movie: Movie,
        sample_user: User,
        second_user: User,
    ):
        create_review(db_session, sample_movie.id, sample_user.id, 4, "One")
        create_review(db_session, second_movie.id, sample_user.id, 5, "Two")
        create_review(db_session, sample_movie.id, second_user.id, 1, "Other")

        reviews = list_user_reviews(db_session, sample_user.id)

        assert {r.movie.title for r in reviews} == {"Inception", "The Godfather"}
        assert count_user_reviews(db_session, sample_user.id) == 2
        assert count_user_reviews(db_session, second_user.id) == 1
