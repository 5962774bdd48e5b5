"""
Movie Model

The catalog entry that reviews and watchlists point at.

This file also contains:
- movie_genres: one row per (movie, genre) pair, so genre filters stay
  plain SQL on every backend
- watchlist_items: association table linking users to the movies they
  want to watch

Derived Fields:
===============
average_rating and total_reviews are denormalized from the reviews table.
They are written only by app.services.ratings.recalculate_movie_rating,
never by API clients.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review
    from app.models.user import User


class Genre(str, Enum):
    """Fixed genre vocabulary accepted by the catalog."""
    ACTION = "Action"
    ADVENTURE = "Adventure"
    ANIMATION = "Animation"
    COMEDY = "Comedy"
    CRIME = "Crime"
    DOCUMENTARY = "Documentary"
    DRAMA = "Drama"
    FAMILY = "Family"
    FANTASY = "Fantasy"
    HISTORY = "History"
    HORROR = "Horror"
    MUSIC = "Music"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCIENCE_FICTION = "Science Fiction"
    TV_MOVIE = "TV Movie"
    THRILLER = "Thriller"
    WAR = "War"
    WESTERN = "Western"


# =============================================================================
# Association Tables
# =============================================================================
watchlist_items = Table(
    "watchlist_items",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "movie_id",
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "added_at",
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    ),
    comment="Movies each user has saved to watch later",
)


class MovieGenre(Base):
    """One genre tag of a movie."""

    __tablename__ = "movie_genres"

    id: Mapped[int] = mapped_column(primary_key=True)
    movie_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    movie = relationship("Movie", back_populates="genre_links")

    __table_args__ = (
        UniqueConstraint("movie_id", "name", name="uq_movie_genre"),
    )

    def __repr__(self) -> str:
        return f"MovieGenre(movie_id={self.movie_id}, name='{self.name}')"


class Movie(Base):
    """
    Movie model representing a catalog entry.

    Table: movies

    Fields:
    - title, description, director: Required text
    - release_year / release_month: Release date parts
    - genres: One or more values of Genre (stored in movie_genres)
    - cast: Non-empty list of cast member names
    - poster_url / banner_url / trailer_url: Media links
    - average_rating / total_reviews: Derived from reviews
    - created_by: Admin who added the movie

    Example:
        movie = Movie(
            title="Inception",
            description="A thief who steals corporate secrets...",
            release_year=2010,
            genres=["Action", "Science Fiction"],
            director="Christopher Nolan",
            cast=["Leonardo DiCaprio"],
            poster_url="https://example.com/inception.jpg",
        )
    """

    __tablename__ = "movies"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Movie title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Plot summary"
    )

    release_year: Mapped[int] = mapped_column(
        Integer,
        index=True,
        nullable=False,
        comment="Year of release"
    )

    release_month: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Month of release (1-12)"
    )

    director: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Director name"
    )

    cast: Mapped[list[str]] = mapped_column(
        "cast_members",
        JSON,
        nullable=False,
        default=list,
        comment="Cast member names"
    )

    poster_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Poster image URL"
    )

    banner_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Banner image URL"
    )

    trailer_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Trailer video URL"
    )

    # -------------------------------------------------------------------------
    # Derived Rating Fields
    # -------------------------------------------------------------------------
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
        index=True,
        comment="Mean review rating, 0 when there are no reviews"
    )

    total_reviews: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Number of reviews for this movie"
    )

    created_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Admin who added the movie"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    genre_links: Mapped[list[MovieGenre]] = relationship(
        MovieGenre,
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by=MovieGenre.id,
        lazy="selectin",
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="movie",
        cascade="all, delete-orphan",
    )

    watchers: Mapped[list["User"]] = relationship(
        "User",
        secondary=watchlist_items,
        back_populates="watchlist",
    )

    # -------------------------------------------------------------------------
    # Genre Names
    # -------------------------------------------------------------------------
    @property
    def genres(self) -> list[str]:
        return [link.name for link in self.genre_links]

    @genres.setter
    def genres(self, names: list[str]) -> None:
        # Keep rows for genres that stay so the unique constraint never sees
        # a delete and re-insert of the same pair in one flush
        wanted = list(dict.fromkeys(
            name.value if isinstance(name, Genre) else name for name in names
        ))
        kept = [link for link in self.genre_links if link.name in wanted]
        kept_names = {link.name for link in kept}
        self.genre_links = kept + [
            MovieGenre(name=name) for name in wanted if name not in kept_names
        ]

    def __repr__(self) -> str:
        return f"Movie(id={self.id}, title='{self.title}', release_year={self.release_year})"
