"""
SQLAlchemy Models Package

This package contains all database models for the Movie Reviews API.

Model Relationships:
- Movie <-> Review: One-to-Many (a movie collects many reviews)
- User <-> Review: One-to-Many (a user writes at most one review per movie)
- User <-> Movie: Many-to-Many through watchlist_items

Import all models here to:
1. Make them available as: from app.models import Movie, Review, User
2. Ensure Alembic discovers them for migrations
"""

# The order matters: User references the watchlist table defined with Movie
from app.models.movie import Genre, Movie, MovieGenre, watchlist_items
from app.models.user import User, UserRole
from app.models.review import Review

__all__ = [
    "Genre",
    "Movie",
    "MovieGenre",
    "watchlist_items",
    "User",
    "UserRole",
    "Review",
]
