"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating
- XxxResponse: Fields returned in API responses
"""

# Import all schemas for easy access
from app.schemas.movie import (
    MovieBase,
    MovieCreate,
    MovieListResponse,
    MovieResponse,
    MovieUpdate,
)
from app.schemas.review import (
    MessageResponse,
    MovieSummary,
    ReviewAuthor,
    ReviewBase,
    ReviewCount,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithMovie,
)
from app.schemas.user import (
    AdminUserUpdate,
    PasswordChange,
    ProfilePictureUpdate,
    ProfileUpdate,
    RoleUpdate,
    TokenResponse,
    UserCreate,
    UserResponse,
    WatchlistChangeResponse,
)

__all__ = [
    # Movie schemas
    "MovieBase",
    "MovieCreate",
    "MovieUpdate",
    "MovieResponse",
    "MovieListResponse",
    # Review schemas
    "ReviewBase",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewWithMovie",
    "ReviewAuthor",
    "MovieSummary",
    "ReviewCount",
    "MessageResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
    "ProfileUpdate",
    "AdminUserUpdate",
    "RoleUpdate",
    "PasswordChange",
    "ProfilePictureUpdate",
    "TokenResponse",
    "WatchlistChangeResponse",
]
