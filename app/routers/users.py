"""
Users Router

Profile, watchlist and user administration endpoints.

Endpoints:
- GET /users/me - Current user's profile (same as /auth/me)
- PUT /users/me - Update username and email
- PUT /users/me/password - Change password
- PUT /users/me/profile-picture - Set profile picture URL
- GET /users/me/reviews - Current user's reviews with movie summaries
- GET /users/me/reviews/count - Number of reviews written
- GET /users/me/watchlist - Movies on the watchlist
- POST /users/me/watchlist/{movie_id} - Add a movie to the watchlist
- DELETE /users/me/watchlist/{movie_id} - Remove a movie from the watchlist
- GET /users - List users (admin)
- GET /users/{user_id} - Get a user (admin)
- PUT /users/{user_id} - Update a user (admin)
- PUT /users/{user_id}/role - Change a user's role (admin)

Business Rules:
- /users/me endpoints act on the authenticated caller only; they never
  take a user id from the request
- Password change requires current password verification
- Usernames and emails stay unique across accounts
"""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import select

from app.config import get_settings
from app.dependencies import ActiveUser, AdminUser, DbSession
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.movie import Movie
from app.models.user import User
from app.schemas.movie import MovieResponse
from app.schemas.review import MessageResponse, ReviewCount, ReviewWithMovie
from app.schemas.user import (
    AdminUserUpdate,
    PasswordChange,
    ProfilePictureUpdate,
    ProfileUpdate,
    RoleUpdate,
    UserResponse,
    WatchlistChangeResponse,
)
from app.services import reviews as review_service
from app.services.access import Caller, authorize_operation
from app.services.rate_limiter import limiter
from app.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================


def get_user_or_404(db: DbSession, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def ensure_unique_identity(
    db: DbSession,
    user_id: int,
    username: str | None,
    email: str | None,
) -> None:
    """
    Raise ConflictError if another account already uses the username or email.

    The account being edited (user_id) is ignored.
    """
    if email is not None:
        stmt = select(User.id).where(User.email == email, User.id != user_id)
        if db.execute(stmt).first() is not None:
            raise ConflictError("Email is already in use")

    if username is not None:
        stmt = select(User.id).where(User.username == username, User.id != user_id)
        if db.execute(stmt).first() is not None:
            raise ConflictError("Username is already taken")


# =============================================================================
# Current User Endpoints (/users/me/...)
# =============================================================================


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
    description="Get the authenticated user's full profile.",
)
@limiter.limit(settings.rate_limit_default)
def get_current_user_profile(
    request: Request,
    current_user: ActiveUser,
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    This is equivalent to /auth/me but placed here for REST consistency.
    """
    authorize_operation(Caller.from_user(current_user), "profile.read")
    return UserResponse.model_validate(current_user)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update current user profile",
    description="Change the authenticated user's username and email.",
)
@limiter.limit(settings.rate_limit_write)
def update_current_user_profile(
    request: Request,
    profile_data: ProfileUpdate,
    db: DbSession,
    current_user: ActiveUser,
) -> UserResponse:
    """
    Update the current user's username and email.

    Both fields are required and must not belong to another account.
    """
    authorize_operation(Caller.from_user(current_user), "profile.update")

    ensure_unique_identity(
        db,
        current_user.id,
        username=profile_data.username,
        email=profile_data.email,
    )

    current_user.username = profile_data.username
    current_user.email = profile_data.email

    db.commit()
    db.refresh(current_user)

    logger.info(f"User {current_user.id} updated their profile")

    return UserResponse.model_validate(current_user)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    summary="Change password",
    description="Change the current user's password. Requires current password verification.",
)
@limiter.limit("5/minute")  # Strict rate limit for password changes
def change_password(
    request: Request,
    password_data: PasswordChange,
    db: DbSession,
    current_user: ActiveUser,
) -> MessageResponse:
    """
    Change the current user's password.

    Requirements:
    - Must provide current password for verification
    - New password must be at least 6 characters
    """
    authorize_operation(Caller.from_user(current_user), "profile.password")

    if not verify_password(password_data.current_password, current_user.hashed_password):
        raise ValidationError("Current password is incorrect")

    current_user.hashed_password = hash_password(password_data.new_password)
    db.commit()

    logger.info(f"User {current_user.id} changed their password")

    return MessageResponse(message="Password updated successfully")


@router.put(
    "/me/profile-picture",
    response_model=UserResponse,
    summary="Set profile picture",
    description="Set the current user's profile picture to an http(s) URL.",
)
@limiter.limit(settings.rate_limit_write)
def update_profile_picture(
    request: Request,
    picture_data: ProfilePictureUpdate,
    db: DbSession,
    current_user: ActiveUser,
) -> UserResponse:
    authorize_operation(Caller.from_user(current_user), "profile.update")

    current_user.profile_picture = picture_data.profile_picture
    db.commit()
    db.refresh(current_user)

    return UserResponse.model_validate(current_user)


@router.get(
    "/me/reviews",
    response_model=list[ReviewWithMovie],
    summary="Get current user's reviews",
    description="Get all reviews written by the authenticated user, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def get_current_user_reviews(
    request: Request,
    db: DbSession,
    current_user: ActiveUser,
) -> list[ReviewWithMovie]:
    """Each review includes a summary of the reviewed movie."""
    authorize_operation(Caller.from_user(current_user), "profile.reviews")

    reviews = review_service.list_user_reviews(db, current_user.id)
    return [ReviewWithMovie.model_validate(r) for r in reviews]


@router.get(
    "/me/reviews/count",
    response_model=ReviewCount,
    summary="Count current user's reviews",
)
@limiter.limit(settings.rate_limit_default)
def count_current_user_reviews(
    request: Request,
    db: DbSession,
    current_user: ActiveUser,
) -> ReviewCount:
    authorize_operation(Caller.from_user(current_user), "profile.reviews")

    return ReviewCount(count=review_service.count_user_reviews(db, current_user.id))


# =============================================================================
# Watchlist Endpoints
# =============================================================================


@router.get(
    "/me/watchlist",
    response_model=list[MovieResponse],
    summary="Get watchlist",
    description="Movies the authenticated user saved to watch later.",
)
@limiter.limit(settings.rate_limit_default)
def get_watchlist(
    request: Request,
    current_user: ActiveUser,
) -> list[MovieResponse]:
    authorize_operation(Caller.from_user(current_user), "watchlist.read")

    return [MovieResponse.model_validate(movie) for movie in current_user.watchlist]


@router.post(
    "/me/watchlist/{movie_id}",
    response_model=WatchlistChangeResponse,
    summary="Add to watchlist",
)
@limiter.limit(settings.rate_limit_write)
def add_to_watchlist(
    request: Request,
    movie_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> WatchlistChangeResponse:
    """
    Add a movie to the watchlist.

    Raises:
        NotFoundError: 404 if the movie does not exist
        ConflictError: 400 if the movie is already on the watchlist
    """
    authorize_operation(Caller.from_user(current_user), "watchlist.add")

    movie = db.get(Movie, movie_id)
    if movie is None:
        raise NotFoundError("Movie not found")

    if movie in current_user.watchlist:
        raise ConflictError("Movie already in watchlist")

    current_user.watchlist.append(movie)
    db.commit()

    return WatchlistChangeResponse(message="Movie added to watchlist", movie_id=movie_id)


@router.delete(
    "/me/watchlist/{movie_id}",
    response_model=WatchlistChangeResponse,
    summary="Remove from watchlist",
    description="Remove a movie from the watchlist. Removing a movie that is not on it is a no-op.",
)
@limiter.limit(settings.rate_limit_write)
def remove_from_watchlist(
    request: Request,
    movie_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> WatchlistChangeResponse:
    authorize_operation(Caller.from_user(current_user), "watchlist.remove")

    current_user.watchlist = [
        movie for movie in current_user.watchlist if movie.id != movie_id
    ]
    db.commit()

    return WatchlistChangeResponse(message="Movie removed from watchlist", movie_id=movie_id)


# =============================================================================
# Admin Endpoints
# =============================================================================


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="All accounts, newest first. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    admin: AdminUser,
) -> list[UserResponse]:
    authorize_operation(Caller.from_user(admin), "user.list")

    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    users = db.execute(stmt).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
    description="Get any account by ID. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_default)
def get_user(
    request: Request,
    user_id: int,
    db: DbSession,
    admin: AdminUser,
) -> UserResponse:
    authorize_operation(Caller.from_user(admin), "user.read")

    return UserResponse.model_validate(get_user_or_404(db, user_id))


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
    description="Partially update another account. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_write)
def update_user(
    request: Request,
    user_id: int,
    user_data: AdminUserUpdate,
    db: DbSession,
    admin: AdminUser,
) -> UserResponse:
    authorize_operation(Caller.from_user(admin), "user.update")

    user = get_user_or_404(db, user_id)

    update_data = user_data.model_dump(exclude_unset=True, exclude_none=True)
    ensure_unique_identity(
        db,
        user.id,
        username=update_data.get("username"),
        email=update_data.get("email"),
    )

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info(f"User {user_id} updated by admin {admin.id}: {sorted(update_data)}")

    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Change a user's role",
    description="Set the role of an account to user or admin. Requires the admin role.",
)
@limiter.limit(settings.rate_limit_write)
def update_user_role(
    request: Request,
    user_id: int,
    role_data: RoleUpdate,
    db: DbSession,
    admin: AdminUser,
) -> UserResponse:
    authorize_operation(Caller.from_user(admin), "user.change_role")

    user = get_user_or_404(db, user_id)
    user.role = role_data.role.value

    db.commit()
    db.refresh(user)

    logger.info(f"User {user_id} role set to {user.role} by admin {admin.id}")

    return UserResponse.model_validate(user)
