"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Common Dependency Patterns used here:
- Database sessions (per-request)
- Authentication (bearer token -> current user -> Caller)
- Capability checks (admin-only routes)
- Pagination and movie filter parameters
"""

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.exceptions import ForbiddenError
from app.models.movie import Genre
from app.services.access import Capability, Caller, authorize, require_authenticated

if TYPE_CHECKING:
    from app.models.user import User

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_movies(db: Session = Depends(get_db)):
#
# You can write:
#   def list_movies(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed for user-friendliness)
    - per_page: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=20,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 20, 50],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """
        Calculate the number of records to skip.

        Page 1 -> skip 0 items
        Page 2 -> skip per_page items
        """
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Movie Search Filters
# =============================================================================
class MovieSearchParams:
    """
    Search and filter parameters for the movie list.

    Usage:
        GET /api/v1/movies?genre=Drama&search=godfather
    """

    def __init__(
        self,
        genre: Genre | None = Query(
            default=None,
            description="Only movies tagged with this genre",
            examples=["Drama", "Science Fiction"],
        ),
        search: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Case-insensitive match on title or description",
            examples=["godfather", "space"],
        ),
    ) -> None:
        self.genre = genre
        self.search = search

    @property
    def has_filters(self) -> bool:
        """Check if any filters are applied."""
        return any([self.genre, self.search])


MovieFilters = Annotated[MovieSearchParams, Depends()]


# =============================================================================
# JWT Authentication
# =============================================================================
# auto_error=False lets the access control layer produce the 401 itself,
# so every unauthenticated request gets the same error body.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=False,
)


def get_optional_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    """
    Get current user if authenticated, None otherwise.

    Returns None for a missing, malformed or expired token and for a
    token whose user no longer exists.
    """
    if not token:
        return None

    from app.models.user import User
    from app.services.security import verify_token_type

    payload = verify_token_type(token, "access")
    if payload is None:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        user_pk = int(user_id)
    except (TypeError, ValueError):
        return None

    stmt = select(User).where(User.id == user_pk)
    return db.execute(stmt).scalar_one_or_none()


def get_current_user(
    user=Depends(get_optional_current_user),
):
    """
    Require an authenticated user.

    Raises:
        UnauthorizedError: 401 if the token is missing or invalid
    """
    require_authenticated(Caller.from_user(user) if user is not None else None)
    return user


def get_current_active_user(
    current_user=Depends(get_current_user),
):
    """
    Verify the current user is active.

    Raises:
        ForbiddenError: 403 if the account is inactive
    """
    if not current_user.is_active:
        raise ForbiddenError("Account is inactive")
    return current_user


def get_current_caller(
    current_user=Depends(get_current_active_user),
) -> Caller:
    """The (user id, role) identity of the authenticated user."""
    return Caller.from_user(current_user)


def get_current_admin(
    current_user=Depends(get_current_active_user),
):
    """
    Verify the current user holds the admin role.

    Use this dependency for catalog management and user administration.

    Raises:
        ForbiddenError: 403 if the user is not an admin
    """
    authorize(
        Caller.from_user(current_user),
        Capability.ADMIN,
        detail="Admin privileges required",
    )
    return current_user


# Type aliases for cleaner route signatures
CurrentUser = Annotated["User", Depends(get_current_user)]
ActiveUser = Annotated["User", Depends(get_current_active_user)]
AdminUser = Annotated["User", Depends(get_current_admin)]
CurrentCaller = Annotated[Caller, Depends(get_current_caller)]
OptionalUser = Annotated["User | None", Depends(get_optional_current_user)]

__all__ = [
    "ActiveUser",
    "AdminUser",
    "CurrentCaller",
    "CurrentUser",
    "DbSession",
    "MovieFilters",
    "OptionalUser",
    "Pagination",
]
