"""
Authentication Router

Handles user authentication endpoints:
- Registration (username/email/password)
- Login (email or username + password -> JWT access token)
- Get current user (from JWT token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Access tokens carry the user id in "sub" and expire after
  settings.access_token_expire_minutes
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import or_, select

from app.config import get_settings
from app.dependencies import ActiveUser, DbSession
from app.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from app.models.user import User, UserRole
from app.schemas.user import TokenResponse, UserCreate, UserResponse
from app.services.rate_limiter import limiter
from app.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request (validation error or duplicate account)"},
        401: {"description": "Unauthorized"},
    },
)


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account.

    **Password Requirements:**
    - Minimum 6 characters

    **Username Requirements:**
    - 3-30 characters
    - Only letters, numbers, and underscores
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    """
    Register a new user.

    1. Validates username, email and password (handled by Pydantic)
    2. Checks for duplicate email/username
    3. Hashes password with bcrypt
    4. Creates the user with the "user" role
    5. Returns user data (without password)
    """
    stmt = select(User).where(User.email == user_data.email)
    if db.execute(stmt).scalar_one_or_none():
        raise ConflictError("Email already registered")

    stmt = select(User).where(User.username == user_data.username)
    if db.execute(stmt).scalar_one_or_none():
        raise ConflictError("Username already taken")

    user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=UserRole.USER.value,
        is_active=True,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"New user registered: {user.username} ({user.email})")

    return UserResponse.model_validate(user)


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email or username",
    description="""
    Authenticate to receive a JWT access token.

    **Returns:**
    - `access_token`: Token for API authentication
    - `token_type`: Always "bearer"
    - `expires_in`: Token lifetime in seconds

    **Usage:**
    Include the access token in the Authorization header:
    ```
    Authorization: Bearer <access_token>
    ```

    **Note:** The 'username' form field accepts either the email address
    or the username.
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    db: DbSession,
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> TokenResponse:
    """
    Authenticate a user and return an access token.

    Uses OAuth2 password flow (form data with username/password).
    """
    identifier = form_data.username.strip()

    stmt = select(User).where(
        or_(User.email == identifier.lower(), User.username == identifier)
    )
    user = db.execute(stmt).scalar_one_or_none()

    if user is None or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Login failed for {identifier}")
        raise UnauthorizedError("Incorrect email or password")

    if not user.is_active:
        logger.warning(f"Login failed: inactive account {identifier}")
        raise ForbiddenError("Account is inactive")

    access_token = create_access_token({"sub": str(user.id)})

    logger.info(f"User logged in: {user.username}")

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
    )


# -------------------------------------------------------------------------
# Get Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="""
    Get the currently authenticated user's profile.

    Requires a valid access token in the Authorization header:
    ```
    Authorization: Bearer <access_token>
    ```
    """,
)
def get_me(
    current_user: ActiveUser,
) -> UserResponse:
    """
    Return the current authenticated user's profile.

    Uses the ActiveUser dependency which:
    1. Extracts and validates the JWT token
    2. Looks up the user in the database
    3. Verifies the user is active
    """
    return UserResponse.model_validate(current_user)
