"""
User Pydantic Schemas

These schemas define the shape of data for User-related API operations.

Schemas:
- UserCreate: Registration data (username, email, password)
- UserResponse: User data returned by the API (never exposes password)
- ProfileUpdate: The caller's own username and email
- AdminUserUpdate: Account fields an admin may change
- RoleUpdate: Admin role assignment
- PasswordChange: Current and new password
- ProfilePictureUpdate: Profile picture URL
- TokenResponse: Login result

Pydantic v2 Features Used:
- model_config: Configure model behavior
- Field(): Define constraints and metadata
- field_validator: Validate and transform field values
- EmailStr: Built-in email validation
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.config import get_settings
from app.models.user import UserRole

settings = get_settings()

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def _check_username(v: str) -> str:
    v = v.strip()
    if not 3 <= len(v) <= 30:
        raise ValueError("Username must be between 3 and 30 characters")
    if not USERNAME_PATTERN.match(v):
        raise ValueError(
            "Username can only contain letters, numbers, and underscores"
        )
    return v


def _check_password(v: str) -> str:
    if len(v) < settings.min_password_length:
        raise ValueError(
            f"Password must be at least {settings.min_password_length} characters"
        )
    return v


class UserBase(BaseModel):
    """
    Base schema with shared user fields.

    Contains fields common to registration and profile updates.
    """

    username: str = Field(
        ...,
        description="Unique username (3-30 characters, letters, numbers, underscores)",
        examples=["johndoe", "jane_doe123"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["john@example.com"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are stored and compared lower-cased."""
        return v.lower()


class UserCreate(UserBase):
    """
    Schema for user registration.

    New accounts always get the "user" role; admins are created with
    scripts/create_admin.py or promoted by another admin.
    """

    password: str = Field(
        ...,
        max_length=128,
        description="Password (min 6 characters)",
        examples=["secret123"],
    )

    @field_validator("password")
    @classmethod
    def password_must_be_long_enough(cls, v: str) -> str:
        return _check_password(v)


class ProfileUpdate(UserBase):
    """
    Schema for updating the caller's own profile.

    Both username and email are required; each must not belong to
    another account.
    """

    pass


class AdminUserUpdate(BaseModel):
    """
    Schema for an admin editing another account.

    All fields are optional for partial updates.
    """

    username: str | None = Field(default=None, description="New username")
    email: EmailStr | None = Field(default=None, description="New email address")
    is_active: bool | None = Field(
        default=None,
        description="Deactivated accounts cannot use the API",
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str | None) -> str | None:
        return v if v is None else _check_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v if v is None else v.lower()


class RoleUpdate(BaseModel):
    """Schema for assigning a role to a user."""

    role: UserRole = Field(
        ...,
        description="New role: user or admin",
        examples=["admin"],
    )


class PasswordChange(BaseModel):
    """Schema for password change request."""

    current_password: str = Field(
        ...,
        min_length=1,
        description="Current password for verification",
    )

    new_password: str = Field(
        ...,
        max_length=128,
        description="New password (min 6 characters)",
    )

    @field_validator("new_password")
    @classmethod
    def password_must_be_long_enough(cls, v: str) -> str:
        return _check_password(v)


class ProfilePictureUpdate(BaseModel):
    """Schema for setting the caller's profile picture."""

    profile_picture: str = Field(
        ...,
        max_length=2000,
        description="http(s) URL of the picture",
        examples=["https://example.com/avatars/johndoe.png"],
    )

    @field_validator("profile_picture")
    @classmethod
    def must_be_http_url(cls, v: str) -> str:
        v = v.strip()
        if not re.match(r"^https?://[^\s/$.?#][^\s]*$", v, re.IGNORECASE):
            raise ValueError("Profile picture must be an http(s) URL")
        return v


class UserResponse(BaseModel):
    """
    Schema for user responses (what the API returns).

    SECURITY: Never includes password or other internal fields.
    """

    id: int = Field(
        ...,
        description="Unique user identifier",
        examples=[1, 42],
    )

    username: str = Field(
        ...,
        description="Unique username",
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
    )

    role: UserRole = Field(
        ...,
        description="Access role",
    )

    profile_picture: str | None = Field(
        default=None,
        description="URL to the profile picture",
    )

    is_active: bool = Field(
        ...,
        description="Whether the account is active",
    )

    created_at: datetime = Field(
        ...,
        description="When the user registered",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "username": "johndoe",
                "email": "john@example.com",
                "role": "user",
                "profile_picture": None,
                "is_active": True,
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class TokenResponse(BaseModel):
    """
    Schema for the login response.

    Follows the OAuth2 bearer token format.
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 86400,
            }
        },
    )


class WatchlistChangeResponse(BaseModel):
    """Result of adding a movie to or removing it from the watchlist."""

    message: str = Field(..., description="Human readable result")
    movie_id: int = Field(..., description="Movie that was added or removed")
