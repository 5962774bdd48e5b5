"""
Access Control Service

One place that decides whether a caller may perform an operation.

Every mutation declares a capability instead of writing its own inline
ownership/role conditionals:

    authenticated   any caller with a valid identity
    owner           the caller owns the resource
    admin           the caller has the admin role
    owner_or_admin  the caller owns the resource or is an admin
    self            authenticated, acting on the caller's own account only

Self-scoped operations never take a user id from the request; routers
resolve them against the authenticated caller.

Usage:
    from app.services.access import Capability, authorize

    authorize(caller, Capability.OWNER_OR_ADMIN, owner_id=review.user_id)
"""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from app.exceptions import ForbiddenError, UnauthorizedError
from app.models.user import UserRole

if TYPE_CHECKING:
    from app.models.user import User


class Capability(str, Enum):
    """Requirement a caller must satisfy for an operation."""
    AUTHENTICATED = "authenticated"
    OWNER = "owner"
    ADMIN = "admin"
    OWNER_OR_ADMIN = "owner_or_admin"
    SELF = "self"


@dataclass(frozen=True)
class Caller:
    """Identity of the user making a request: (user id, role)."""

    user_id: int
    role: UserRole = UserRole.USER

    @classmethod
    def from_user(cls, user: "User") -> "Caller":
        return cls(user_id=user.id, role=UserRole(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# Operation -> required capability
OPERATION_CAPABILITIES: dict[str, Capability] = {
    "review.create": Capability.AUTHENTICATED,
    "review.update": Capability.OWNER,
    "review.delete": Capability.OWNER_OR_ADMIN,
    "movie.create": Capability.ADMIN,
    "movie.update": Capability.ADMIN,
    "movie.delete": Capability.ADMIN,
    "user.list": Capability.ADMIN,
    "user.read": Capability.ADMIN,
    "user.update": Capability.ADMIN,
    "user.change_role": Capability.ADMIN,
    "profile.read": Capability.SELF,
    "profile.update": Capability.SELF,
    "profile.password": Capability.SELF,
    "profile.reviews": Capability.SELF,
    "watchlist.read": Capability.SELF,
    "watchlist.add": Capability.SELF,
    "watchlist.remove": Capability.SELF,
}


def require_authenticated(caller: Caller | None) -> Caller:
    """
    Ensure a caller identity has been established.

    Raises:
        UnauthorizedError: If there is no caller
    """
    if caller is None:
        raise UnauthorizedError()
    return caller


def require_owner_or_role(
    caller: Caller | None,
    owner_id: int | None,
    allowed_roles: Collection[UserRole] = (),
    detail: str | None = None,
) -> Caller:
    """
    Ensure the caller owns the resource or holds one of the allowed roles.

    Args:
        caller: Authenticated caller
        owner_id: User id owning the resource (None when nobody owns it)
        allowed_roles: Roles that bypass the ownership check
        detail: Message for the ForbiddenError

    Raises:
        UnauthorizedError: If there is no caller
        ForbiddenError: If neither condition holds
    """
    caller = require_authenticated(caller)
    is_owner = owner_id is not None and caller.user_id == owner_id
    if not is_owner and caller.role not in allowed_roles:
        raise ForbiddenError(detail)
    return caller


def authorize(
    caller: Caller | None,
    capability: Capability,
    owner_id: int | None = None,
    detail: str | None = None,
) -> Caller:
    """Apply a capability requirement to a caller."""
    if capability in (Capability.AUTHENTICATED, Capability.SELF):
        return require_authenticated(caller)
    if capability == Capability.OWNER:
        return require_owner_or_role(caller, owner_id, (), detail)
    if capability == Capability.ADMIN:
        return require_owner_or_role(caller, None, (UserRole.ADMIN,), detail)
    if capability == Capability.OWNER_OR_ADMIN:
        return require_owner_or_role(caller, owner_id, (UserRole.ADMIN,), detail)
    raise ValueError(f"Unknown capability: {capability}")


def authorize_operation(
    caller: Caller | None,
    operation: str,
    owner_id: int | None = None,
    detail: str | None = None,
) -> Caller:
    """Look up the capability declared for an operation and apply it."""
    return authorize(caller, OPERATION_CAPABILITIES[operation], owner_id, detail)
