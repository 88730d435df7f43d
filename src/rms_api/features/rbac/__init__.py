"""Authorization service bound to the SQL store."""

from .schemas import RoleSummary
from .service import (
    AuthorizationService,
    describe_user_roles,
    has_any_role,
    has_permission,
    is_admin,
    is_team_member,
    require_permission,
)

__all__ = [
    "AuthorizationService",
    "RoleSummary",
    "describe_user_roles",
    "has_any_role",
    "has_permission",
    "is_admin",
    "is_team_member",
    "require_permission",
]
