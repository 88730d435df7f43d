"""Permission evaluation over resolved roles.

Composition across roles is a union: a permission is granted when any held
role grants it, and no role can take away what another grants. Malformed or
unknown permission keys are denied rather than raised, since keys come from
the internal catalog and never from user input.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from rms_api.common.logging import log_context
from rms_api.core.auth.errors import AuthorizationError
from rms_api.core.rbac.registry import grants, parse_permission, permissions_for_role
from rms_api.core.rbac.repository import MembershipRepository
from rms_api.core.rbac.resolver import RoleResolver
from rms_api.core.rbac.roles import normalize_role_names
from rms_api.core.rbac.types import PermissionScope, RoleName

logger = logging.getLogger(__name__)


def _scope_context(scope: PermissionScope | None) -> dict[str, str]:
    if scope is None:
        return {}
    context: dict[str, str] = {}
    if scope.team_id is not None:
        context["team_id"] = str(scope.team_id)
    if scope.tournament_id is not None:
        context["tournament_id"] = str(scope.tournament_id)
    return context


def roles_grant(roles: Iterable[RoleName], resource: str, action: str) -> bool:
    """Return ``True`` when any of ``roles`` grants ``action`` on ``resource``."""

    return any(action in grants(role).get(resource, ()) for role in roles)


class PermissionEvaluator:
    """Answers permission and role questions for a user."""

    def __init__(self, resolver: RoleResolver, memberships: MembershipRepository) -> None:
        self._resolver = resolver
        self._memberships = memberships

    @property
    def resolver(self) -> RoleResolver:
        return self._resolver

    async def has_permission(
        self,
        user_id: UUID,
        permission: str,
        scope: PermissionScope | None = None,
    ) -> bool:
        parsed = parse_permission(permission)
        if parsed is None:
            logger.debug(
                "rbac.permission.malformed",
                extra=log_context(user_id=str(user_id), permission=repr(permission)),
            )
            return False

        resource, action = parsed
        roles = await self._resolver.resolve(user_id, scope)
        if roles_grant(roles, resource, action):
            return True

        logger.debug(
            "rbac.permission.denied",
            extra=log_context(
                user_id=str(user_id),
                permission=permission,
                roles=",".join(sorted(role.value for role in roles)) or "-",
                **_scope_context(scope),
            ),
        )
        return False

    async def require_permission(
        self,
        user_id: UUID,
        permission: str,
        scope: PermissionScope | None = None,
    ) -> None:
        """Raise :class:`AuthorizationError` unless ``permission`` is granted.

        The check is not transactionally coupled to whatever mutation the
        caller performs next.
        """

        if not await self.has_permission(user_id, permission, scope):
            raise AuthorizationError(str(permission), scope=scope)

    async def has_any_role(
        self,
        user_id: UUID,
        roles: Iterable[RoleName | str],
        scope: PermissionScope | None = None,
    ) -> bool:
        wanted = normalize_role_names(roles)
        if not wanted:
            return False
        held = await self._resolver.resolve(user_id, scope)
        return not held.isdisjoint(wanted)

    async def is_admin(self, user_id: UUID) -> bool:
        # ADMIN is always global; scope never applies.
        return await self.has_any_role(user_id, {RoleName.ADMIN})

    async def is_team_member(self, user_id: UUID, team_id: UUID) -> bool:
        membership = await self._memberships.get_active_membership(team_id, user_id)
        return membership is not None and membership.is_active

    async def effective_permissions(
        self,
        user_id: UUID,
        scope: PermissionScope | None = None,
    ) -> frozenset[str]:
        """Return every permission key granted to ``user_id`` within ``scope``."""

        roles = await self._resolver.resolve(user_id, scope)
        granted: set[str] = set()
        for role in roles:
            granted |= permissions_for_role(role)
        return frozenset(granted)


__all__ = ["PermissionEvaluator", "roles_grant"]
