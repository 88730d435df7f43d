"""Role sources unioned by :class:`~rms_api.core.rbac.resolver.RoleResolver`.

Each source answers one question ("which roles does this storage location
say the user holds?") and is unit-testable on its own. Only the team
membership source looks at the scope.
"""

from __future__ import annotations

import logging
from typing import Protocol

from rms_api.core.rbac.repository import MembershipRepository, UserDirectory
from rms_api.core.rbac.roles import normalize_role_name, normalize_role_names
from rms_api.core.rbac.scope import scoped_memberships
from rms_api.core.rbac.types import TEAM_ROLES, PermissionScope, RoleName, UserRecord

logger = logging.getLogger(__name__)


class RoleSource(Protocol):
    """Capability that contributes canonical roles for a user."""

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]: ...


class PrimaryRoleSource:
    """The ``app_role`` attribute stored on the user record."""

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]:
        role = normalize_role_name(user.app_role)
        return frozenset({role}) if role is not None else frozenset()


class BaselineRoleSource:
    """Team-tier roles held independently of any team (``user_roles``)."""

    def __init__(self, repository: MembershipRepository) -> None:
        self._repository = repository

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]:
        records = await self._repository.list_baseline_roles(user.id)
        return normalize_role_names(record.role for record in records)


class OrgRoleSource:
    """Organization roles (``org_user_roles``); always global."""

    def __init__(self, repository: MembershipRepository) -> None:
        self._repository = repository

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]:
        records = await self._repository.list_org_roles(user.id)
        return normalize_role_names(record.role for record in records)


class LegacyClaimsSource:
    """Role claims carried on the identity provider's user document."""

    def __init__(self, directory: UserDirectory) -> None:
        self._directory = directory

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]:
        claims = await self._directory.get_identity_claims(user)
        return normalize_role_names(claims)


class TeamMembershipSource:
    """Team roles from active memberships that apply within the scope."""

    def __init__(self, repository: MembershipRepository) -> None:
        self._repository = repository

    async def resolve(self, user: UserRecord, scope: PermissionScope) -> frozenset[RoleName]:
        memberships = await scoped_memberships(self._repository, user.id, scope)
        roles: set[RoleName] = set()
        for membership in memberships:
            role = normalize_role_name(membership.role)
            if role is None:
                continue
            if role not in TEAM_ROLES:
                # Memberships only ever carry team-tier roles.
                logger.warning(
                    "rbac.membership.invalid_role",
                    extra={"team_id": str(membership.team_id), "role": role.value},
                )
                continue
            roles.add(role)
        return frozenset(roles)


__all__ = [
    "BaselineRoleSource",
    "LegacyClaimsSource",
    "OrgRoleSource",
    "PrimaryRoleSource",
    "RoleSource",
    "TeamMembershipSource",
]
