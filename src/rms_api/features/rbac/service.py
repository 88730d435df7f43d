"""Session-bound authorization service consumed by mutation and query handlers.

Handlers call :func:`require_permission` (or the matching method on
:class:`AuthorizationService`) before touching any record::

    await require_permission(session, user_id, "teams.update", PermissionScope(team_id=team.id))

The check reads a snapshot of role data; it does not hold locks, so the
guarded mutation owns any stronger consistency requirement.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rms_api.core.rbac.evaluator import PermissionEvaluator
from rms_api.core.rbac.resolver import RoleResolver
from rms_api.core.rbac.roles import normalize_role_name, normalize_role_names
from rms_api.core.rbac.types import FALLBACK_ROLE, PermissionScope, RoleName
from rms_api.settings import Settings, get_settings

from .repository import SqlMembershipRepository, SqlUserDirectory, claim_values
from .schemas import RoleSummary


class AuthorizationService:
    """Wire the SQL collaborators into a :class:`PermissionEvaluator`."""

    def __init__(self, session: AsyncSession, *, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._session = session
        self._directory = SqlUserDirectory(
            session, claim_fields=settings.legacy_role_claim_fields
        )
        self._memberships = SqlMembershipRepository(session)
        self._resolver = RoleResolver.from_repositories(
            self._directory,
            self._memberships,
            include_legacy_claims=settings.legacy_role_claims_enabled,
        )
        self._evaluator = PermissionEvaluator(self._resolver, self._memberships)

    @property
    def evaluator(self) -> PermissionEvaluator:
        return self._evaluator

    async def resolve_roles(
        self, user_id: UUID, scope: PermissionScope | None = None
    ) -> frozenset[RoleName]:
        return await self._resolver.resolve(user_id, scope)

    async def has_permission(
        self, user_id: UUID, permission: str, scope: PermissionScope | None = None
    ) -> bool:
        return await self._evaluator.has_permission(user_id, permission, scope)

    async def require_permission(
        self, user_id: UUID, permission: str, scope: PermissionScope | None = None
    ) -> None:
        await self._evaluator.require_permission(user_id, permission, scope)

    async def has_any_role(
        self,
        user_id: UUID,
        roles: Iterable[RoleName | str],
        scope: PermissionScope | None = None,
    ) -> bool:
        return await self._evaluator.has_any_role(user_id, roles, scope)

    async def is_admin(self, user_id: UUID) -> bool:
        return await self._evaluator.is_admin(user_id)

    async def is_team_member(self, user_id: UUID, team_id: UUID) -> bool:
        return await self._evaluator.is_team_member(user_id, team_id)

    async def describe_user_roles(self, user_id: UUID) -> RoleSummary | None:
        """Summarize a user's roles for the "current user" payload.

        The primary role falls back from the user's ``app_role`` to the
        identity document's ``app_role`` and then its ``role`` claim, ending
        at COMMON. Users without baseline rows report ``[COMMON]``.
        """

        user = await self._directory.get_user(user_id)
        if user is None:
            return None

        auth_user = await self._directory.get_auth_user(user.auth_id)
        candidates: list[object] = [user.app_role]
        if auth_user is not None:
            candidates.append(auth_user.app_role)
            candidates.extend(claim_values(auth_user.role))

        app_role = FALLBACK_ROLE
        for candidate in candidates:
            resolved = normalize_role_name(candidate)
            if resolved is not None:
                app_role = resolved
                break

        baseline = await self._memberships.list_baseline_roles(user_id)
        org = await self._memberships.list_org_roles(user_id)
        user_roles = normalize_role_names(record.role for record in baseline) or frozenset(
            {FALLBACK_ROLE}
        )
        org_roles = normalize_role_names(record.role for record in org)

        roles = await self._resolver.resolve(user_id)
        permissions = await self._evaluator.effective_permissions(user_id)

        return RoleSummary(
            user_id=user_id,
            app_role=app_role,
            user_roles=sorted(user_roles, key=lambda role: role.value),
            org_roles=sorted(org_roles, key=lambda role: role.value),
            roles=sorted(roles, key=lambda role: role.value),
            permissions=sorted(permissions),
        )


# Convenience functions for handlers that only hold a session ---------------


async def has_permission(
    session: AsyncSession,
    user_id: UUID,
    permission: str,
    scope: PermissionScope | None = None,
) -> bool:
    return await AuthorizationService(session).has_permission(user_id, permission, scope)


async def require_permission(
    session: AsyncSession,
    user_id: UUID,
    permission: str,
    scope: PermissionScope | None = None,
) -> None:
    await AuthorizationService(session).require_permission(user_id, permission, scope)


async def has_any_role(
    session: AsyncSession,
    user_id: UUID,
    roles: Iterable[RoleName | str],
    scope: PermissionScope | None = None,
) -> bool:
    return await AuthorizationService(session).has_any_role(user_id, roles, scope)


async def is_admin(session: AsyncSession, user_id: UUID) -> bool:
    return await AuthorizationService(session).is_admin(user_id)


async def is_team_member(session: AsyncSession, user_id: UUID, team_id: UUID) -> bool:
    return await AuthorizationService(session).is_team_member(user_id, team_id)


async def describe_user_roles(session: AsyncSession, user_id: UUID) -> RoleSummary | None:
    return await AuthorizationService(session).describe_user_roles(user_id)


__all__ = [
    "AuthorizationService",
    "describe_user_roles",
    "has_any_role",
    "has_permission",
    "is_admin",
    "is_team_member",
    "require_permission",
]
