"""Collect the canonical roles a user holds."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from rms_api.common.logging import log_context
from rms_api.core.rbac.repository import MembershipRepository, UserDirectory
from rms_api.core.rbac.sources import (
    BaselineRoleSource,
    LegacyClaimsSource,
    OrgRoleSource,
    PrimaryRoleSource,
    RoleSource,
    TeamMembershipSource,
)
from rms_api.core.rbac.types import FALLBACK_ROLE, PermissionScope, RoleName

logger = logging.getLogger(__name__)


def default_role_sources(
    directory: UserDirectory,
    repository: MembershipRepository,
    *,
    include_legacy_claims: bool = True,
) -> tuple[RoleSource, ...]:
    """Build the standard source list in resolution order."""

    sources: list[RoleSource] = [
        PrimaryRoleSource(),
        BaselineRoleSource(repository),
        OrgRoleSource(repository),
    ]
    if include_legacy_claims:
        sources.append(LegacyClaimsSource(directory))
    sources.append(TeamMembershipSource(repository))
    return tuple(sources)


class RoleResolver:
    """Union the roles reported by every configured source.

    Sources are awaited one after another; collaborators backed by a single
    ``AsyncSession`` cannot serve concurrent queries.
    """

    def __init__(self, directory: UserDirectory, sources: Sequence[RoleSource]) -> None:
        self._directory = directory
        self._sources = tuple(sources)

    @classmethod
    def from_repositories(
        cls,
        directory: UserDirectory,
        repository: MembershipRepository,
        *,
        include_legacy_claims: bool = True,
    ) -> RoleResolver:
        return cls(
            directory,
            default_role_sources(
                directory,
                repository,
                include_legacy_claims=include_legacy_claims,
            ),
        )

    @property
    def sources(self) -> tuple[RoleSource, ...]:
        return self._sources

    async def resolve(
        self,
        user_id: UUID,
        scope: PermissionScope | None = None,
    ) -> frozenset[RoleName]:
        """Return every role ``user_id`` holds within ``scope``.

        An unknown user yields an empty set; any existing user holds at
        least :data:`FALLBACK_ROLE`.
        """

        scope = scope or PermissionScope()
        user = await self._directory.get_user(user_id)
        if user is None:
            logger.debug("rbac.user.missing", extra=log_context(user_id=str(user_id)))
            return frozenset()

        roles: set[RoleName] = set()
        for source in self._sources:
            roles |= await source.resolve(user, scope)

        roles.add(FALLBACK_ROLE)
        return frozenset(roles)


__all__ = ["RoleResolver", "default_role_sources"]
