"""Read-only collaborator interfaces consumed by the authorization engine.

Implementations live in ``features/rbac/repository.py`` (SQLAlchemy) and in
the test suite (in-memory fakes). Lookup failures are expected to propagate
to the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from rms_api.core.rbac.types import (
    ParticipationRecord,
    RoleAssignmentRecord,
    TeamMembershipRecord,
    UserRecord,
)


class UserDirectory(Protocol):
    """Resolves users and the role claims attached by the identity provider."""

    async def get_user(self, user_id: UUID) -> UserRecord | None: ...

    async def get_identity_claims(self, user: UserRecord) -> Sequence[str]:
        """Return the raw legacy role claims for ``user`` (possibly empty)."""
        ...


class MembershipRepository(Protocol):
    """Team membership, participation, and role assignment lookups."""

    async def list_active_memberships(self, user_id: UUID) -> Sequence[TeamMembershipRecord]: ...

    async def get_active_membership(
        self, team_id: UUID, user_id: UUID
    ) -> TeamMembershipRecord | None: ...

    async def list_participations(self, tournament_id: UUID) -> Sequence[ParticipationRecord]: ...

    async def list_baseline_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]: ...

    async def list_org_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]: ...


__all__ = ["MembershipRepository", "UserDirectory"]
