"""SQLAlchemy implementations of the engine's read-only collaborators."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession

from rms_api.core.rbac.types import (
    ParticipationRecord,
    RoleAssignmentRecord,
    TeamMembershipRecord,
    UserRecord,
)
from rms_api.models import (
    AuthUser,
    OrgUserRole,
    TeamMember,
    TeamTournamentParticipation,
    User,
    UserRole,
)
from rms_api.settings import DEFAULT_LEGACY_CLAIM_FIELDS


def claim_values(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def _membership_record(row: TeamMember) -> TeamMembershipRecord:
    return TeamMembershipRecord(
        team_id=row.team_id,
        user_id=row.user_id,
        role=row.role,
        is_active=row.is_active,
        joined_at=row.joined_at,
    )


class SqlUserDirectory:
    """Reads ``users`` and the ``auth_users`` identity mirror."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        claim_fields: Sequence[str] = tuple(DEFAULT_LEGACY_CLAIM_FIELDS),
    ) -> None:
        self._session = session
        self._claim_fields = tuple(claim_fields)

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        user = await self._session.get(User, user_id)
        if user is None:
            return None
        return UserRecord(
            id=user.id,
            auth_id=user.auth_id,
            app_role=user.app_role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def get_auth_user(self, auth_id: str | None) -> AuthUser | None:
        """Find the identity document by its ``userId`` claim, then by its own id."""

        if not auth_id:
            return None

        result = await self._session.execute(
            select(AuthUser).where(AuthUser.user_id_claim == auth_id).limit(1)
        )
        auth_user = result.scalars().first()
        if auth_user is not None:
            return auth_user

        result = await self._session.execute(
            select(AuthUser).where(AuthUser.provider_user_id == auth_id).limit(1)
        )
        return result.scalars().first()

    async def get_identity_claims(self, user: UserRecord) -> Sequence[str]:
        auth_user = await self.get_auth_user(user.auth_id)
        if auth_user is None:
            return []

        claims: list[str] = []
        for field in self._claim_fields:
            claims.extend(claim_values(getattr(auth_user, field, None)))
        return claims


class SqlMembershipRepository:
    """Reads memberships, participation, and role assignment tables."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active_memberships(self, user_id: UUID) -> Sequence[TeamMembershipRecord]:
        result = await self._session.execute(
            select(TeamMember).where(
                TeamMember.user_id == user_id,
                TeamMember.is_active.is_(true()),
            )
        )
        return [_membership_record(row) for row in result.scalars()]

    async def get_active_membership(
        self, team_id: UUID, user_id: UUID
    ) -> TeamMembershipRecord | None:
        result = await self._session.execute(
            select(TeamMember)
            .where(
                TeamMember.team_id == team_id,
                TeamMember.user_id == user_id,
                TeamMember.is_active.is_(true()),
            )
            .limit(1)
        )
        row = result.scalars().first()
        return _membership_record(row) if row is not None else None

    async def list_participations(self, tournament_id: UUID) -> Sequence[ParticipationRecord]:
        result = await self._session.execute(
            select(TeamTournamentParticipation).where(
                TeamTournamentParticipation.tournament_id == tournament_id
            )
        )
        return [
            ParticipationRecord(
                team_id=row.team_id,
                tournament_id=row.tournament_id,
                is_active=row.is_active,
            )
            for row in result.scalars()
        ]

    async def list_baseline_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]:
        result = await self._session.execute(select(UserRole).where(UserRole.user_id == user_id))
        return [
            RoleAssignmentRecord(user_id=row.user_id, role=row.role, assigned_at=row.created_at)
            for row in result.scalars()
        ]

    async def list_org_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]:
        result = await self._session.execute(
            select(OrgUserRole).where(OrgUserRole.user_id == user_id)
        )
        return [
            RoleAssignmentRecord(user_id=row.user_id, role=row.role, assigned_at=row.assigned_at)
            for row in result.scalars()
        ]


__all__ = ["SqlMembershipRepository", "SqlUserDirectory", "claim_values"]
