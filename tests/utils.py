"""In-memory collaborators for exercising the authorization engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from rms_api.core.rbac.evaluator import PermissionEvaluator
from rms_api.core.rbac.resolver import RoleResolver
from rms_api.core.rbac.types import (
    ParticipationRecord,
    RoleAssignmentRecord,
    TeamMembershipRecord,
    UserRecord,
)


@dataclass
class FakeUserDirectory:
    users: dict[UUID, UserRecord] = field(default_factory=dict)
    claims: dict[UUID, list[str]] = field(default_factory=dict)

    def add_user(
        self,
        user_id: UUID | None = None,
        *,
        app_role: str | None = None,
        claims: Sequence[str] = (),
    ) -> UUID:
        user_id = user_id or uuid4()
        self.users[user_id] = UserRecord(id=user_id, auth_id=f"auth-{user_id}", app_role=app_role)
        if claims:
            self.claims[user_id] = list(claims)
        return user_id

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_identity_claims(self, user: UserRecord) -> Sequence[str]:
        return list(self.claims.get(user.id, []))


@dataclass
class FakeMembershipRepository:
    memberships: list[TeamMembershipRecord] = field(default_factory=list)
    participations: list[ParticipationRecord] = field(default_factory=list)
    baseline: list[RoleAssignmentRecord] = field(default_factory=list)
    org: list[RoleAssignmentRecord] = field(default_factory=list)
    participation_lookups: int = 0

    def add_membership(
        self, user_id: UUID, team_id: UUID, role: str, *, is_active: bool = True
    ) -> None:
        self.memberships.append(
            TeamMembershipRecord(team_id=team_id, user_id=user_id, role=role, is_active=is_active)
        )

    def add_participation(
        self, team_id: UUID, tournament_id: UUID, *, is_active: bool = True
    ) -> None:
        self.participations.append(
            ParticipationRecord(team_id=team_id, tournament_id=tournament_id, is_active=is_active)
        )

    def add_baseline_role(self, user_id: UUID, role: str) -> None:
        self.baseline.append(RoleAssignmentRecord(user_id=user_id, role=role))

    def add_org_role(self, user_id: UUID, role: str) -> None:
        self.org.append(RoleAssignmentRecord(user_id=user_id, role=role))

    async def list_active_memberships(self, user_id: UUID) -> Sequence[TeamMembershipRecord]:
        return [m for m in self.memberships if m.user_id == user_id and m.is_active]

    async def get_active_membership(
        self, team_id: UUID, user_id: UUID
    ) -> TeamMembershipRecord | None:
        for membership in self.memberships:
            if membership.team_id == team_id and membership.user_id == user_id and membership.is_active:
                return membership
        return None

    async def list_participations(self, tournament_id: UUID) -> Sequence[ParticipationRecord]:
        self.participation_lookups += 1
        return [p for p in self.participations if p.tournament_id == tournament_id]

    async def list_baseline_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]:
        return [r for r in self.baseline if r.user_id == user_id]

    async def list_org_roles(self, user_id: UUID) -> Sequence[RoleAssignmentRecord]:
        return [r for r in self.org if r.user_id == user_id]


class UnavailableMembershipRepository(FakeMembershipRepository):
    """Repository whose membership lookups fail like a dropped connection."""

    async def list_active_memberships(self, user_id: UUID) -> Sequence[TeamMembershipRecord]:
        raise ConnectionError("membership store unavailable")


def build_evaluator(
    directory: FakeUserDirectory,
    repository: FakeMembershipRepository,
    *,
    include_legacy_claims: bool = True,
) -> PermissionEvaluator:
    resolver = RoleResolver.from_repositories(
        directory,
        repository,
        include_legacy_claims=include_legacy_claims,
    )
    return PermissionEvaluator(resolver, repository)


__all__ = [
    "FakeMembershipRepository",
    "FakeUserDirectory",
    "UnavailableMembershipRepository",
    "build_evaluator",
]
