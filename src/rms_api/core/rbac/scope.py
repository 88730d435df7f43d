"""Scope filtering for team memberships."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from rms_api.core.rbac.repository import MembershipRepository
from rms_api.core.rbac.types import ParticipationRecord, PermissionScope, TeamMembershipRecord


def active_participating_team_ids(
    participations: Iterable[ParticipationRecord],
) -> frozenset[UUID]:
    return frozenset(entry.team_id for entry in participations if entry.is_active)


def filter_memberships(
    memberships: Iterable[TeamMembershipRecord],
    *,
    team_id: UUID | None = None,
    participating_team_ids: frozenset[UUID] | None = None,
) -> list[TeamMembershipRecord]:
    """Keep active memberships matching the team and tournament filters.

    ``participating_team_ids`` of ``None`` means no tournament filter; an
    empty set filters everything out.
    """

    kept: list[TeamMembershipRecord] = []
    for membership in memberships:
        if not membership.is_active:
            continue
        if team_id is not None and membership.team_id != team_id:
            continue
        if participating_team_ids is not None and membership.team_id not in participating_team_ids:
            continue
        kept.append(membership)
    return kept


async def scoped_memberships(
    repository: MembershipRepository,
    user_id: UUID,
    scope: PermissionScope | None = None,
) -> list[TeamMembershipRecord]:
    """Return the user's active memberships that apply within ``scope``."""

    scope = scope or PermissionScope()
    memberships = await repository.list_active_memberships(user_id)

    if scope.team_id is not None:
        memberships = filter_memberships(memberships, team_id=scope.team_id)

    participating: frozenset[UUID] | None = None
    if scope.tournament_id is not None:
        if not memberships:
            return []
        participations = await repository.list_participations(scope.tournament_id)
        if not participations:
            return []
        participating = active_participating_team_ids(participations)

    return filter_memberships(memberships, participating_team_ids=participating)


__all__ = ["active_participating_team_ids", "filter_memberships", "scoped_memberships"]
