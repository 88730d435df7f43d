from __future__ import annotations

from uuid import uuid4

import pytest

from rms_api.core.rbac.scope import (
    active_participating_team_ids,
    filter_memberships,
    scoped_memberships,
)
from rms_api.core.rbac.types import ParticipationRecord, PermissionScope, TeamMembershipRecord
from tests.utils import FakeMembershipRepository


def test_active_participating_team_ids_ignores_inactive_rows() -> None:
    tournament = uuid4()
    active, withdrawn = uuid4(), uuid4()
    ids = active_participating_team_ids(
        [
            ParticipationRecord(team_id=active, tournament_id=tournament),
            ParticipationRecord(team_id=withdrawn, tournament_id=tournament, is_active=False),
        ]
    )
    assert ids == {active}


def test_filter_memberships_applies_each_filter() -> None:
    user = uuid4()
    team_a, team_b = uuid4(), uuid4()
    memberships = [
        TeamMembershipRecord(team_id=team_a, user_id=user, role="TEAM_MEMBER"),
        TeamMembershipRecord(team_id=team_b, user_id=user, role="TEAM_LEADER"),
        TeamMembershipRecord(team_id=team_b, user_id=user, role="TEAM_MENTOR", is_active=False),
    ]

    assert len(filter_memberships(memberships)) == 2
    assert [m.team_id for m in filter_memberships(memberships, team_id=team_b)] == [team_b]
    assert filter_memberships(memberships, participating_team_ids=frozenset()) == []
    kept = filter_memberships(memberships, participating_team_ids=frozenset({team_a}))
    assert [m.role for m in kept] == ["TEAM_MEMBER"]


@pytest.mark.asyncio
async def test_global_scope_keeps_all_active_memberships() -> None:
    repo = FakeMembershipRepository()
    user = uuid4()
    repo.add_membership(user, uuid4(), "TEAM_MEMBER")
    repo.add_membership(user, uuid4(), "TEAM_LEADER")
    repo.add_membership(user, uuid4(), "TEAM_MENTOR", is_active=False)

    memberships = await scoped_memberships(repo, user)

    assert sorted(m.role for m in memberships) == ["TEAM_LEADER", "TEAM_MEMBER"]
    assert repo.participation_lookups == 0


@pytest.mark.asyncio
async def test_tournament_scope_without_participations_is_empty() -> None:
    repo = FakeMembershipRepository()
    user, team = uuid4(), uuid4()
    repo.add_membership(user, team, "TEAM_MENTOR")

    assert await scoped_memberships(repo, user, PermissionScope(tournament_id=uuid4())) == []


@pytest.mark.asyncio
async def test_tournament_scope_skips_participation_lookup_without_memberships() -> None:
    repo = FakeMembershipRepository()

    result = await scoped_memberships(repo, uuid4(), PermissionScope(tournament_id=uuid4()))

    assert result == []
    assert repo.participation_lookups == 0


@pytest.mark.asyncio
async def test_team_and_tournament_scope_combine() -> None:
    repo = FakeMembershipRepository()
    user, team_a, team_b, tournament = uuid4(), uuid4(), uuid4(), uuid4()
    repo.add_membership(user, team_a, "TEAM_MENTOR")
    repo.add_membership(user, team_b, "TEAM_LEADER")
    repo.add_participation(team_a, tournament)
    repo.add_participation(team_b, tournament)

    both = PermissionScope(team_id=team_b, tournament_id=tournament)
    memberships = await scoped_memberships(repo, user, both)
    assert [m.team_id for m in memberships] == [team_b]

    other_tournament = PermissionScope(team_id=team_b, tournament_id=uuid4())
    assert await scoped_memberships(repo, user, other_tournament) == []
