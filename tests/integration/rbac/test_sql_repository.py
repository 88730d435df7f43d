from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from rms_api.features.rbac.repository import (
    SqlMembershipRepository,
    SqlUserDirectory,
    claim_values,
)
from rms_api.models import AuthUser, TeamMember, User


def test_claim_values_shapes() -> None:
    assert claim_values(None) == []
    assert claim_values("TSO") == ["TSO"]
    assert claim_values(["TSO", 3, "QUEUER"]) == ["TSO", "QUEUER"]
    assert claim_values({"role": "TSO"}) == []


@pytest.mark.asyncio
async def test_get_user_maps_record(session, seed_tournament) -> None:
    directory = SqlUserDirectory(session)

    record = await directory.get_user(seed_tournament["primary"])

    assert record is not None
    assert record.id == seed_tournament["primary"]
    assert record.auth_id == "auth-primary"
    assert record.app_role == "HEAD_REFEREE"
    assert await directory.get_user(uuid4()) is None


@pytest.mark.asyncio
async def test_identity_claims_come_from_configured_fields(session, seed_tournament) -> None:
    legacy = await SqlUserDirectory(session).get_user(seed_tournament["legacy"])
    assert legacy is not None

    both = await SqlUserDirectory(session).get_identity_claims(legacy)
    only_roles = await SqlUserDirectory(session, claim_fields=["roles"]).get_identity_claims(legacy)

    assert both == ["queue-manager", "not-a-role", "Tournament_Scoring_Officer"]
    assert only_roles == ["Tournament_Scoring_Officer"]


@pytest.mark.asyncio
async def test_auth_user_falls_back_to_provider_id(session, seed_tournament) -> None:
    session.add(AuthUser(provider_user_id="auth-plain", role="TSO"))
    await session.commit()
    directory = SqlUserDirectory(session)

    plain = await directory.get_user(seed_tournament["plain"])
    assert plain is not None

    assert await directory.get_identity_claims(plain) == ["TSO"]
    assert await directory.get_auth_user(None) is None


@pytest.mark.asyncio
async def test_membership_queries_only_return_active_rows(session, seed_tournament) -> None:
    repo = SqlMembershipRepository(session)
    leader = seed_tournament["leader"]

    memberships = await repo.list_active_memberships(leader)

    assert [(m.team_id, m.role) for m in memberships] == [(seed_tournament["alpha"], "TEAM_LEADER")]
    assert await repo.get_active_membership(seed_tournament["alpha"], leader) is not None
    assert await repo.get_active_membership(seed_tournament["beta"], leader) is None


@pytest.mark.asyncio
async def test_participations_and_role_assignments(session, seed_tournament) -> None:
    repo = SqlMembershipRepository(session)

    participations = await repo.list_participations(seed_tournament["tournament"])
    org_roles = await repo.list_org_roles(seed_tournament["admin"])
    baseline = await repo.list_baseline_roles(seed_tournament["mentor"])

    assert [(p.team_id, p.is_active) for p in participations] == [(seed_tournament["alpha"], True)]
    assert sorted(r.role for r in org_roles) == ["ADMIN", "TSO"]
    assert [r.role for r in baseline] == ["TEAM_MENTOR"]
    assert await repo.list_participations(uuid4()) == []


@pytest.mark.asyncio
async def test_only_one_active_membership_per_team(session, seed_tournament) -> None:
    session.add(
        TeamMember(
            team_id=seed_tournament["alpha"],
            user_id=seed_tournament["mentor"],
            role="TEAM_MEMBER",
        )
    )
    with pytest.raises(IntegrityError):
        await session.commit()
    await session.rollback()

    # An inactive duplicate is allowed.
    session.add(
        TeamMember(
            team_id=seed_tournament["alpha"],
            user_id=seed_tournament["mentor"],
            role="TEAM_MEMBER",
            is_active=False,
        )
    )
    await session.commit()
    rows = await session.execute(
        select(TeamMember).where(TeamMember.user_id == seed_tournament["mentor"])
    )
    assert len(rows.scalars().all()) == 2


def test_membership_rejects_organization_roles() -> None:
    with pytest.raises(ValueError, match="not a team-level role"):
        TeamMember(team_id=uuid4(), user_id=uuid4(), role="ADMIN")


def test_user_app_role_is_stored_canonically() -> None:
    assert User(auth_id="a", email="a@example.test", app_role="queue-manager").app_role == "QUEUER"
    assert User(auth_id="b", email="b@example.test", app_role="wizard").app_role is None
