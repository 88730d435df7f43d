"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from rms_api.db import Base, get_engine, get_sessionmaker, reset_database_state
from rms_api.models import (
    AuthUser,
    OrgUserRole,
    Team,
    TeamMember,
    TeamTournamentParticipation,
    Tournament,
    User,
    UserRole,
)
from rms_api.settings import Settings


def pytest_collection_modifyitems(config, items) -> None:
    for item in items:
        path_str = str(Path(str(item.fspath)))
        if "/tests/integration/" in path_str:
            item.add_marker(pytest.mark.integration)
        elif "/tests/unit/" in path_str:
            item.add_marker(pytest.mark.unit)


@pytest.fixture()
def settings() -> Settings:
    """In-memory SQLite settings that ignore any local .env file."""

    return Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture()
async def session(settings: Settings) -> AsyncIterator[AsyncSession]:
    """Return a session bound to a freshly created in-memory schema."""

    reset_database_state()
    engine = get_engine(settings)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    session_factory = get_sessionmaker(settings)
    async with session_factory() as db_session:
        yield db_session

    await engine.dispose()
    reset_database_state()


@pytest_asyncio.fixture()
async def seed_tournament(session: AsyncSession) -> dict[str, Any]:
    """Create two teams, one tournament, and users covering every role source."""

    mentor = User(auth_id="auth-mentor", email="mentor@example.test")
    leader = User(auth_id="auth-leader", email="leader@example.test")
    member = User(auth_id="auth-member", email="member@example.test")
    admin = User(auth_id="auth-admin", email="admin@example.test")
    legacy = User(auth_id="auth-legacy", email="legacy@example.test")
    primary = User(auth_id="auth-primary", email="primary@example.test", app_role="head-referee")
    plain = User(auth_id="auth-plain", email="plain@example.test")
    session.add_all([mentor, leader, member, admin, legacy, primary, plain])
    await session.flush()

    alpha = Team(team_name="Alpha Bots", team_number="0001", created_by_id=mentor.id)
    beta = Team(team_name="Beta Bots", team_number="0002", created_by_id=leader.id)
    tournament = Tournament(tournament_name="Spring Open", tournament_code="SPRING", owner_id=admin.id)
    session.add_all([alpha, beta, tournament])
    await session.flush()

    participation = TeamTournamentParticipation(
        team_id=alpha.id,
        tournament_id=tournament.id,
        is_active=True,
    )
    session.add_all(
        [
            TeamMember(team_id=alpha.id, user_id=mentor.id, role="TEAM_MENTOR"),
            TeamMember(team_id=alpha.id, user_id=leader.id, role="TEAM_LEADER"),
            TeamMember(team_id=beta.id, user_id=member.id, role="TEAM_MEMBER"),
            TeamMember(
                team_id=beta.id,
                user_id=leader.id,
                role="TEAM_MENTOR",
                is_active=False,
            ),
            participation,
            OrgUserRole(user_id=admin.id, role="ADMIN"),
            OrgUserRole(user_id=admin.id, role="TSO"),
            UserRole(user_id=mentor.id, role="TEAM_MENTOR"),
            AuthUser(
                provider_user_id="provider-legacy",
                user_id_claim="auth-legacy",
                role=["queue-manager", "not-a-role"],
                roles="Tournament_Scoring_Officer",
            ),
        ]
    )
    await session.commit()

    return {
        "mentor": mentor.id,
        "leader": leader.id,
        "member": member.id,
        "admin": admin.id,
        "legacy": legacy.id,
        "primary": primary.id,
        "plain": plain.id,
        "alpha": alpha.id,
        "beta": beta.id,
        "tournament": tournament.id,
        "participation": participation.id,
    }
