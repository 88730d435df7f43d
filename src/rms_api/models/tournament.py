"""Tournaments and team participation records."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from rms_api.db import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin, UUIDType, utc_now


class Tournament(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "tournaments"

    tournament_name: Mapped[str] = mapped_column(String(200), nullable=False)
    tournament_code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    owner_id: Mapped[UUID | None] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


class TeamTournamentParticipation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Registration of a team in a tournament; gates tournament-scoped team roles."""

    __tablename__ = "team_tournament_participation"

    team_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    tournament_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    registration_date: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("team_tournament_participation_team_tournament_idx", "team_id", "tournament_id"),
    )


__all__ = ["TeamTournamentParticipation", "Tournament"]
