"""Teams and team memberships."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from rms_api.core.rbac.roles import normalize_role_name
from rms_api.core.rbac.types import TEAM_ROLES
from rms_api.db import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin, UUIDType, utc_now

_TEAM_ROLE_VALUES = ", ".join(f"'{role.value}'" for role in sorted(TEAM_ROLES, key=lambda r: r.value))


class Team(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Primary organizational unit."""

    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(String(200), nullable=False)
    team_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    created_by_id: Mapped[UUID | None] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    members: Mapped[list[TeamMember]] = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
    )


class TeamMember(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Membership of a user in a team with a team-tier role.

    Deactivated rather than deleted; at most one active row per team/user.
    """

    __tablename__ = "team_members"

    team_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    joined_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utc_now)

    team: Mapped[Team] = relationship("Team", back_populates="members")

    __table_args__ = (
        CheckConstraint(f"role IN ({_TEAM_ROLE_VALUES})", name="role_team_tier"),
        Index(
            "team_members_active_team_user_key",
            "team_id",
            "user_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("team_members_team_user_idx", "team_id", "user_id"),
    )

    @validates("role")
    def _store_team_role(self, _key: str, value: str) -> str:
        role = normalize_role_name(value)
        if role is None or role not in TEAM_ROLES:
            raise ValueError(f"'{value}' is not a team-level role")
        return role.value


__all__ = ["Team", "TeamMember"]
