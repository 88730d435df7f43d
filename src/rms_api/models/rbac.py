"""Role assignment tables read by the authorization engine.

Roles are stored as text and normalized on read, so rows written by older
clients with legacy aliases still resolve.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rms_api.db import Base, UTCDateTime, UUIDPrimaryKeyMixin, UUIDType, utc_now


class UserRole(UUIDPrimaryKeyMixin, Base):
    """Baseline team-tier role held outside any specific team."""

    __tablename__ = "user_roles"

    user_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (UniqueConstraint("user_id", "role"),)


class OrgUserRole(UUIDPrimaryKeyMixin, Base):
    """Organization-level role assignment; a user may hold several."""

    __tablename__ = "org_user_roles"

    user_id: Mapped[UUID] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(64), nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utc_now)
    assigned_by_id: Mapped[UUID | None] = mapped_column(
        UUIDType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (UniqueConstraint("user_id", "role"),)


__all__ = ["OrgUserRole", "UserRole"]
