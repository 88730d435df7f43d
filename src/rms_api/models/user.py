"""Application users and the identity-provider mirror used for legacy claims."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from rms_api.core.rbac.roles import normalize_role_name
from rms_api.db import Base, RoleClaims, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin


def _normalise_email(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        msg = "Email must not be empty"
        raise ValueError(msg)
    return cleaned


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Application user record linked to the identity provider by ``auth_id``."""

    __tablename__ = "users"

    auth_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    app_role: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    @validates("email")
    def _store_normalised_email(self, _key: str, value: str) -> str:
        return _normalise_email(value)

    @validates("app_role")
    def _store_canonical_role(self, _key: str, value: str | None) -> str | None:
        role = normalize_role_name(value)
        return role.value if role is not None else None


class AuthUser(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Local mirror of the identity provider's user document.

    ``role`` and ``roles`` hold whatever the provider issued (a string, a
    list of strings, or null) and are only read for backward compatibility.
    """

    __tablename__ = "auth_users"

    provider_user_id: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    user_id_claim: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    app_role: Mapped[str | None] = mapped_column(String(64), nullable=True)
    role: Mapped[Any] = mapped_column(RoleClaims(), nullable=True)
    roles: Mapped[Any] = mapped_column(RoleClaims(), nullable=True)


__all__ = ["AuthUser", "User"]
