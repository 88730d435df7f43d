"""Pydantic schemas for role summaries."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rms_api.core.rbac.types import RoleName


class RoleSummary(BaseModel):
    """Roles and permissions of a user, as shown on the "current user" payload."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    app_role: RoleName
    user_roles: list[RoleName] = Field(default_factory=list)
    org_roles: list[RoleName] = Field(default_factory=list)
    roles: list[RoleName] = Field(
        default_factory=list,
        description="Every role resolved without a team or tournament scope.",
    )
    permissions: list[str] = Field(default_factory=list)


__all__ = ["RoleSummary"]
