"""RBAC type definitions used across the stack."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


class RoleTier(str, enum.Enum):
    """Where a role applies."""

    ORGANIZATION = "organization"
    TEAM = "team"


class RoleName(str, enum.Enum):
    """Canonical role identifiers."""

    ADMIN = "ADMIN"
    TSO = "TSO"
    HEAD_REFEREE = "HEAD_REFEREE"
    SCORE_KEEPER = "SCORE_KEEPER"
    QUEUER = "QUEUER"
    TEAM_MENTOR = "TEAM_MENTOR"
    TEAM_LEADER = "TEAM_LEADER"
    TEAM_MEMBER = "TEAM_MEMBER"
    COMMON = "COMMON"

    @property
    def tier(self) -> RoleTier:
        if self in ORG_ROLES:
            return RoleTier.ORGANIZATION
        return RoleTier.TEAM


ORG_ROLES: frozenset[RoleName] = frozenset(
    {
        RoleName.ADMIN,
        RoleName.TSO,
        RoleName.HEAD_REFEREE,
        RoleName.SCORE_KEEPER,
        RoleName.QUEUER,
    }
)

TEAM_ROLES: frozenset[RoleName] = frozenset(
    {
        RoleName.TEAM_MENTOR,
        RoleName.TEAM_LEADER,
        RoleName.TEAM_MEMBER,
        RoleName.COMMON,
    }
)

FALLBACK_ROLE = RoleName.COMMON


@dataclass(frozen=True)
class PermissionDef:
    """Static permission definition."""

    key: str
    resource: str
    action: str


@dataclass(frozen=True)
class SystemRoleDef:
    """Static role definition and the actions it grants per resource."""

    role: RoleName
    description: str
    grants: Mapping[str, frozenset[str]]

    @property
    def tier(self) -> RoleTier:
        return self.role.tier


@dataclass(frozen=True)
class PermissionScope:
    """Optional team/tournament context for a permission check.

    An empty scope means global evaluation: every active team membership
    contributes alongside the organization and baseline roles.
    """

    team_id: UUID | None = None
    tournament_id: UUID | None = None

    @property
    def is_global(self) -> bool:
        return self.team_id is None and self.tournament_id is None


GLOBAL_SCOPE = PermissionScope()


# Read-only records handed to the engine by its collaborators ---------------


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Identity fields the engine reads from the user directory."""

    id: UUID
    auth_id: str | None = None
    app_role: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class TeamMembershipRecord:
    team_id: UUID
    user_id: UUID
    role: str
    is_active: bool = True
    joined_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ParticipationRecord:
    team_id: UUID
    tournament_id: UUID
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class RoleAssignmentRecord:
    """Baseline or organization role row; ``role`` is stored as raw text."""

    user_id: UUID
    role: str
    assigned_at: datetime | None = None


__all__ = [
    "FALLBACK_ROLE",
    "GLOBAL_SCOPE",
    "ORG_ROLES",
    "ParticipationRecord",
    "PermissionDef",
    "PermissionScope",
    "RoleAssignmentRecord",
    "RoleName",
    "RoleTier",
    "SystemRoleDef",
    "TEAM_ROLES",
    "TeamMembershipRecord",
    "UserRecord",
]
