"""ORM models."""

from .rbac import OrgUserRole, UserRole
from .team import Team, TeamMember
from .tournament import TeamTournamentParticipation, Tournament
from .user import AuthUser, User

__all__ = [
    "AuthUser",
    "OrgUserRole",
    "Team",
    "TeamMember",
    "TeamTournamentParticipation",
    "Tournament",
    "User",
    "UserRole",
]
