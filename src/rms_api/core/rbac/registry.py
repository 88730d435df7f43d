"""Canonical permission catalog and system role grants.

``RESOURCE_ACTIONS`` is the single source of truth for every permission key.
Role grants are validated against it on import so a typo in a grant fails
loudly instead of producing an unreachable permission.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from rms_api.core.rbac.types import PermissionDef, RoleName, SystemRoleDef


class RegistryError(ValueError):
    """Raised when a role grant references an unknown resource or action."""


RESOURCE_ACTIONS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "teams": ("create", "update", "delete", "view_all"),
        "team_members": ("invite", "remove", "manage_roles"),
        "tournaments": (
            "view",
            "participate",
            "join",
            "manage_participation",
            "create",
            "update",
            "delete",
            "manage_all",
        ),
        "matches": ("view", "create", "update", "delete", "manage_all"),
        "fields": ("manage",),
        "stages": ("view", "manage"),
        "referees": ("assign",),
        "scoring_profiles": ("manage",),
        "alliances": ("manage",),
        "queue": ("manage",),
        "scores": ("edit_draft", "finalize"),
        "penalties": ("manage",),
        "audience": ("control",),
        "users": ("view_all", "manage_roles"),
    }
)


PERMISSIONS: tuple[PermissionDef, ...] = tuple(
    PermissionDef(key=f"{resource}.{action}", resource=resource, action=action)
    for resource, actions in RESOURCE_ACTIONS.items()
    for action in actions
)

PERMISSION_REGISTRY: Mapping[str, PermissionDef] = MappingProxyType(
    {definition.key: definition for definition in PERMISSIONS}
)


def parse_permission(key: object) -> tuple[str, str] | None:
    """Split ``key`` into ``(resource, action)``; ``None`` when malformed."""

    if not isinstance(key, str):
        return None
    resource, separator, action = key.partition(".")
    if not separator or not resource or not action:
        return None
    return resource, action


def _freeze_grants(
    role: RoleName, grants: Mapping[str, tuple[str, ...] | list[str]]
) -> Mapping[str, frozenset[str]]:
    frozen: dict[str, frozenset[str]] = {}
    for resource, actions in grants.items():
        allowed = RESOURCE_ACTIONS.get(resource)
        if allowed is None:
            raise RegistryError(f"Role {role.value} grants unknown resource '{resource}'")
        unknown = sorted(set(actions) - set(allowed))
        if unknown:
            raise RegistryError(
                f"Role {role.value} grants unknown actions on '{resource}': {', '.join(unknown)}"
            )
        frozen[resource] = frozenset(actions)
    return MappingProxyType(frozen)


def _role(
    role: RoleName,
    *,
    description: str,
    grants: Mapping[str, tuple[str, ...] | list[str]],
) -> SystemRoleDef:
    return SystemRoleDef(
        role=role,
        description=description,
        grants=_freeze_grants(role, grants),
    )


SYSTEM_ROLES: tuple[SystemRoleDef, ...] = (
    # Organization roles --------------------------------------------------
    _role(
        RoleName.ADMIN,
        description="Global administrator with every permission in the catalog.",
        grants={resource: list(actions) for resource, actions in RESOURCE_ACTIONS.items()},
    ),
    _role(
        RoleName.TSO,
        description="Tournament scoring officer running events end to end.",
        grants={
            "tournaments": (
                "view",
                "participate",
                "join",
                "manage_participation",
                "create",
                "update",
                "delete",
                "manage_all",
            ),
            "matches": ("view", "create", "update", "delete", "manage_all"),
            "fields": ("manage",),
            "stages": ("view", "manage"),
            "referees": ("assign",),
            "scoring_profiles": ("manage",),
            "queue": ("manage",),
            "scores": ("edit_draft", "finalize"),
            "penalties": ("manage",),
            "audience": ("control",),
        },
    ),
    _role(
        RoleName.HEAD_REFEREE,
        description="Runs matches, assigns referees, and finalizes scores.",
        grants={
            "tournaments": ("view",),
            "matches": ("view", "create", "update", "manage_all"),
            "referees": ("assign",),
            "queue": ("manage",),
            "scores": ("edit_draft", "finalize"),
            "penalties": ("manage",),
        },
    ),
    _role(
        RoleName.SCORE_KEEPER,
        description="Enters and finalizes match scores.",
        grants={
            "tournaments": ("view",),
            "matches": ("view",),
            "scores": ("edit_draft", "finalize"),
            "penalties": ("manage",),
        },
    ),
    _role(
        RoleName.QUEUER,
        description="Manages the match queue.",
        grants={
            "tournaments": ("view",),
            "matches": ("view",),
            "queue": ("manage",),
        },
    ),
    # Team roles ----------------------------------------------------------
    _role(
        RoleName.TEAM_MENTOR,
        description="Team owner; manages members and the team's tournaments.",
        grants={
            "teams": ("update",),
            "team_members": ("invite", "remove", "manage_roles"),
            "tournaments": (
                "participate",
                "join",
                "manage_participation",
                "create",
                "update",
                "delete",
            ),
            "matches": ("view", "create", "update"),
            "stages": ("view", "manage"),
            "fields": ("manage",),
            "referees": ("assign",),
            "scoring_profiles": ("manage",),
            "alliances": ("manage",),
            "queue": ("manage",),
            "scores": ("edit_draft", "finalize"),
            "penalties": ("manage",),
            "audience": ("control",),
        },
    ),
    _role(
        RoleName.TEAM_LEADER,
        description="Leads a team's participation in tournaments.",
        grants={
            "teams": ("update",),
            "team_members": ("invite",),
            "tournaments": ("participate", "join", "manage_participation"),
            "matches": ("view",),
            "stages": ("view",),
        },
    ),
    _role(
        RoleName.TEAM_MEMBER,
        description="Regular team member.",
        grants={
            "tournaments": ("participate", "view"),
            "matches": ("view",),
            "stages": ("view",),
        },
    ),
    _role(
        RoleName.COMMON,
        description="Baseline role for every signed-in user; public read access.",
        grants={
            "tournaments": ("view",),
            "matches": ("view",),
            "stages": ("view",),
        },
    ),
)

SYSTEM_ROLE_BY_NAME: Mapping[RoleName, SystemRoleDef] = MappingProxyType(
    {definition.role: definition for definition in SYSTEM_ROLES}
)

_NO_GRANTS: Mapping[str, frozenset[str]] = MappingProxyType({})


def grants(role: RoleName) -> Mapping[str, frozenset[str]]:
    """Return the read-only resource → actions map granted by ``role``."""

    definition = SYSTEM_ROLE_BY_NAME.get(role)
    if definition is None:
        return _NO_GRANTS
    return definition.grants


def role_allows(role: RoleName, resource: str, action: str) -> bool:
    return action in grants(role).get(resource, ())


def permissions_for_role(role: RoleName) -> frozenset[str]:
    """Flatten a role's grants into permission keys."""

    return frozenset(
        f"{resource}.{action}"
        for resource, actions in grants(role).items()
        for action in actions
    )


__all__ = [
    "PERMISSIONS",
    "PERMISSION_REGISTRY",
    "RESOURCE_ACTIONS",
    "RegistryError",
    "SYSTEM_ROLES",
    "SYSTEM_ROLE_BY_NAME",
    "grants",
    "parse_permission",
    "permissions_for_role",
    "role_allows",
]
