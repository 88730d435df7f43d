"""Normalization of external role strings into canonical ``RoleName`` values."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from rms_api.core.rbac.types import FALLBACK_ROLE, RoleName

logger = logging.getLogger(__name__)

ROLE_ALIASES: Mapping[str, RoleName] = MappingProxyType(
    {
        **{role.value: role for role in RoleName},
        "TOURNAMENT_SCORING_OFFICER": RoleName.TSO,
        "QUEUE_MANAGER": RoleName.QUEUER,
        "ADMINISTRATOR": RoleName.ADMIN,
        "SUPER_ADMIN": RoleName.ADMIN,
        "SUPERADMIN": RoleName.ADMIN,
    }
)


def normalize_role_name(raw: object) -> RoleName | None:
    """Map ``raw`` onto a canonical role, or ``None`` when unrecognized.

    Hyphens and case are ignored (``"head-referee"`` → ``HEAD_REFEREE``) and
    legacy aliases resolve to their canonical role. Unknown strings are
    dropped rather than turned into new roles.
    """

    if isinstance(raw, RoleName):
        return raw
    if not isinstance(raw, str):
        return None

    candidate = raw.strip()
    if not candidate:
        return None

    resolved = ROLE_ALIASES.get(candidate)
    if resolved is not None:
        return resolved

    resolved = ROLE_ALIASES.get(candidate.replace("-", "_").upper())
    if resolved is None:
        logger.debug("rbac.role.unrecognized", extra={"raw_role": candidate})
    return resolved


def normalize_role_names(values: object) -> frozenset[RoleName]:
    """Normalize a single role string or an iterable of them.

    ``None`` yields an empty set; unrecognized entries are skipped.
    """

    if values is None:
        return frozenset()
    if isinstance(values, (str, RoleName)):
        candidates: Iterable[object] = (values,)
    elif isinstance(values, Iterable):
        candidates = values
    else:
        return frozenset()

    resolved: set[RoleName] = set()
    for value in candidates:
        role = normalize_role_name(value)
        if role is not None:
            resolved.add(role)
    return frozenset(resolved)


def resolve_app_role(value: object, fallback: RoleName = FALLBACK_ROLE) -> RoleName:
    """Normalize a primary role attribute, falling back to ``fallback``."""

    return normalize_role_name(value) or fallback


__all__ = [
    "ROLE_ALIASES",
    "normalize_role_name",
    "normalize_role_names",
    "resolve_app_role",
]
