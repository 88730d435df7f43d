"""Shared auth/permission error types."""

from __future__ import annotations

from rms_api.core.rbac.types import PermissionScope


class AuthorizationError(Exception):
    """Raised when a user lacks a required permission."""

    def __init__(self, permission_key: str, *, scope: PermissionScope | None = None) -> None:
        self.permission_key = permission_key
        self.scope = scope or PermissionScope()
        super().__init__(f"Forbidden: missing permission '{permission_key}'")
