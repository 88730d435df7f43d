"""Auth primitives shared by services and the HTTP layer."""

from .errors import AuthorizationError

__all__ = ["AuthorizationError"]
