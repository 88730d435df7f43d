"""DB package exports."""

from .base import NAMING_CONVENTION, Base, TimestampMixin, UUIDPrimaryKeyMixin, metadata, utc_now
from .engine import get_engine
from .session import get_sessionmaker, reset_database_state, session_scope
from .types import RoleClaims, UTCDateTime, UUIDType

__all__ = [
    "Base",
    "metadata",
    "NAMING_CONVENTION",
    "utc_now",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    "RoleClaims",
    "UUIDType",
    "UTCDateTime",
    "get_engine",
    "get_sessionmaker",
    "reset_database_state",
    "session_scope",
]
