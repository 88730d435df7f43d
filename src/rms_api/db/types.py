"""Column types shared across RMS models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.types import CHAR, JSON, DateTime, TypeDecorator

__all__ = ["RoleClaims", "UTCDateTime", "UUIDType"]


class UUIDType(TypeDecorator):
    """UUID stored natively on PostgreSQL and as 36-char text elsewhere."""

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect: Any):
        if dialect.name in {"postgresql", "postgres"}:
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect: Any):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value: Any, dialect: Any):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))

    @property
    def python_type(self) -> type[uuid.UUID]:
        return uuid.UUID


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime normalized to UTC (SQLite drops tzinfo)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def _as_utc(value: Any):
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=UTC)
            return value.astimezone(UTC)
        return value

    def process_bind_param(self, value: Any, dialect: Any):
        return self._as_utc(value)

    def process_result_value(self, value: Any, dialect: Any):
        return self._as_utc(value)


class RoleClaims(TypeDecorator):
    """Identity-provider role claim: a string, a list of strings, or null.

    Stored as JSON so both shapes survive a round trip unchanged.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple, set, frozenset)):
            return [str(item) for item in value]
        raise TypeError("Role claims must be a string, a list of strings, or None")
