"""Custom SQLAlchemy column types for portability."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.types import CHAR, JSON, String, TypeDecorator

# Decimal digits of the largest u128 amount (2**128 - 1).
AMOUNT_DIGITS = 39


class GUID(TypeDecorator):
    """Platform-independent GUID/UUID type."""

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect):
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value: Any, dialect):
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))


class JSONType(TypeDecorator):
    """JSON type that uses JSONB when supported."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return super().load_dialect_impl(dialect)


class Amount(TypeDecorator):
    """Arbitrary-size non-negative integer stored as a decimal string.

    SQLite has no integer type wide enough for 128-bit balances, so amounts are
    persisted as text on every dialect and converted back to ``int`` on load.
    """

    impl = String(AMOUNT_DIGITS)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect):
        if value is None:
            return value
        return str(int(value))

    def process_result_value(self, value: Any, dialect):
        if value is None:
            return value
        return int(value)
