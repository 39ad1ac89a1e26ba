"""Custom SQLAlchemy column types for composite and JSON text values."""
from __future__ import annotations

import json

from sqlalchemy.types import Text, TypeDecorator, UserDefinedType

from pgcdt.domain.records import Address, decode_address, encode_address


class _PGNamedType(UserDefinedType):
    """Column rendered with a raw PostgreSQL type name, no bind/result processing."""

    cache_ok = True

    def __init__(self, name: str) -> None:
        self.name = name

    def get_col_spec(self, **kw) -> str:
        return self.name


class AddressType(TypeDecorator):
    """Store an Address in the ``address`` composite column.

    On PostgreSQL the value is bound as its row literal and the server casts it
    to the composite type; other dialects (SQLite in tests) keep the literal as
    plain text.
    """

    cache_ok = True
    impl = Text

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(_PGNamedType(Address.sql_type_name))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        if isinstance(value, str):
            # re-encode so hand-written literals go through the field-order codec
            return encode_address(decode_address(value))
        return encode_address(value)

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        return decode_address(value)


class JSONText(TypeDecorator):
    """JSON document column that exchanges already-encoded JSON text.

    Rendered as JSONB on PostgreSQL. Drivers that parse JSONB results hand back
    Python objects; those are re-serialized so callers always receive text.
    """

    cache_ok = True
    impl = Text

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(_PGNamedType("JSONB"))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None or isinstance(value, str):
            return value
        raise TypeError(f"JSONText expects encoded JSON text, got {type(value)!r}")

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None or isinstance(value, str):
            return value
        return json.dumps(value)
