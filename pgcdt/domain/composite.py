"""
Field reader/writer for PostgreSQL composite (row) values.

A composite value travels as a row literal such as
``(201,"Bartelt Junction",Duke,NY,51023)``. The writer appends fields in call
order and the reader hands them back in the same order, so a record type only
has to read and write its fields in the sequence declared by ``CREATE TYPE``.
"""
from __future__ import annotations

from typing import Optional

from pgcdt.core.errors import CompositeDecodeError, CompositeEncodeError

_SPECIAL = set('"\\(),')


def _quote(value: str) -> str:
    if value and not any(ch in _SPECIAL or ch.isspace() for ch in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '""')
    return f'"{escaped}"'


def _split_fields(text: str) -> list[Optional[str]]:
    """Split a row literal into raw field values; ``None`` marks SQL NULL."""
    stripped = (text or "").strip()
    if len(stripped) < 2 or stripped[0] != "(" or stripped[-1] != ")":
        raise CompositeDecodeError(f"Malformed row literal: {text!r}")
    inner = stripped[1:-1]
    fields: list[Optional[str]] = []
    buf: list[str] = []
    seen_any = False
    in_quotes = False
    i = 0
    n = len(inner)
    while i < n:
        ch = inner[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and inner[i + 1] == '"':
                    buf.append('"')
                    i += 2
                    continue
                in_quotes = False
            elif ch == "\\":
                if i + 1 >= n:
                    raise CompositeDecodeError(f"Dangling escape in row literal: {text!r}")
                buf.append(inner[i + 1])
                i += 2
                continue
            else:
                buf.append(ch)
        elif ch == '"':
            in_quotes = True
            seen_any = True
        elif ch == "\\":
            if i + 1 >= n:
                raise CompositeDecodeError(f"Dangling escape in row literal: {text!r}")
            buf.append(inner[i + 1])
            seen_any = True
            i += 2
            continue
        elif ch == ",":
            fields.append("".join(buf) if seen_any else None)
            buf = []
            seen_any = False
        else:
            buf.append(ch)
            seen_any = True
        i += 1
    if in_quotes:
        raise CompositeDecodeError(f"Unterminated quote in row literal: {text!r}")
    fields.append("".join(buf) if seen_any else None)
    return fields


class CompositeWriter:
    """Collects composite fields in write order and renders the row literal."""

    def __init__(self) -> None:
        self._fields: list[str] = []

    def write_int(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CompositeEncodeError(
                f"Field {len(self._fields) + 1}: expected int, got {type(value).__name__}"
            )
        self._fields.append(str(value))

    def write_string(self, value: str) -> None:
        if not isinstance(value, str):
            raise CompositeEncodeError(
                f"Field {len(self._fields) + 1}: expected str, got {type(value).__name__}"
            )
        self._fields.append(_quote(value))

    def literal(self) -> str:
        return "(" + ",".join(self._fields) + ")"


class CompositeReader:
    """Sequential access to the fields of a row literal."""

    def __init__(self, text: str) -> None:
        self._fields = _split_fields(text)
        self._pos = 0

    def _next(self) -> str:
        if self._pos >= len(self._fields):
            raise CompositeDecodeError(
                f"Read past the last field (row has {len(self._fields)} fields)"
            )
        raw = self._fields[self._pos]
        self._pos += 1
        if raw is None:
            raise CompositeDecodeError(f"Field {self._pos} is NULL")
        return raw

    def read_int(self) -> int:
        raw = self._next()
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise CompositeDecodeError(f"Field {self._pos}: expected integer, got {raw!r}") from exc

    def read_string(self) -> str:
        return self._next()

    def expect_end(self) -> None:
        remaining = len(self._fields) - self._pos
        if remaining:
            raise CompositeDecodeError(f"{remaining} unread field(s) left in row")
