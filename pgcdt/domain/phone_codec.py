"""
JSON codec for the label -> phone number directory of a contact.

The encoded text is always bound as a statement parameter; it is never spliced
into SQL.
"""
from __future__ import annotations

import json
from typing import Any, Mapping

from pgcdt.core.errors import PhoneNumberDecodingError, PhoneNumberEncodingError


def _check_entry(label: Any, number: Any) -> None:
    if not isinstance(label, str):
        raise PhoneNumberEncodingError(f"Phone label must be a string, got {type(label).__name__}")
    if isinstance(number, bool) or not isinstance(number, int):
        raise PhoneNumberEncodingError(
            f"Phone number for {label!r} must be an integer, got {type(number).__name__}"
        )


def encode_phone_numbers(phone_numbers: Mapping[str, int]) -> str:
    """Serialize the mapping as a JSON object, e.g. ``{"Home": 8899776612}``."""
    if not isinstance(phone_numbers, Mapping):
        raise PhoneNumberEncodingError(
            f"Phone numbers must be a mapping, got {type(phone_numbers).__name__}"
        )
    for label, number in phone_numbers.items():
        _check_entry(label, number)
    return json.dumps(dict(phone_numbers), separators=(", ", ": "))


def decode_phone_numbers(value: Any) -> dict[str, int]:
    """Turn a stored phone_numbers value back into a mapping.

    Accepts JSON text, a mapping already decoded by the driver, or the legacy
    double-encoded form where the column holds a JSON string whose content is
    the JSON object.
    """
    if value is None:
        return {}
    decoded = value
    # at most one extra layer for legacy rows
    for _ in range(2):
        if not isinstance(decoded, str):
            break
        try:
            decoded = json.loads(decoded)
        except json.JSONDecodeError as exc:
            raise PhoneNumberDecodingError(f"Invalid phone_numbers JSON: {exc}") from exc
    if not isinstance(decoded, Mapping):
        raise PhoneNumberDecodingError(
            f"phone_numbers must hold a JSON object, got {type(decoded).__name__}"
        )
    result: dict[str, int] = {}
    for label, number in decoded.items():
        if isinstance(number, bool) or not isinstance(number, int):
            raise PhoneNumberDecodingError(f"Phone number for {label!r} is not an integer: {number!r}")
        result[str(label)] = number
    return result
