"""Exception taxonomy for codecs and store helpers."""
from __future__ import annotations


class CodecError(Exception):
    """Base exception for value <-> column conversions."""


class CompositeDecodeError(CodecError):
    """Raised when a row literal cannot be read field by field."""


class CompositeEncodeError(CodecError):
    """Raised when a value cannot be written as a composite field."""


class PhoneNumberEncodingError(CodecError):
    """Raised when a phone-number mapping cannot be serialized to JSON."""


class PhoneNumberDecodingError(CodecError):
    """Raised when stored phone-number JSON cannot be turned back into a mapping."""


class UnsupportedDialectError(RuntimeError):
    """Raised when a PostgreSQL-only helper runs against another backend."""
