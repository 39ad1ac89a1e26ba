"""
Domain records and the codecs that move them in and out of store columns.

Nothing here imports SQLAlchemy or FastAPI; the db and routers packages adapt
these values to their layers.
"""

from .records import Address, Contact, Person, StructuredValue, decode_address, encode_address
from .phone_codec import decode_phone_numbers, encode_phone_numbers

__all__ = [
    "Address",
    "Contact",
    "Person",
    "StructuredValue",
    "decode_address",
    "encode_address",
    "decode_phone_numbers",
    "encode_phone_numbers",
]
