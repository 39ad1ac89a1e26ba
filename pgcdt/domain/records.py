"""Value records exchanged between routers, repositories and the store."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol, TypeVar

from .composite import CompositeReader, CompositeWriter

T = TypeVar("T", bound="StructuredValue")


class StructuredValue(Protocol):
    """A record stored as a composite column.

    Implementations write and read their fields in the exact order of the
    store-side ``CREATE TYPE`` definition.
    """

    sql_type_name: ClassVar[str]

    def encode_into(self, writer: CompositeWriter) -> None:
        ...

    @classmethod
    def decode_from(cls: type[T], reader: CompositeReader) -> T:
        ...


@dataclass(frozen=True)
class Address:
    """Postal address mapped to the ``address`` composite type."""

    sql_type_name: ClassVar[str] = "address"

    block_number: int = 0
    street_address: str = ""
    city: str = ""
    state: str = ""
    pin_code: int = 0

    def encode_into(self, writer: CompositeWriter) -> None:
        # block_no, street_address, city, state, pin_code
        writer.write_int(self.block_number)
        writer.write_string(self.street_address)
        writer.write_string(self.city)
        writer.write_string(self.state)
        writer.write_int(self.pin_code)

    @classmethod
    def decode_from(cls, reader: CompositeReader) -> "Address":
        block_number = reader.read_int()
        street_address = reader.read_string()
        city = reader.read_string()
        state = reader.read_string()
        pin_code = reader.read_int()
        return cls(block_number, street_address, city, state, pin_code)


@dataclass(frozen=True)
class Contact:
    name: str
    email: str
    phone_numbers: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Person:
    name: str
    age: int
    address: Address


def encode_address(address: Address) -> str:
    """Render an Address as its row literal."""
    writer = CompositeWriter()
    address.encode_into(writer)
    return writer.literal()


def decode_address(text: str) -> Address:
    """Parse a row literal into an Address, rejecting extra fields."""
    reader = CompositeReader(text)
    address = Address.decode_from(reader)
    reader.expect_end()
    return address
