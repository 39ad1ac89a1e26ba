from __future__ import annotations

from fastapi import APIRouter

from pgcdt.domain.records import Address, Person

router = APIRouter(prefix="/persons", tags=["persons"])

SAMPLE_PEOPLE = (
    Person("Julie", 23, Address(201, "Bartelt Junction", "Duke", "NY", 51023)),
)


def _address_payload(address: Address) -> dict:
    # keys follow the camelCase JSON the demo has always served
    return {
        "flatNo": address.block_number,
        "streetName": address.street_address,
        "city": address.city,
        "state": address.state,
        "pinCode": address.pin_code,
    }


@router.get("")
def list_persons():
    return [
        {"name": person.name, "age": person.age, "address": _address_payload(person.address)}
        for person in SAMPLE_PEOPLE
    ]
