"""Request payloads accepted by the routers."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from pgcdt.domain.records import Contact


class ContactPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    # strict: no bool/str/float coercion before the phone codec sees the values
    phone_numbers: dict[str, StrictInt] = Field(default_factory=dict, alias="phoneNumbers")

    def to_record(self) -> Contact:
        return Contact(name=self.name, email=self.email, phone_numbers=dict(self.phone_numbers))
