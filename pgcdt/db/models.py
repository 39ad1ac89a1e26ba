"""SQLAlchemy models for the contacts and users demo tables."""
from __future__ import annotations

from sqlalchemy import DDL, Column, Integer, String, event

from .session import Base
from .types import AddressType, JSONText

ADDRESS_TYPE_DDL = """
DO $$ BEGIN
    CREATE TYPE address AS (
        block_no numeric,
        street_address varchar,
        city varchar,
        state varchar,
        pin_code numeric
    );
EXCEPTION WHEN duplicate_object THEN NULL;
END $$;
"""


class ContactRow(Base):
    __tablename__ = "contacts"

    email = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=True)
    phone_numbers = Column(JSONText(), nullable=True)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    address = Column(AddressType(), nullable=True)


event.listen(
    UserRow.__table__,
    "before_create",
    DDL(ADDRESS_TYPE_DDL).execute_if(dialect="postgresql"),
)
event.listen(
    UserRow.__table__,
    "after_drop",
    DDL("DROP TYPE IF EXISTS address").execute_if(dialect="postgresql"),
)
