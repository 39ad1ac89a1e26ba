"""
Repository tests against a temporary SQLite database.
"""
from __future__ import annotations

import json

import pytest
from sqlalchemy import inspect, insert
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pgcdt.core.errors import CompositeDecodeError, PhoneNumberEncodingError
from pgcdt.db.create_tables import create_all, drop_all
from pgcdt.db.models import ContactRow
from pgcdt.db.session import get_engine, get_session
from pgcdt.db.types import AddressType
from pgcdt.domain.records import Address, Contact
from pgcdt.repositories.sql_repository import ContactRepository, UserRepository


def test_persist_then_fetch_includes_julie(temp_db):
    repo = ContactRepository()
    count = repo.persist([Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612})])
    assert count == 1

    rows = repo.fetch_all()
    julie = next(row for row in rows if row["email"] == "julie@xyz.com")
    assert julie["name"] == "Julie Dsouza"
    assert julie["phone_numbers"]["Home"] == 8899776612


def test_two_contacts_in_one_batch_count_two(temp_db):
    repo = ContactRepository()
    count = repo.persist(
        [
            Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612}),
            Contact("John Doe", "john@xyz.com", {"Work": 9876543210, "Home": 1234567890}),
        ]
    )
    assert count == 2
    assert {row["email"] for row in repo.fetch_all()} == {"julie@xyz.com", "john@xyz.com"}


def test_persist_returns_list_length_for_distinct_emails(temp_db):
    repo = ContactRepository()
    contacts = [Contact(f"c{i}", f"c{i}@xyz.com", {"Home": 1000 + i}) for i in range(7)]
    assert repo.persist(contacts) == len(contacts)
    assert len(repo.fetch_all()) == len(contacts)


def test_empty_batch_is_a_noop(temp_db):
    assert ContactRepository().persist([]) == 0


def test_stored_column_holds_plain_json_text(temp_db):
    ContactRepository().persist([Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612})])
    with get_session() as session:
        stored = session.query(ContactRow.phone_numbers).scalar()
    assert json.loads(stored) == {"Home": 8899776612}


def test_invalid_row_fails_whole_batch(temp_db):
    repo = ContactRepository()
    with pytest.raises(PhoneNumberEncodingError):
        repo.persist(
            [
                Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612}),
                Contact("Broken", "broken@xyz.com", {"Home": "not-a-number"}),  # type: ignore[dict-item]
            ]
        )
    assert repo.fetch_all() == []


def test_duplicate_email_rolls_back_batch(temp_db):
    repo = ContactRepository()
    with pytest.raises(IntegrityError):
        repo.persist(
            [
                Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612}),
                Contact("Julie Again", "julie@xyz.com", {"Work": 9876543210}),
            ]
        )
    assert repo.fetch_all() == []


def test_fetch_decodes_legacy_double_encoded_rows(temp_db):
    legacy = json.dumps(json.dumps({"Work": 9876543210}))
    with get_session() as session:
        session.execute(
            insert(ContactRow.__table__),
            [{"name": "Old Row", "email": "old@xyz.com", "phone_numbers": legacy}],
        )
        session.commit()
    rows = ContactRepository().fetch_all()
    assert rows == [{"name": "Old Row", "email": "old@xyz.com", "phone_numbers": {"Work": 9876543210}}]


def test_users_round_trip_addresses(temp_db):
    repo = UserRepository()
    addresses = [
        Address(70897, "Bartelt Junction", "Duke", "NY", 51023),
        Address(78126, '12 "Main" St, rear', "Albany", "NY", 25130),
        Address(),
    ]
    assert repo.persist([(f"user-{i}", a) for i, a in enumerate(addresses)]) == 3

    fetched = repo.fetch_addresses()
    assert fetched == addresses
    assert fetched[0].block_number == 70897
    assert fetched[1].block_number == 78126


def test_create_tables_rebuilds_schema(temp_db):
    drop_all()
    assert inspect(get_engine()).get_table_names() == []
    create_all()
    assert set(inspect(get_engine()).get_table_names()) == {"contacts", "users"}


def test_hostile_text_survives_the_store(temp_db):
    repo = ContactRepository()
    contacts = [
        Contact("O'Neil \"desk\"", "oneil@xyz.com", {'O\'Neil "desk"': 8899776612}),
        Contact("'); DROP TABLE contacts; --", "drop@xyz.com", {"'); DROP TABLE contacts; --": 1}),
        Contact("back\\slash", "slash@xyz.com", {"\\\"}": 2}),
    ]
    assert repo.persist(contacts) == 3

    by_email = {row["email"]: row for row in repo.fetch_all()}
    for contact in contacts:
        row = by_email[contact.email]
        assert row["name"] == contact.name
        assert row["phone_numbers"] == contact.phone_numbers
    assert "contacts" in inspect(get_engine()).get_table_names()


def _track_session_close(monkeypatch) -> list:
    closed: list = []
    original_close = Session.close

    def tracking_close(self):
        closed.append(self)
        original_close(self)

    monkeypatch.setattr(Session, "close", tracking_close)
    return closed


def test_session_closed_when_persist_fails(temp_db, monkeypatch):
    closed = _track_session_close(monkeypatch)
    repo = ContactRepository()
    with pytest.raises(IntegrityError):
        repo.persist(
            [
                Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612}),
                Contact("Julie Again", "julie@xyz.com", {"Work": 9876543210}),
            ]
        )
    assert len(closed) == 1


def test_session_closed_after_each_call(temp_db, monkeypatch):
    closed = _track_session_close(monkeypatch)
    repo = ContactRepository()
    repo.persist([Contact("Julie Dsouza", "julie@xyz.com", {"Home": 8899776612})])
    repo.fetch_all()
    assert len(closed) == 2


def test_address_column_checks_literal_text():
    column_type = AddressType()
    dialect = sqlite.dialect()
    assert column_type.process_bind_param("(201, Bartelt Junction ,Duke,NY,51023)", dialect) == (
        '(201," Bartelt Junction ",Duke,NY,51023)'
    )
    with pytest.raises(CompositeDecodeError):
        column_type.process_bind_param("(Bartelt Junction,201,Duke,NY,51023)", dialect)
