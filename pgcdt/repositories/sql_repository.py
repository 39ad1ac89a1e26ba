"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from sqlalchemy import insert, select

from pgcdt.db.models import ContactRow, UserRow
from pgcdt.db.session import get_session
from pgcdt.domain.phone_codec import decode_phone_numbers, encode_phone_numbers
from pgcdt.domain.records import Address, Contact

logger = logging.getLogger(__name__)


def _affected(rowcount: int, batch_size: int) -> int:
    # some drivers report -1 for executemany
    return rowcount if rowcount is not None and rowcount >= 0 else batch_size


class ContactRepository:
    """Batch insert and full scan over the ``contacts`` table."""

    def persist(self, contacts: Sequence[Contact]) -> int:
        # encode everything up front so a bad row aborts before the store is touched
        rows = [
            {
                "name": contact.name,
                "email": contact.email,
                "phone_numbers": encode_phone_numbers(contact.phone_numbers),
            }
            for contact in contacts
        ]
        if not rows:
            return 0
        with get_session() as session:
            result = session.execute(insert(ContactRow.__table__), rows)
            count = _affected(result.rowcount, len(rows))
            session.commit()
        logger.debug("Inserted %d contact row(s)", count)
        return count

    def fetch_all(self) -> list[dict]:
        table = ContactRow.__table__
        with get_session() as session:
            rows = session.execute(select(table.c.name, table.c.email, table.c.phone_numbers)).mappings().all()
        contacts = [
            {
                "name": row["name"],
                "email": row["email"],
                "phone_numbers": decode_phone_numbers(row["phone_numbers"]),
            }
            for row in rows
        ]
        logger.debug("Fetched %d contact row(s)", len(contacts))
        return contacts


class UserRepository:
    """Users with an ``address`` composite column."""

    def persist(self, users: Iterable[tuple[str, Address]]) -> int:
        rows = [{"name": name, "address": address} for name, address in users]
        if not rows:
            return 0
        with get_session() as session:
            result = session.execute(insert(UserRow.__table__), rows)
            count = _affected(result.rowcount, len(rows))
            session.commit()
        logger.debug("Inserted %d user row(s)", count)
        return count

    def fetch_addresses(self) -> list[Address]:
        table = UserRow.__table__
        with get_session() as session:
            return list(session.execute(select(table.c.address).order_by(table.c.id)).scalars().all())
