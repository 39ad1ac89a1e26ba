#!/usr/bin/env python3
"""
Compare EXPLAIN ANALYZE plans for composite and JSONB columns on PostgreSQL.

Recreates the demo schema, seeds users/contacts and runs each scenario with and
without an index, printing row counts and planning/execution times.

Usage:
  DATABASE_URL=postgresql://postgres@localhost/pg_cdt python scripts/compare_plans.py [--rows 20] [--keep]
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field

from sqlalchemy import insert, text

from pgcdt.core.config import get_settings
from pgcdt.core.logging_config import configure_logging
from pgcdt.db.create_tables import create_all, drop_all
from pgcdt.db.models import ContactRow
from pgcdt.db.query_plan import QueryPlan, explain_analyze
from pgcdt.db.session import get_session
from pgcdt.domain.records import Address, Contact
from pgcdt.repositories.sql_repository import ContactRepository, UserRepository

CITIES = ("Duke", "Albany", "Buffalo", "Ithaca")


@dataclass
class Scenario:
    label: str
    sql: str
    params: dict = field(default_factory=dict)
    disable_seqscan: bool = False
    expected_rows: int | None = None


def seed_users(rows: int) -> int:
    users = [
        (
            f"user-{i}",
            Address(70000 + i, f"{i} Bartelt Junction", CITIES[i % len(CITIES)], "NY", 25000 + i),
        )
        for i in range(rows)
    ]
    return UserRepository().persist(users)


def seed_contact_objects(rows: int) -> int:
    contacts = [
        Contact(
            name=f"contact-{i}",
            email=f"contact{i}@xyz.com",
            phone_numbers={("Home" if i % 2 == 0 else "Work"): 9876543210 + i},
        )
        for i in range(rows)
    ]
    return ContactRepository().persist(contacts)


def seed_contact_arrays(rows: int) -> int:
    # phone_numbers as an array of {"tag", "value"} objects instead of a mapping
    payload = []
    for i in range(rows):
        tag = "Home" if i % 2 == 0 else "Work"
        numbers = [{"tag": tag, "value": "9876543210"}]
        payload.append({"name": f"contact-{i}", "email": f"contact{i}@xyz.com", "phone_numbers": json.dumps(numbers)})
    with get_session() as session:
        session.execute(insert(ContactRow.__table__), payload)
        session.commit()
    return len(payload)


def execute(statement: str) -> None:
    with get_session() as session:
        session.execute(text(statement))
        session.commit()


def run(scenario: Scenario) -> QueryPlan:
    with get_session() as session:
        if scenario.disable_seqscan:
            session.execute(text("SET LOCAL enable_seqscan TO off"))
        rows = session.execute(text(scenario.sql), scenario.params).all()
        plan = explain_analyze(
            session,
            scenario.sql,
            label=scenario.label,
            params=scenario.params,
            disable_seqscan=scenario.disable_seqscan,
        )
        session.rollback()
    status = ""
    if scenario.expected_rows is not None and scenario.expected_rows != len(rows):
        status = f" (expected {scenario.expected_rows})"
    print(f"{scenario.label}: rows={len(rows)}{status}")
    print(f"  Plan time = {plan.timings.planning_ms} ms")
    print(f"  Execution time = {plan.timings.execution_ms} ms")
    print(f"  Index used = {plan.uses_index}")
    return plan


def main() -> None:
    ap = argparse.ArgumentParser(description="Compare query plans for composite and JSONB columns")
    ap.add_argument("--rows", type=int, default=20, help="rows seeded per table (default: 20)")
    ap.add_argument("--keep", action="store_true", help="keep the schema after running")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    if args.rows < 2:
        raise SystemExit("--rows must be at least 2")
    half = (args.rows + 1) // 2

    drop_all()
    create_all()
    try:
        seed_users(args.rows)
        run(Scenario("CDT_OBJECT_WITHOUT_INDEX", "SELECT * FROM users", expected_rows=args.rows))
        execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_address ON users (address)")
        run(
            Scenario(
                "CDT_OBJECT_WITH_INDEX",
                "SELECT * FROM users WHERE (address).pin_code = :pin",
                params={"pin": 25001},
                disable_seqscan=True,
                expected_rows=1,
            )
        )

        seed_contact_objects(args.rows)
        run(Scenario("JSON_OBJECT_WITHOUT_INDEX", "SELECT phone_numbers FROM contacts", expected_rows=args.rows))
        execute("CREATE INDEX IF NOT EXISTS idx_phone_numbers ON contacts USING gin (phone_numbers)")
        run(
            Scenario(
                "JSON_OBJECT_WITH_INDEX",
                "SELECT phone_numbers FROM contacts WHERE phone_numbers ? 'Home'",
                disable_seqscan=True,
                expected_rows=half,
            )
        )

        execute("DROP INDEX IF EXISTS idx_phone_numbers")
        execute("DELETE FROM contacts")
        seed_contact_arrays(args.rows)
        run(Scenario("JSON_ARRAY_WITHOUT_INDEX", "SELECT phone_numbers FROM contacts", expected_rows=args.rows))
        # ->> cannot reach into array elements, unnesting is the only way
        run(
            Scenario(
                "JSON_ARRAY_KEY_LOOKUP",
                "SELECT phone_numbers FROM contacts WHERE phone_numbers->>'tag' = 'Home'",
                disable_seqscan=True,
                expected_rows=0,
            )
        )
        execute("CREATE INDEX idx_phone_numbers ON contacts USING gin (phone_numbers)")
        run(Scenario("JSON_ARRAY_WITH_INDEX", "SELECT phone_numbers FROM contacts", expected_rows=args.rows))
        run(
            Scenario(
                "JSON_ARRAY_CONTAINMENT_WITH_INDEX",
                """SELECT phone_numbers FROM contacts WHERE phone_numbers @> '[{"tag":"Home"}]'""",
                disable_seqscan=True,
                expected_rows=half,
            )
        )
        run(
            Scenario(
                "JSON_ARRAY_UNNEST_WITH_INDEX",
                """SELECT obj.val->>'value' AS number
                   FROM contacts
                   JOIN LATERAL jsonb_array_elements(contacts.phone_numbers) obj(val) ON obj.val->>'tag' = 'Work'
                   WHERE contacts.phone_numbers @> '[{"tag":"Work"}]'""",
                disable_seqscan=True,
                expected_rows=args.rows - half,
            )
        )
    finally:
        if not args.keep:
            drop_all()


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
