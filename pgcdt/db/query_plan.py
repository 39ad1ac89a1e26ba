"""
EXPLAIN ANALYZE helpers used to compare plans for composite and JSONB columns.

PostgreSQL reports ``Planning Time: 0.061 ms`` and ``Execution Time: 0.020 ms``
as the last lines of the plan; those are pulled out so scenarios can be compared
side by side.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from pgcdt.core.errors import UnsupportedDialectError

logger = logging.getLogger(__name__)

_TIMING_RE = re.compile(r"^\s*(Planning|Execution)\s+Time:\s*([0-9]+(?:\.[0-9]+)?)\s*ms", re.IGNORECASE)


@dataclass(frozen=True)
class PlanTimings:
    planning_ms: Optional[float] = None
    execution_ms: Optional[float] = None


@dataclass
class QueryPlan:
    label: str
    lines: list[str] = field(default_factory=list)
    timings: PlanTimings = field(default_factory=PlanTimings)

    @property
    def uses_index(self) -> bool:
        return any("Index" in line and "Scan" in line for line in self.lines)


def parse_plan_timings(lines: Iterable[str]) -> PlanTimings:
    planning: Optional[float] = None
    execution: Optional[float] = None
    for line in lines:
        match = _TIMING_RE.match(line or "")
        if not match:
            continue
        value = float(match.group(2))
        if match.group(1).lower() == "planning":
            planning = value
        else:
            execution = value
    return PlanTimings(planning_ms=planning, execution_ms=execution)


def _require_postgres(session: Session) -> None:
    dialect = session.get_bind().dialect.name
    if dialect != "postgresql":
        raise UnsupportedDialectError(f"EXPLAIN ANALYZE helpers need PostgreSQL, got {dialect!r}")


def explain_analyze(
    session: Session,
    sql: str,
    *,
    label: str | None = None,
    params: Mapping[str, object] | None = None,
    disable_seqscan: bool = False,
) -> QueryPlan:
    """Run ``EXPLAIN ANALYZE`` for a trusted, hand-written query."""
    _require_postgres(session)
    if disable_seqscan:
        session.execute(text("SET LOCAL enable_seqscan TO off"))
    rows = session.execute(text("EXPLAIN ANALYZE " + sql), dict(params or {})).scalars().all()
    lines = [str(row) for row in rows]
    plan = QueryPlan(label=label or sql, lines=lines, timings=parse_plan_timings(lines))
    logger.info(
        "%s: plan=%s ms execution=%s ms index=%s",
        plan.label,
        plan.timings.planning_ms,
        plan.timings.execution_ms,
        plan.uses_index,
    )
    return plan
