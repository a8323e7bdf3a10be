"""Derived metrics for the clinician dashboard.

Everything here is a pure function of a persona, its record and the
thresholds; nothing is cached, so callers recompute after every change.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from .catalog import Persona
from .logging import get_logger, timed
from .records import PatientRecord
from .settings import Thresholds
from .util import percent

logger = get_logger(__name__)


@dataclass(frozen=True)
class PersonaMetrics:
    """One dashboard row."""

    persona_id: str
    name: str
    adherence: int
    comprehension: int
    risk_flags: int

    @property
    def flagged(self) -> bool:
        return self.risk_flags > 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DashboardSummary:
    """Cohort-level roll-up of the dashboard rows."""

    personas: int
    mean_adherence: float
    mean_comprehension: float
    flagged_personas: int


def adherence_rate(record: PatientRecord) -> int:
    """Percentage of the record's tasks that are complete (0 for an empty task list)."""
    return percent(record.completed_count, len(record.tasks))


def quiz_score(record: PatientRecord) -> int:
    return record.quiz_score if record.quiz_score is not None else 0


def risk_flag_count(
    comprehension_flag: bool | None,
    adherence: int,
    static_risk: int,
    thresholds: Thresholds | None = None,
) -> int:
    """Count of independent risk indicators.

    One each for: low comprehension, adherence under the cutoff, static risk
    over the cutoff.
    """
    thresholds = thresholds or Thresholds()
    return (
        int(bool(comprehension_flag))
        + int(adherence < thresholds.adherence_cutoff)
        + int(static_risk > thresholds.risk_cutoff)
    )


def compute_metrics(
    persona: Persona,
    record: PatientRecord,
    thresholds: Thresholds | None = None,
) -> PersonaMetrics:
    adherence = adherence_rate(record)
    return PersonaMetrics(
        persona_id=persona.id,
        name=persona.name,
        adherence=adherence,
        comprehension=quiz_score(record),
        risk_flags=risk_flag_count(record.comprehension_flag, adherence, persona.risk, thresholds),
    )


@timed()
def build_dashboard(
    personas: Sequence[Persona],
    records: Mapping[str, PatientRecord],
    thresholds: Thresholds | None = None,
) -> list[PersonaMetrics]:
    """Metrics for every persona, in catalog order.

    A persona without a record is reported as a fresh record with no tasks.
    """
    rows = []
    for persona in personas:
        record = records.get(persona.id) or PatientRecord(persona_id=persona.id)
        rows.append(compute_metrics(persona, record, thresholds))
    return rows


def summarize_dashboard(rows: Sequence[PersonaMetrics]) -> DashboardSummary:
    if not rows:
        return DashboardSummary(personas=0, mean_adherence=0.0, mean_comprehension=0.0, flagged_personas=0)
    return DashboardSummary(
        personas=len(rows),
        mean_adherence=round(sum(r.adherence for r in rows) / len(rows), 1),
        mean_comprehension=round(sum(r.comprehension for r in rows) / len(rows), 1),
        flagged_personas=sum(1 for r in rows if r.flagged),
    )
