"""Onboarding session: the explicit owner of all per-session state.

A session bundles one :class:`~onboarding.records.RecordStore`, one
:class:`~onboarding.events.AuditLog` and the settings in force. Its methods are
the actions a patient or clinician takes; each one mutates the store, builds
the matching integration event and appends it to the log.

Example:
    ```python
    from onboarding.session import OnboardingSession

    session = OnboardingSession()
    session.complete_task("p1", "t1")
    result = session.submit_quiz("p1", {"q1": 1, "q2": 2, "q3": 0})
    for row in session.dashboard():
        print(row.name, row.adherence, row.risk_flags)
    ```
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass

from .catalog import Catalog, ContentVariant, Persona, Task, TaskTemplate, default_catalog
from .config_export import IntegrationConfig
from .events import (
    AuditEvent,
    AuditLog,
    call_scheduling_event,
    record_sync_event,
    reminder_event,
)
from .exceptions import UnknownTaskError
from .logging import get_logger, log_context
from .metrics import PersonaMetrics, build_dashboard, compute_metrics
from .readability import estimate_grade_level, meets_grade_target
from .records import PatientRecord, QuizResult, RecordStore, score_answers
from .settings import Settings, get_settings
from .util import Clock, utc_now

logger = get_logger(__name__)

LOW_SCORE_REASON = "Low quiz score"
CHECK_IN_TASK = TaskTemplate("custom", "General check-in", 1)


@dataclass(frozen=True)
class ContentView:
    """Instructional text shown to a persona, with its grade check."""

    persona_id: str
    variant: ContentVariant
    text: str
    grade: int
    target_grade: int | None
    meets_target: bool


class OnboardingSession:
    """In-memory onboarding state for every persona in a catalog."""

    def __init__(
        self,
        settings: Settings | None = None,
        catalog: Catalog | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.catalog = catalog or default_catalog()
        self.session_id = uuid.uuid4().hex[:12]
        self._clock = clock or utc_now
        self.store = RecordStore.initialize(
            self.catalog.personas,
            self.catalog.base_tasks,
            questions=self.catalog.quiz,
            quiz_task_id=self.settings.quiz_task_id,
            comprehension_cutoff=self.settings.thresholds.comprehension_cutoff,
            clock=self._clock,
        )
        self.audit_log = AuditLog()
        logger.debug("Session started", session_id=self.session_id, personas=len(self.store))

    # -- event helpers ---------------------------------------------------

    def _log(self, event: AuditEvent) -> AuditEvent:
        self.audit_log.append(event)
        logger.debug("Audit event recorded", event_type=event.type.value, to=event.to)
        return event

    def _reminder(self, persona: Persona, task: Task | TaskTemplate) -> AuditEvent:
        return reminder_event(
            persona, task, channel=self.settings.integrations.reminder_channel, now=self._clock()
        )

    def _record_sync(self, persona: Persona, record: PatientRecord) -> AuditEvent:
        return record_sync_event(
            persona, record, project_id=self.settings.integrations.survey_project_id, now=self._clock()
        )

    def _call(self, persona: Persona, reason: str) -> AuditEvent:
        return call_scheduling_event(
            persona, reason, urgency=self.settings.integrations.call_urgency, now=self._clock()
        )

    # -- patient actions -------------------------------------------------

    def complete_task(self, persona_id: str, task_id: str) -> PatientRecord:
        """Complete a task; sends a reminder confirmation when it newly completes."""
        persona = self.catalog.get_persona(persona_id)
        with log_context(session_id=self.session_id):
            already_done = self._task_done(persona_id, task_id)
            record = self.store.complete_task(persona_id, task_id)
            if not already_done and self.settings.features.auto_reminders:
                self._log(self._reminder(persona, record.get_task(task_id)))
        return self.store.snapshot(persona_id)

    def _task_done(self, persona_id: str, task_id: str) -> bool:
        task = self.store.get(persona_id).get_task(task_id)
        return task is not None and task.completed

    def preview_score(self, answers: Mapping[str, int]) -> int:
        """Score the answers without storing anything."""
        return score_answers(self.catalog.quiz, answers)

    def submit_quiz(self, persona_id: str, answers: Mapping[str, int]) -> QuizResult:
        """Store a quiz result and push it to the survey system.

        Low comprehension also books a telehealth call. If the submission
        completed the linked quiz task, the usual reminder follows.
        """
        persona = self.catalog.get_persona(persona_id)
        with log_context(session_id=self.session_id):
            result = self.store.submit_quiz(persona_id, answers)
            record = self.store.get(persona_id)
            self._log(self._record_sync(persona, record))
            if result.comprehension_flag:
                self._log(self._call(persona, LOW_SCORE_REASON))
            if result.completed_task_id and self.settings.features.auto_reminders:
                self._log(self._reminder(persona, record.get_task(result.completed_task_id)))
        return result

    def update_notes(self, persona_id: str, notes: str | None) -> PatientRecord:
        self.catalog.get_persona(persona_id)
        self.store.update_notes(persona_id, notes)
        return self.store.snapshot(persona_id)

    def content_for(self, persona_id: str) -> ContentView:
        persona = self.catalog.get_persona(persona_id)
        variant, text = self.catalog.content_for(persona)
        grade = estimate_grade_level(text)
        target = self.settings.thresholds.target_grade if self.settings.features.require_grade_target else None
        return ContentView(
            persona_id=persona.id,
            variant=variant,
            text=text,
            grade=grade,
            target_grade=target,
            meets_target=meets_grade_target(grade, target),
        )

    # -- clinician interventions -------------------------------------------

    def send_reminder(self, persona_id: str, task_id: str | None = None) -> AuditEvent:
        """Send a reminder for one of the persona's tasks, or a general check-in."""
        persona = self.catalog.get_persona(persona_id)
        if task_id is None:
            task = CHECK_IN_TASK
        else:
            record = self.store.get(persona_id)
            task = record.get_task(task_id)
            if task is None:
                raise UnknownTaskError(persona_id, task_id, [t.id for t in record.tasks])
        return self._log(self._reminder(persona, task))

    def schedule_call(self, persona_id: str, reason: str) -> AuditEvent:
        persona = self.catalog.get_persona(persona_id)
        return self._log(self._call(persona, reason))

    def push_snapshot(self, persona_id: str) -> AuditEvent:
        persona = self.catalog.get_persona(persona_id)
        return self._log(self._record_sync(persona, self.store.snapshot(persona_id)))

    # -- read side -----------------------------------------------------------

    def snapshot(self, persona_id: str) -> PatientRecord:
        return self.store.snapshot(persona_id)

    def metrics_for(self, persona_id: str) -> PersonaMetrics:
        persona = self.catalog.get_persona(persona_id)
        return compute_metrics(persona, self.store.get(persona_id), self.settings.thresholds)

    def dashboard(self) -> list[PersonaMetrics]:
        records = {pid: self.store.get(pid) for pid in self.store}
        return build_dashboard(self.catalog.personas, records, self.settings.thresholds)

    def export_config(self) -> IntegrationConfig:
        return IntegrationConfig.from_settings(self.settings)
