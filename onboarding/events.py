"""Stubbed outbound integration events and the session audit log.

The three constructors stand in for the survey system (REDCap record sync),
the messaging platform (Teams reminder through a Power Automate webhook) and
telehealth scheduling (Healthdirect call). They only build an
:class:`AuditEvent`; whether it is recorded is up to the caller, which appends
it to an :class:`AuditLog`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from .catalog import Persona, Task, TaskTemplate
from .records import PatientRecord
from .util import iso, utc_now

DEFAULT_CHANNEL = "PowerAutomateWebhook"
DEFAULT_PROJECT_ID = "DEMO-REDCAP-123"
DEFAULT_URGENCY = "next_business_day"


class EventType(StrEnum):
    """Kinds of outbound integration events."""

    REMINDER = "teams_reminder"
    RECORD_SYNC = "redcap_create"
    CALL_SCHEDULING = "healthdirect_call"


@dataclass(frozen=True)
class AuditEvent:
    """A record of one simulated outbound action.

    The payload is frozen on construction: mappings become read-only views and
    lists become tuples. :meth:`to_dict` returns plain, JSON-ready copies.
    """

    type: EventType
    when: datetime
    to: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _freeze(self.payload))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "when": self.when.isoformat(),
            "to": self.to,
            "payload": _thaw(self.payload),
        }


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def reminder_event(
    persona: Persona,
    task: Task | TaskTemplate,
    *,
    channel: str = DEFAULT_CHANNEL,
    now: datetime | None = None,
) -> AuditEvent:
    """Build a task reminder message for the persona's messaging channel."""
    return AuditEvent(
        type=EventType.REMINDER,
        when=now or utc_now(),
        to=persona.name,
        payload={
            "message": f"Reminder: {task.label} due in {task.due_days} day(s)",
            "channel": channel,
            "locale": persona.language_label,
        },
    )


def record_sync_event(
    persona: Persona,
    record: PatientRecord,
    *,
    project_id: str = DEFAULT_PROJECT_ID,
    now: datetime | None = None,
) -> AuditEvent:
    """Build a survey-system record push from the current state of a record."""
    return AuditEvent(
        type=EventType.RECORD_SYNC,
        when=now or utc_now(),
        to=persona.name,
        payload={
            "project_id": project_id,
            "patient": persona.name,
            "tasks": [
                {"id": t.id, "completed": t.completed, "ts": iso(t.completed_at)}
                for t in record.tasks
            ],
            "quiz_score": record.quiz_score,
            "comprehension_flag": record.comprehension_flag,
        },
    )


def call_scheduling_event(
    persona: Persona,
    reason: str,
    *,
    urgency: str = DEFAULT_URGENCY,
    now: datetime | None = None,
) -> AuditEvent:
    """Build a telehealth call request for the persona."""
    return AuditEvent(
        type=EventType.CALL_SCHEDULING,
        when=now or utc_now(),
        to=persona.name,
        payload={
            "patient": persona.name,
            "reason": reason,
            "urgency": urgency,
        },
    )


class AuditLog:
    """Append-only event log for one session.

    Iteration and :meth:`entries` yield the newest event first; entries are
    never reordered, deduplicated or removed.
    """

    def __init__(self) -> None:
        self._events: list[AuditEvent] = []

    def append(self, event: AuditEvent) -> AuditEvent:
        self._events.append(event)
        return event

    def entries(self) -> list[AuditEvent]:
        """Events newest first."""
        return list(reversed(self._events))

    def chronological(self) -> list[AuditEvent]:
        """Events in insertion order."""
        return list(self._events)

    def of_type(self, event_type: EventType) -> list[AuditEvent]:
        return [e for e in self.entries() if e.type == event_type]

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.entries()]

    def __iter__(self) -> Iterator[AuditEvent]:
        return reversed(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)
