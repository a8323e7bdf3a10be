"""
Unit tests for integration event stubs and the audit log
"""

from datetime import datetime, timezone

import pytest

from onboarding.catalog import Task
from onboarding.events import (
    AuditEvent,
    AuditLog,
    EventType,
    call_scheduling_event,
    record_sync_event,
    reminder_event,
)

NOW = datetime(2025, 3, 3, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def aunty_may(catalog):
    return catalog.get_persona("p1")


class TestReminderEvent:
    """Test reminder_event"""

    def test_payload(self, aunty_may, catalog):
        event = reminder_event(aunty_may, catalog.base_tasks[1], now=NOW)

        assert event.type == EventType.REMINDER
        assert event.when == NOW
        assert event.to == "Aunty May"
        assert event.payload == {
            "message": "Reminder: Read medication guide due in 4 day(s)",
            "channel": "PowerAutomateWebhook",
            "locale": "English",
        }

    def test_locale_follows_language(self, catalog):
        event = reminder_event(catalog.get_persona("p4"), Task("custom", "General check-in", 1))
        assert event.payload["locale"] == "Tiếng Việt"
        assert event.payload["message"] == "Reminder: General check-in due in 1 day(s)"

    def test_stamps_current_time(self, aunty_may, catalog):
        before = datetime.now(tz=timezone.utc)
        event = reminder_event(aunty_may, catalog.base_tasks[0])
        assert before <= event.when <= datetime.now(tz=timezone.utc)

    def test_custom_channel(self, aunty_may, catalog):
        event = reminder_event(aunty_may, catalog.base_tasks[0], channel="GraphAPI")
        assert event.payload["channel"] == "GraphAPI"


class TestRecordSyncEvent:
    """Test record_sync_event"""

    def test_fresh_record(self, aunty_may, store):
        event = record_sync_event(aunty_may, store.get("p1"), now=NOW)

        assert event.type == EventType.RECORD_SYNC
        assert event.payload["project_id"] == "DEMO-REDCAP-123"
        assert event.payload["patient"] == "Aunty May"
        assert event.payload["quiz_score"] is None
        assert event.payload["comprehension_flag"] is None
        assert event.payload["tasks"][0] == {"id": "t1", "completed": False, "ts": None}

    def test_completed_task_and_quiz(self, aunty_may, store, clock):
        store.complete_task("p1", "t1")
        store.submit_quiz("p1", {"q1": 0})
        event = record_sync_event(aunty_may, store.get("p1"), now=NOW)

        tasks = {t["id"]: t for t in event.payload["tasks"]}
        assert tasks["t1"]["completed"] is True
        assert tasks["t1"]["ts"] == "2025-03-03T09:00:00+00:00"
        assert event.payload["quiz_score"] == 0
        assert event.payload["comprehension_flag"] is True

    def test_payload_does_not_track_later_changes(self, aunty_may, store):
        event = record_sync_event(aunty_may, store.get("p1"), now=NOW)
        store.complete_task("p1", "t2")
        assert event.payload["tasks"][1]["completed"] is False


class TestCallSchedulingEvent:
    """Test call_scheduling_event"""

    def test_payload(self, aunty_may):
        event = call_scheduling_event(aunty_may, "Low quiz score", now=NOW)
        assert event.type == EventType.CALL_SCHEDULING
        assert event.payload == {
            "patient": "Aunty May",
            "reason": "Low quiz score",
            "urgency": "next_business_day",
        }

    def test_to_dict(self, aunty_may):
        data = call_scheduling_event(aunty_may, "Anxiety / low literacy support", now=NOW).to_dict()
        assert data["type"] == "healthdirect_call"
        assert data["when"] == "2025-03-03T09:30:00+00:00"
        assert data["to"] == "Aunty May"


class TestAuditLog:
    """Test AuditLog ordering"""

    @staticmethod
    def _event(n: int) -> AuditEvent:
        return AuditEvent(type=EventType.REMINDER, when=NOW, to=f"patient-{n}", payload={"n": n})

    def test_empty(self):
        log = AuditLog()
        assert len(log) == 0
        assert not log
        assert log.entries() == []

    def test_newest_first(self):
        log = AuditLog()
        a, b, c = self._event(1), self._event(2), self._event(3)
        for event in (a, b, c):
            log.append(event)

        assert log.entries() == [c, b, a]
        assert list(log) == [c, b, a]
        assert log.chronological() == [a, b, c]

    def test_no_deduplication(self):
        log = AuditLog()
        event = self._event(1)
        log.append(event)
        log.append(event)
        assert len(log) == 2

    def test_of_type(self, catalog):
        log = AuditLog()
        persona = catalog.get_persona("p2")
        log.append(reminder_event(persona, catalog.base_tasks[0], now=NOW))
        log.append(call_scheduling_event(persona, "check", now=NOW))
        assert [e.type for e in log.of_type(EventType.CALL_SCHEDULING)] == [EventType.CALL_SCHEDULING]

    def test_to_list(self):
        log = AuditLog()
        log.append(self._event(1))
        log.append(self._event(2))
        assert [e["payload"]["n"] for e in log.to_list()] == [2, 1]


class TestAuditEventImmutability:
    """Test that logged payloads cannot be rewritten"""

    def test_payload_rejects_assignment(self, aunty_may):
        event = call_scheduling_event(aunty_may, "Low quiz score", now=NOW)
        with pytest.raises(TypeError):
            event.payload["reason"] = "tampered"  # type: ignore[index]
        assert event.payload["reason"] == "Low quiz score"

    def test_nested_tasks_are_frozen(self, aunty_may, store):
        event = record_sync_event(aunty_may, store.get("p1"), now=NOW)

        assert isinstance(event.payload["tasks"], tuple)
        with pytest.raises(TypeError):
            event.payload["tasks"][0]["completed"] = True  # type: ignore[index]

    def test_source_dict_changes_do_not_leak(self):
        payload = {"n": 1, "items": [1, 2]}
        event = AuditEvent(type=EventType.REMINDER, when=NOW, to="patient", payload=payload)
        payload["n"] = 2
        payload["items"].append(3)

        assert event.payload["n"] == 1
        assert event.payload["items"] == (1, 2)

    def test_to_dict_returns_plain_copies(self, aunty_may, store):
        event = record_sync_event(aunty_may, store.get("p1"), now=NOW)
        data = event.to_dict()
        data["payload"]["tasks"][0]["completed"] = True

        assert isinstance(data["payload"], dict)
        assert isinstance(data["payload"]["tasks"], list)
        assert event.payload["tasks"][0]["completed"] is False
