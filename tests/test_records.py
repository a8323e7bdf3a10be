"""
Unit tests for patient records and the record store
"""

import pytest

from onboarding.exceptions import UnknownPersonaError, UnknownTaskError
from onboarding.records import PatientRecord, RecordStore, score_answers

ALL_CORRECT = {"q1": 1, "q2": 2, "q3": 1}
ALL_WRONG = {"q1": 0, "q2": 0, "q3": 0}


class TestInitialize:
    """Test RecordStore.initialize"""

    def test_one_record_per_persona(self, store, catalog):
        assert sorted(store) == catalog.persona_ids()
        assert len(store) == 4

    def test_fresh_record_state(self, store):
        record = store.get("p1")
        assert record.persona_id == "p1"
        assert [t.id for t in record.tasks] == ["t1", "t2", "t3", "t4"]
        assert record.quiz_score is None
        assert record.comprehension_flag is None
        assert record.notes is None

    def test_task_lists_are_independent(self, store, catalog):
        store.complete_task("p1", "t1")

        assert store.get("p1").get_task("t1").completed
        assert not store.get("p2").get_task("t1").completed
        assert store.get("p1").tasks[0] is not store.get("p2").tasks[0]

    def test_defaults_to_reference_templates_and_quiz(self):
        from onboarding.catalog import BASE_TASKS, PERSONAS

        store = RecordStore.initialize(PERSONAS)
        result = store.submit_quiz("p1", ALL_CORRECT)

        assert [t.id for t in store.get("p1").tasks] == [t.id for t in BASE_TASKS]
        assert result.score == 100
        assert result.comprehension_flag is False
        assert result.completed_task_id == "t3"

    def test_reference_quiz_scored_without_explicit_questions(self):
        from onboarding.catalog import BASE_TASKS, PERSONAS

        store = RecordStore.initialize(PERSONAS, BASE_TASKS)

        assert store.submit_quiz("p2", {"q1": 1, "q2": 2}).score == 67
        assert store.submit_quiz("p3", ALL_CORRECT).score == 100


class TestCompleteTask:
    """Test RecordStore.complete_task"""

    def test_completes_and_stamps(self, store, clock):
        record = store.complete_task("p2", "t2")
        task = record.get_task("t2")
        assert task.completed is True
        assert task.completed_at is not None
        assert clock.calls == 1

    def test_idempotent_keeps_first_timestamp(self, store):
        first = store.complete_task("p2", "t2").get_task("t2").completed_at
        second = store.complete_task("p2", "t2").get_task("t2").completed_at
        assert first == second

    def test_unknown_persona(self, store):
        with pytest.raises(UnknownPersonaError):
            store.complete_task("nobody", "t1")

    def test_unknown_task(self, store):
        with pytest.raises(UnknownTaskError) as exc_info:
            store.complete_task("p1", "t9")
        assert exc_info.value.task_id == "t9"

    def test_timestamp_iff_completed(self, store):
        store.complete_task("p3", "t4")
        for task in store.get("p3").tasks:
            assert (task.completed_at is not None) == task.completed


class TestSubmitQuiz:
    """Test RecordStore.submit_quiz"""

    def test_all_correct(self, store):
        result = store.submit_quiz("p1", ALL_CORRECT)

        assert result.score == 100
        assert result.comprehension_flag is False
        assert result.completed_task_id == "t3"
        record = store.get("p1")
        assert record.quiz_score == 100
        assert record.comprehension_flag is False
        assert record.get_task("t3").completed

    def test_all_wrong(self, store):
        result = store.submit_quiz("p1", ALL_WRONG)
        assert result.score == 0
        assert result.comprehension_flag is True

    def test_two_of_three_is_not_flagged(self, store):
        result = store.submit_quiz("p1", {"q1": 1, "q2": 2, "q3": 0})
        assert result.score == 67
        assert result.comprehension_flag is False

    def test_one_of_three_is_flagged(self, store):
        result = store.submit_quiz("p1", {"q1": 1})
        assert result.score == 33
        assert result.comprehension_flag is True

    def test_quiz_task_already_complete(self, store):
        first_ts = store.complete_task("p1", "t3").get_task("t3").completed_at
        result = store.submit_quiz("p1", ALL_CORRECT)
        assert result.completed_task_id is None
        assert store.get("p1").get_task("t3").completed_at == first_ts

    def test_resubmission_overwrites_score(self, store):
        store.submit_quiz("p1", ALL_WRONG)
        result = store.submit_quiz("p1", ALL_CORRECT)
        assert result.completed_task_id is None
        assert store.get("p1").quiz_score == 100
        assert store.get("p1").comprehension_flag is False

    def test_linkage_disabled(self, catalog, clock):
        store = RecordStore.initialize(
            catalog.personas, catalog.base_tasks, questions=catalog.quiz, quiz_task_id=None, clock=clock
        )
        result = store.submit_quiz("p1", ALL_CORRECT)
        assert result.completed_task_id is None
        assert not store.get("p1").get_task("t3").completed

    def test_linkage_to_other_task(self, catalog, clock):
        store = RecordStore.initialize(
            catalog.personas, catalog.base_tasks, questions=catalog.quiz, quiz_task_id="t2", clock=clock
        )
        result = store.submit_quiz("p1", ALL_CORRECT)
        assert result.completed_task_id == "t2"
        assert not store.get("p1").get_task("t3").completed

    def test_custom_cutoff(self, catalog, clock):
        store = RecordStore.initialize(
            catalog.personas, catalog.base_tasks, questions=catalog.quiz, comprehension_cutoff=80, clock=clock
        )
        result = store.submit_quiz("p1", {"q1": 1, "q2": 2})
        assert result.score == 67
        assert result.comprehension_flag is True

    def test_unknown_persona(self, store):
        with pytest.raises(UnknownPersonaError):
            store.submit_quiz("p0", ALL_CORRECT)


class TestScoreAnswers:
    """Test score_answers"""

    def test_ignores_unknown_question_ids(self, catalog):
        assert score_answers(catalog.quiz, {**ALL_CORRECT, "q99": 3}) == 100

    def test_no_questions(self):
        assert score_answers((), {"q1": 1}) == 0


class TestSnapshotAndNotes:
    """Test snapshot and update_notes"""

    def test_snapshot_is_detached(self, store):
        snap = store.snapshot("p4")
        snap.tasks[0].completed = True
        snap.quiz_score = 50

        live = store.get("p4")
        assert not live.tasks[0].completed
        assert live.quiz_score is None

    def test_update_notes(self, store):
        store.update_notes("p4", "Prefers tablet reminders")
        assert store.get("p4").notes == "Prefers tablet reminders"
        store.update_notes("p4", "")
        assert store.get("p4").notes is None

    def test_record_to_dict(self):
        record = PatientRecord(persona_id="p1")
        assert record.to_dict() == {
            "persona_id": "p1",
            "tasks": [],
            "quiz_score": None,
            "comprehension_flag": None,
            "notes": None,
        }
