"""Per-persona patient records and the store that owns them.

A :class:`RecordStore` is created once per session. Each persona gets its own
tasks built from the task templates so completing a task for one patient never
touches another patient's list. Quiz submission stores the score and the
comprehension flag and auto-completes the linked quiz task.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .catalog import BASE_TASKS, QUIZ, Persona, QuizQuestion, Task, TaskTemplate
from .exceptions import UnknownPersonaError, UnknownTaskError
from .logging import get_logger
from .util import Clock, percent, utc_now

logger = get_logger(__name__)

DEFAULT_COMPREHENSION_CUTOFF = 67


@dataclass
class PatientRecord:
    """Mutable onboarding state for one persona.

    ``comprehension_flag`` is only ever set together with ``quiz_score`` and
    is true when the score fell below the support cutoff.
    """
    persona_id: str
    tasks: List[Task] = field(default_factory=list)
    quiz_score: Optional[int] = None
    comprehension_flag: Optional[bool] = None
    notes: Optional[str] = None

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "persona_id": self.persona_id,
            "tasks": [t.to_dict() for t in self.tasks],
            "quiz_score": self.quiz_score,
            "comprehension_flag": self.comprehension_flag,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class QuizResult:
    """Outcome of a quiz submission."""
    score: int
    comprehension_flag: bool
    completed_task_id: Optional[str] = None


def score_answers(questions: Sequence[QuizQuestion], answers: Mapping[str, int]) -> int:
    """Percentage of questions answered correctly; unanswered questions count as wrong."""
    correct = sum(1 for q in questions if q.is_correct(answers.get(q.id)))
    return percent(correct, len(questions))


class RecordStore:
    """Session-owned map of persona id to :class:`PatientRecord`."""

    def __init__(
        self,
        records: Dict[str, PatientRecord],
        questions: Sequence[QuizQuestion] = QUIZ,
        quiz_task_id: Optional[str] = "t3",
        comprehension_cutoff: int = DEFAULT_COMPREHENSION_CUTOFF,
        clock: Optional[Clock] = None,
    ):
        self._records = records
        self.questions = tuple(questions)
        self.quiz_task_id = quiz_task_id
        self.comprehension_cutoff = comprehension_cutoff
        self._clock = clock or utc_now

    @classmethod
    def initialize(
        cls,
        personas: Iterable[Persona],
        base_tasks: Sequence[TaskTemplate] = BASE_TASKS,
        **kwargs: Any,
    ) -> "RecordStore":
        """Create one fresh record per persona with its own tasks built from the templates.

        Keyword arguments go to the constructor; ``questions`` defaults to the
        reference quiz.
        """
        records = {
            p.id: PatientRecord(persona_id=p.id, tasks=[t.instantiate() for t in base_tasks])
            for p in personas
        }
        logger.debug("Records initialized", personas=list(records))
        return cls(records, **kwargs)

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def _record(self, persona_id: str) -> PatientRecord:
        try:
            return self._records[persona_id]
        except KeyError:
            raise UnknownPersonaError(persona_id, list(self._records)) from None

    def get(self, persona_id: str) -> PatientRecord:
        """Live record for a persona. Callers outside the store should prefer :meth:`snapshot`."""
        return self._record(persona_id)

    def snapshot(self, persona_id: str) -> PatientRecord:
        """Deep copy of a persona's record; changes to it do not reach the store."""
        return copy.deepcopy(self._record(persona_id))

    def complete_task(self, persona_id: str, task_id: str) -> PatientRecord:
        """Mark a task complete and stamp it with the current time.

        Completing an already-complete task is a no-op and keeps the first
        timestamp.

        Raises:
            UnknownPersonaError: If the persona has no record
            UnknownTaskError: If the record has no such task
        """
        record = self._record(persona_id)
        task = record.get_task(task_id)
        if task is None:
            raise UnknownTaskError(persona_id, task_id, [t.id for t in record.tasks])

        if task.mark_complete(self._clock()):
            logger.info("Task completed", persona_id=persona_id, task_id=task_id)
        else:
            logger.debug("Task already complete", persona_id=persona_id, task_id=task_id)
        return record

    def submit_quiz(self, persona_id: str, answers: Mapping[str, int]) -> QuizResult:
        """Score a set of answers and store the result on the record.

        Args:
            persona_id: Persona submitting the quiz
            answers: Map of question id to selected option index

        Returns:
            QuizResult with the score, the comprehension flag, and the id of the
            quiz task if this submission completed it
        """
        record = self._record(persona_id)
        score = score_answers(self.questions, answers)
        flag = score < self.comprehension_cutoff
        record.quiz_score = score
        record.comprehension_flag = flag

        completed_task_id = None
        if self.quiz_task_id is not None:
            quiz_task = record.get_task(self.quiz_task_id)
            if quiz_task is not None and not quiz_task.completed:
                self.complete_task(persona_id, quiz_task.id)
                completed_task_id = quiz_task.id

        logger.info(
            "Quiz submitted",
            persona_id=persona_id,
            score=score,
            comprehension_flag=flag,
        )
        return QuizResult(score=score, comprehension_flag=flag, completed_task_id=completed_task_id)

    def update_notes(self, persona_id: str, notes: Optional[str]) -> PatientRecord:
        record = self._record(persona_id)
        record.notes = notes or None
        return record
