"""Static reference data for the onboarding workflow.

The catalog holds the simulated patient personas, the task templates every
patient starts with, the pre-operative comprehension quiz and the two
instructional text variants (simple for low literacy, standard otherwise).
Everything here is compiled in and immutable; records copy what they need.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import UnknownPersonaError, UnknownQuestionError


class Literacy(str, Enum):
    """Health literacy tier of a persona."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TechAccess(str, Enum):
    """Device the persona uses to reach the onboarding module."""
    SMARTPHONE = "smartphone"
    TABLET = "tablet"
    COMPUTER = "computer"


class Language(str, Enum):
    """Preferred language of a persona."""
    EN = "en"
    ZH = "zh"
    AR = "ar"
    VI = "vi"
    UR = "ur"
    YUE = "yue"


class ContentVariant(str, Enum):
    """Instructional text variants."""
    SIMPLE = "simple"
    STANDARD = "standard"


LANGUAGE_LABEL: Dict[Language, str] = {
    Language.EN: "English",
    Language.ZH: "中文",
    Language.AR: "العربية",
    Language.VI: "Tiếng Việt",
    Language.UR: "اردو",
    Language.YUE: "粵語",
}


@dataclass(frozen=True)
class Persona:
    """A simulated patient profile.

    Attributes:
        id: Catalog identifier (``p1``..``p4``)
        name: Display name, also used as the target of outbound events
        age: Age in years
        language: Preferred language code
        literacy: Health literacy tier
        tech_access: Device tier
        risk: Static cancellation-risk proxy, 0-100
    """
    id: str
    name: str
    age: int
    language: Language
    literacy: Literacy
    tech_access: TechAccess
    risk: int

    @property
    def language_label(self) -> str:
        return LANGUAGE_LABEL[self.language]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "language": self.language.value,
            "literacy": self.literacy.value,
            "tech_access": self.tech_access.value,
            "risk": self.risk,
        }


@dataclass
class Task:
    """An onboarding task owned by one patient record.

    ``completed_at`` is set exactly when ``completed`` is true; use
    :meth:`mark_complete` rather than assigning the fields directly.
    """
    id: str
    label: str
    due_days: int
    completed: bool = False
    completed_at: Optional[datetime] = None

    def mark_complete(self, when: datetime) -> bool:
        """Complete the task, returning False if it was already complete.

        The first completion timestamp is kept on repeated calls.
        """
        if self.completed:
            return False
        self.completed = True
        self.completed_at = when
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "label": self.label,
            "due_days": self.due_days,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class TaskTemplate:
    """Compiled-in task definition; records get their own :class:`Task` built from it."""
    id: str
    label: str
    due_days: int

    def instantiate(self) -> Task:
        return Task(self.id, self.label, self.due_days)


@dataclass(frozen=True)
class QuizQuestion:
    """A multiple-choice comprehension question."""
    id: str
    question: str
    options: Tuple[str, ...]
    answer_index: int

    def is_correct(self, selected: Optional[int]) -> bool:
        return selected is not None and selected == self.answer_index


PERSONAS: Tuple[Persona, ...] = (
    Persona("p1", "Aunty May", 68, Language.EN, Literacy.LOW, TechAccess.SMARTPHONE, 65),
    Persona("p2", "Michael", 25, Language.ZH, Literacy.HIGH, TechAccess.COMPUTER, 20),
    Persona("p3", "Fatima", 54, Language.AR, Literacy.MEDIUM, TechAccess.SMARTPHONE, 45),
    Persona("p4", "Lan", 37, Language.VI, Literacy.LOW, TechAccess.TABLET, 55),
)

BASE_TASKS: Tuple[TaskTemplate, ...] = (
    TaskTemplate("t1", "Watch fasting prep video", 5),
    TaskTemplate("t2", "Read medication guide", 4),
    TaskTemplate("t3", "Complete comprehension quiz", 3),
    TaskTemplate("t4", "Confirm transport plan", 2),
)

QUIZ: Tuple[QuizQuestion, ...] = (
    QuizQuestion(
        "q1",
        "When should you stop eating solid food before surgery?",
        ("2 hours", "6 hours", "12 hours", "No need to stop"),
        1,
    ),
    QuizQuestion(
        "q2",
        "On the morning of surgery, you should:",
        (
            "Take all meds as usual",
            "Skip all meds",
            "Follow the doctor's specific instructions",
            "Drink coffee and juice",
        ),
        2,
    ),
    QuizQuestion(
        "q3",
        "If unsure about instructions, you should:",
        ("Guess", "Call the hospital/telehealth line", "Search random forums", "Do nothing"),
        1,
    ),
)

CONTENT_EN: Dict[ContentVariant, str] = {
    ContentVariant.SIMPLE: (
        "Your surgery is coming up. Stop eating solid food 6 hours before. "
        "You can drink small sips of water up to 2 hours before. "
        "Take only the medicines your doctor said are okay. "
        "If confused, call us. We are here to help."
    ),
    ContentVariant.STANDARD: (
        "For elective surgery preparation, cease solid foods 6 hours pre-procedure "
        "and limit clear fluids to small volumes up to 2 hours prior. "
        "Continue only medications sanctioned by your clinician. "
        "If any ambiguity remains, contact the perioperative team for clarification."
    ),
}


def variant_for_literacy(literacy: Literacy) -> ContentVariant:
    """Low literacy readers get the simple text; everyone else the standard one."""
    return ContentVariant.SIMPLE if literacy == Literacy.LOW else ContentVariant.STANDARD


@dataclass(frozen=True)
class Catalog:
    """Read-only bundle of the reference data, with lookup by identifier."""
    personas: Tuple[Persona, ...] = PERSONAS
    base_tasks: Tuple[TaskTemplate, ...] = BASE_TASKS
    quiz: Tuple[QuizQuestion, ...] = QUIZ
    content: Dict[ContentVariant, str] = field(default_factory=lambda: dict(CONTENT_EN))

    def persona_ids(self) -> List[str]:
        return [p.id for p in self.personas]

    def get_persona(self, persona_id: str) -> Persona:
        for persona in self.personas:
            if persona.id == persona_id:
                return persona
        raise UnknownPersonaError(persona_id, self.persona_ids())

    def get_question(self, question_id: str) -> QuizQuestion:
        for question in self.quiz:
            if question.id == question_id:
                return question
        raise UnknownQuestionError(question_id, [q.id for q in self.quiz])

    def content_for(self, persona: Persona) -> Tuple[ContentVariant, str]:
        variant = variant_for_literacy(persona.literacy)
        return variant, self.content[variant]


def default_catalog() -> Catalog:
    return Catalog()
