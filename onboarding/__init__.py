"""Digital Patient Onboarding: in-memory domain core of the onboarding prototype.

Simulates a pre-operative onboarding workflow for a handful of patient
personas:

- Persona catalog with literacy-tiered instructional content
- Placeholder reading-grade estimate for the content policy
- Per-persona task and quiz tracking
- Stubbed survey, messaging and telehealth integration events
- Append-only audit log and a clinician dashboard of derived metrics

Example:
    ```python
    from onboarding import OnboardingSession

    session = OnboardingSession()
    session.complete_task("p2", "t1")
    session.submit_quiz("p2", {"q1": 1, "q2": 2, "q3": 1})

    for event in session.audit_log:
        print(event.when, event.type, event.payload)
    ```
"""

__version__ = "0.3.0"
__author__ = "Onboarding Prototype Team"

from .catalog import (
    BASE_TASKS,
    CONTENT_EN,
    LANGUAGE_LABEL,
    PERSONAS,
    QUIZ,
    Catalog,
    ContentVariant,
    Language,
    Literacy,
    Persona,
    QuizQuestion,
    Task,
    TaskTemplate,
    TechAccess,
    default_catalog,
)
from .config_export import IntegrationConfig, export_config
from .events import (
    AuditEvent,
    AuditLog,
    EventType,
    call_scheduling_event,
    record_sync_event,
    reminder_event,
)
from .exceptions import (
    ConfigurationError,
    ConfigValidationError,
    ErrorContext,
    ExportError,
    OnboardingError,
    RecordError,
    UnknownPersonaError,
    UnknownQuestionError,
    UnknownTaskError,
)
from .metrics import (
    DashboardSummary,
    PersonaMetrics,
    adherence_rate,
    build_dashboard,
    compute_metrics,
    risk_flag_count,
    summarize_dashboard,
)
from .readability import estimate_grade_level, meets_grade_target
from .records import PatientRecord, QuizResult, RecordStore, score_answers
from .session import ContentView, OnboardingSession
from .settings import Settings, get_settings

__all__ = [
    "__version__",
    # Catalog
    "BASE_TASKS",
    "CONTENT_EN",
    "LANGUAGE_LABEL",
    "PERSONAS",
    "QUIZ",
    "Catalog",
    "ContentVariant",
    "Language",
    "Literacy",
    "Persona",
    "QuizQuestion",
    "Task",
    "TaskTemplate",
    "TechAccess",
    "default_catalog",
    # Readability
    "estimate_grade_level",
    "meets_grade_target",
    # Records
    "PatientRecord",
    "QuizResult",
    "RecordStore",
    "score_answers",
    # Events
    "AuditEvent",
    "AuditLog",
    "EventType",
    "call_scheduling_event",
    "record_sync_event",
    "reminder_event",
    # Metrics
    "DashboardSummary",
    "PersonaMetrics",
    "adherence_rate",
    "build_dashboard",
    "compute_metrics",
    "risk_flag_count",
    "summarize_dashboard",
    # Session
    "ContentView",
    "OnboardingSession",
    # Config
    "IntegrationConfig",
    "Settings",
    "export_config",
    "get_settings",
    # Errors
    "ConfigurationError",
    "ConfigValidationError",
    "ErrorContext",
    "ExportError",
    "OnboardingError",
    "RecordError",
    "UnknownPersonaError",
    "UnknownQuestionError",
    "UnknownTaskError",
]
