"""Onboarding Exception Hierarchy.

This module defines the exception hierarchy for the onboarding simulator,
providing structured error handling with context and recovery suggestions.

Exception Hierarchy:
    OnboardingError (base)
    ├── ConfigurationError
    │   └── ConfigValidationError
    ├── RecordError
    │   ├── UnknownPersonaError
    │   ├── UnknownTaskError
    │   └── UnknownQuestionError
    └── ExportError
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Structured context for error details."""

    operation: str
    component: str
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"[{self.component}] {self.operation}"]
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"Details: {details_str}")
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class OnboardingError(Exception):
    """Base exception for all onboarding errors.

    Attributes:
        message: Human-readable error description
        context: Structured error context with operation details
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append(str(self.context))
        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")
        return " | ".join(parts)

    @property
    def suggestion(self) -> str | None:
        """Get recovery suggestion if available."""
        return self.context.suggestion if self.context else None


# Configuration Errors
class ConfigurationError(OnboardingError):
    """Base class for configuration-related errors."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when a configuration file cannot be parsed or validated."""

    def __init__(
        self,
        errors: list[dict[str, Any]],
        config_path: str | None = None,
        *,
        cause: Exception | None = None,
    ) -> None:
        context = ErrorContext(
            operation="validate_config",
            component="Settings",
            details={"errors": errors, "config_path": config_path},
            suggestion="Check the configuration keys against onboarding.settings.Settings",
        )
        super().__init__(f"Configuration validation failed: {len(errors)} error(s)", context=context, cause=cause)
        self.validation_errors = errors


# Record Errors
class RecordError(OnboardingError):
    """Base class for patient record lookups and mutations."""

    pass


class UnknownPersonaError(RecordError):
    """Raised when a persona identifier is not in the catalog."""

    def __init__(self, persona_id: str, available: list[str]) -> None:
        context = ErrorContext(
            operation="get_persona",
            component="Catalog",
            details={"persona_id": persona_id, "available": available},
            suggestion=f"Use one of: {', '.join(available)}",
        )
        super().__init__(f"Unknown persona: {persona_id}", context=context)
        self.persona_id = persona_id


class UnknownTaskError(RecordError):
    """Raised when a task identifier is not on a persona's record."""

    def __init__(self, persona_id: str, task_id: str, available: list[str]) -> None:
        context = ErrorContext(
            operation="complete_task",
            component="RecordStore",
            details={"persona_id": persona_id, "task_id": task_id, "available": available},
            suggestion=f"Use one of: {', '.join(available)}",
        )
        super().__init__(f"Unknown task {task_id!r} for persona {persona_id!r}", context=context)
        self.persona_id = persona_id
        self.task_id = task_id


class UnknownQuestionError(RecordError):
    """Raised when a quiz question identifier is not in the catalog."""

    def __init__(self, question_id: str, available: list[str]) -> None:
        context = ErrorContext(
            operation="get_question",
            component="Catalog",
            details={"question_id": question_id, "available": available},
        )
        super().__init__(f"Unknown quiz question: {question_id}", context=context)
        self.question_id = question_id


# Export Errors
class ExportError(OnboardingError):
    """Raised when the integration config document cannot be written."""

    def __init__(
        self,
        path: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        context = ErrorContext(
            operation="export_config",
            component="ConfigExport",
            details={"path": path},
            suggestion="Check write permissions and disk space",
        )
        super().__init__(f"Failed to export integration config to {path}", context=context, cause=cause)
        self.path = path


__all__ = [
    "OnboardingError",
    "ErrorContext",
    # Configuration
    "ConfigurationError",
    "ConfigValidationError",
    # Records
    "RecordError",
    "UnknownPersonaError",
    "UnknownTaskError",
    "UnknownQuestionError",
    # Export
    "ExportError",
]
