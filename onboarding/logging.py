"""Structured Logging for the onboarding simulator.

This module provides structured logging using structlog with support for:
    - JSON output for log shipping
    - Pretty console output through Rich
    - Context binding (session ids, persona ids)
    - Timing decorator for derived computations
    - Exception logging with full context

Usage:
    from onboarding.logging import get_logger, configure_logging

    configure_logging(level="DEBUG", json_output=False)

    logger = get_logger(__name__)
    logger.info("Task completed", persona_id="p1", task_id="t1")
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from contextlib import contextmanager
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import structlog
from rich.console import Console
from rich.logging import RichHandler


if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

P = ParamSpec("P")
T = TypeVar("T")


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output logs as JSON
        log_file: Optional file path for log output
    """
    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors = [
            *shared_processors,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        # Rich adds time and level; the renderer only formats event + key/values.
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
        console = Console(stderr=True)
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    if log_file:
        from pathlib import Path

        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the module
    """
    return structlog.get_logger(name)


@contextmanager
def log_context(**kwargs: Any):
    """Context manager for temporary logging context.

    Usage:
        with log_context(session_id="abc123"):
            logger.info("Quiz submitted")  # Includes session_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*kwargs.keys())


def timed(
    logger: FilteringBoundLogger | None = None,
    level: str = "debug",
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to log function execution time.

    Args:
        logger: Logger to use (defaults to module logger)
        level: Log level for timing messages
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        log = logger or get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            log_method = getattr(log, level)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start
                log_method(
                    "Function failed",
                    function=func.__qualname__,
                    elapsed_ms=round(elapsed * 1000, 2),
                    status="error",
                    error=str(e),
                )
                raise
            elapsed = time.perf_counter() - start
            log_method(
                "Function completed",
                function=func.__qualname__,
                elapsed_ms=round(elapsed * 1000, 2),
                status="success",
            )
            return result

        return wrapper

    return decorator


def log_exception(
    logger: FilteringBoundLogger,
    exc: Exception,
    *,
    context: dict[str, Any] | None = None,
) -> None:
    """Log an exception with full context.

    Args:
        logger: Logger instance
        exc: Exception to log
        context: Additional context to include
    """
    from onboarding.exceptions import OnboardingError

    error_info: dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, OnboardingError):
        if exc.context:
            error_info["error_context"] = {
                "operation": exc.context.operation,
                "component": exc.context.component,
                "details": exc.context.details,
                "suggestion": exc.context.suggestion,
            }
        if exc.cause:
            error_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    if context:
        error_info.update(context)

    logger.error("Exception occurred", **error_info)


__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "log_exception",
    "timed",
]
