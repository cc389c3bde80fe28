"""
Logging context management using contextvars.

The report step binds the job name and build number once; every log entry
emitted while the step runs carries them without explicit parameter
passing.
"""

from contextvars import ContextVar
from dataclasses import asdict, dataclass
from typing import Any

import structlog


@dataclass
class LogContext:
    """
    Context attached to all log entries.

    job: Job (project) name
    build_number: Build number within the job
    step: Current step name (e.g. "donut.publish")
    """

    job: str | None = None
    build_number: str | None = None
    step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs) -> "LogContext":
        """Create new context with merged values."""
        current = asdict(self)
        current.update({k: v for k, v in kwargs.items() if v is not None and k in current})
        return LogContext(**current)


_log_context: ContextVar[LogContext] = ContextVar("donut_log_context")  # noqa: B039


def get_context() -> LogContext:
    """Get the current log context."""
    return _log_context.get(LogContext())


def set_context(
    job: str | None = None,
    build_number: str | None = None,
    step: str | None = None,
) -> LogContext:
    """
    Set the current log context.

    This replaces the current context. Use bind_context() to add to existing.
    """
    ctx = LogContext(job=job, build_number=build_number, step=step)
    _log_context.set(ctx)
    return ctx


def bind_context(**kwargs) -> LogContext:
    """Merge values into the current context."""
    updated = get_context().merge(**kwargs)
    _log_context.set(updated)
    return updated


def clear_context() -> None:
    """Clear the current context (reset to empty)."""
    _log_context.set(LogContext())


class _ContextToken:
    """Token for restoring context after a scoped operation."""

    def __init__(self, token):
        self._token = token

    def restore(self):
        """Restore the previous context."""
        _log_context.reset(self._token)


def push_context(**kwargs) -> _ContextToken:
    """
    Push new context values, returning a token to restore later.

    Usage:
        token = push_context(job="nightly", build_number="42")
        try:
            step.perform(...)
        finally:
            token.restore()
    """
    updated = get_context().merge(**kwargs)
    return _ContextToken(_log_context.set(updated))


def add_context_processor(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds the bound context to every entry."""
    for key, value in get_context().to_dict().items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (typically ``get_logger(__name__)``)."""
    return structlog.get_logger(name)
