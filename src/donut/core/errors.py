"""
Structured error types for donut-spine.

Every failure raised by the library is a DonutError carrying:
- **Category:** what kind of error (config, parse, source, report)
- **Context:** structured metadata (job, build number, path, line)
- **Cause:** the chained underlying exception, when there is one

The hierarchy is shallow. Library functions raise; the build
step (donut.publisher.step) is the single place that catches and maps a
failure onto a build result.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                       DonutError                          │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  ConfigError        SourceError         ReportError      │
        │  (CONFIG)           (SOURCE)            (REPORT)         │
        │                         │                   │            │
        │                     ParseError     ReportGenerationError │
        │                     (PARSE)                              │
        │                    ┌────┴──────────┐                     │
        │          MalformedSpecError   ManifestError              │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = MalformedSpecError("Unterminated placeholder", line=3)
    >>> error.category
    <ErrorCategory.PARSE: 'PARSE'>
    >>> error.context.line
    3

    >>> error = ManifestError("Unreadable POM").with_context(path="/ws/pom.xml")
    >>> error.context.path
    '/ws/pom.xml'

Usage:
    from donut.core.errors import ManifestError

    try:
        tree = ElementTree.parse(path)
    except ElementTree.ParseError as e:
        raise ManifestError(f"Malformed manifest: {path}", cause=e)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    CONFIG = "CONFIG"  # Missing or invalid settings, bad generator reference
    SOURCE = "SOURCE"  # Workspace, result files, manifest access
    PARSE = "PARSE"  # Attribute spec or manifest syntax
    REPORT = "REPORT"  # External report generator failures
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        job: Job (project) name
        build_number: Build number within the job
        path: File or directory involved
        line: 1-based line number for parse errors
        metadata: Additional key-value pairs
    """

    job: str | None = None
    build_number: str | None = None
    path: str | None = None
    line: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("job", "build_number", "path", "line"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DonutError(Exception):
    """
    Base exception for all donut-spine errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is chained as ``__cause__`` so tracebacks show the
    root failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DonutError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ManifestError("Bad POM").with_context(path=str(pom))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DonutError):
    """Invalid configuration: settings, step options, generator reference."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """A configuration key holds an unusable value."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        super().__init__(message or f"Invalid value for {key}: {value!r}")
        self.key = key
        self.value = value


# =============================================================================
# SOURCE / PARSE ERRORS
# =============================================================================


class SourceError(DonutError):
    """Error reading an input: workspace directory, result files, manifest."""

    default_category = ErrorCategory.SOURCE


class ParseError(SourceError):
    """Input was read but could not be parsed."""

    default_category = ErrorCategory.PARSE


class MalformedSpecError(ParseError):
    """The raw custom-attributes text is not valid property syntax."""

    def __init__(self, message: str, *, line: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if line is not None:
            self.context.line = line


class ManifestError(ParseError):
    """A build manifest (pom.xml) exists but cannot be parsed."""


# =============================================================================
# REPORT ERRORS
# =============================================================================


class ReportError(DonutError):
    """Failure while producing the report."""

    default_category = ErrorCategory.REPORT


class ReportGenerationError(ReportError):
    """The external report generator raised or returned an unusable result."""


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DonutError",
    "ConfigError",
    "InvalidConfigError",
    "SourceError",
    "ParseError",
    "MalformedSpecError",
    "ManifestError",
    "ReportError",
    "ReportGenerationError",
]
