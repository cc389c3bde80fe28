"""
Report generator boundary.

Rendering the report (parsing Gherkin/JSON results, counting passed,
failed, pending, skipped, undefined and missing steps, writing HTML) is the
job of an external generator. This module defines the request it receives,
the console summary it returns, and how one is loaded from a
``module:qualname`` reference.

Usage:
    generator = load_generator("acme.donut:Generator")
    console = generator.generate(ReportRequest(...))
    failed = console.build_failed
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from donut.core.errors import ConfigError, ErrorContext, ReportGenerationError

REPORT_FILENAME = "donut-report.html"


class ReportRequest(BaseModel):
    """Everything the generator needs for one build."""

    source_dir: Path
    output_dir: Path
    prefix: str = ""
    datetime_format: str = ""
    template: str = "default"

    count_skipped_as_failure: bool = False
    count_pending_as_failure: bool = False
    count_undefined_as_failure: bool = False
    count_missing_as_failure: bool = False

    build_name: str
    build_number: str
    custom_attributes: dict[str, str] = Field(default_factory=dict)


class ReportConsole(BaseModel):
    """Console summary returned by the generator."""

    build_failed: bool
    passed: int | None = None
    failed: int | None = None
    pending: int | None = None
    skipped: int | None = None
    undefined: int | None = None
    missing: int | None = None
    report_path: Path | None = None


@runtime_checkable
class ReportGenerator(Protocol):
    """Protocol implemented by report generators."""

    def generate(self, request: ReportRequest) -> ReportConsole:
        """Render the report described by ``request``."""
        ...


class CallableGenerator:
    """Adapts a plain ``fn(request) -> ReportConsole | bool | dict`` callable."""

    def __init__(self, fn: Callable[[ReportRequest], Any]) -> None:
        self._fn = fn

    def generate(self, request: ReportRequest) -> ReportConsole:
        return coerce_console(self._fn(request))

    def __repr__(self) -> str:
        return f"CallableGenerator({getattr(self._fn, '__qualname__', self._fn)!r})"


def coerce_console(value: Any) -> ReportConsole:
    """Accept a ReportConsole, a bare "build failed" bool, or a dict.

    Raises:
        ReportGenerationError: If ``value`` cannot be read as a console summary.
    """
    if isinstance(value, ReportConsole):
        return value
    if isinstance(value, bool):
        return ReportConsole(build_failed=value)
    if isinstance(value, dict):
        try:
            return ReportConsole.model_validate(value)
        except ValidationError as e:
            raise ReportGenerationError(
                f"Report generator returned an invalid console summary: {e.error_count()} error(s)",
                context=ErrorContext(metadata={"returned_type": "dict"}),
                cause=e,
            )
    if hasattr(value, "build_failed"):
        flag = value.build_failed
        return ReportConsole(build_failed=bool(flag() if callable(flag) else flag))
    raise ReportGenerationError(
        f"Report generator returned unsupported value: {type(value).__name__}",
        context=ErrorContext(metadata={"returned_type": type(value).__name__}),
    )


def resolve_ref(ref: str) -> Any:
    """Import and return the object identified by ``'module:qualname'``."""
    module_path, _, attr_path = ref.partition(":")
    if not module_path or not attr_path:
        raise ConfigError(f"Invalid generator reference (expected 'module:qualname'): {ref!r}")
    try:
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load report generator {ref!r}: {e}", cause=e)
    return obj


def load_generator(ref: str | None) -> ReportGenerator:
    """Load a generator from a reference.

    Classes are instantiated without arguments; objects already providing
    ``generate`` are used as-is; other callables are wrapped.

    Raises:
        ConfigError: If no reference is configured or it cannot be loaded.
    """
    if not ref:
        raise ConfigError("No report generator configured (set DONUT_GENERATOR=module:qualname)")

    obj = resolve_ref(ref)
    if isinstance(obj, type):
        obj = obj()
    if isinstance(obj, ReportGenerator):
        return obj
    if callable(obj):
        return CallableGenerator(obj)
    raise ConfigError(f"{ref!r} is neither a ReportGenerator nor callable")
