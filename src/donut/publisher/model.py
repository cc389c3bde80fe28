"""Build and job model for the report step.

A job lives on disk as::

    {jobs_dir}/{job}/
    ├── donut/                  # project-level report fallback
    └── builds/
        ├── 41/
        │   ├── build.json      # BuildRecord, written when the result is set
        │   └── donut/          # copied results + generated report
        └── 42/
            └── ...

A build counts as *completed* once its ``build.json`` records a result.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

BUILD_RECORD_FILENAME = "build.json"


class BuildResult(str, Enum):
    """Outcome of a build, ordered from best to worst."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


class BuildRecord(BaseModel):
    """Persisted summary of a finished build."""

    job: str
    number: int
    result: BuildResult
    completed_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    actions: list[str] = Field(default_factory=list)


@dataclass
class Run:
    """A single build of a job.

    ``environment`` is the build environment (CI variables); when None
    ``get_environment()`` falls back to the process environment.
    """

    job: str
    number: int
    root_dir: Path
    result: BuildResult | None = None
    environment: dict[str, str] | None = None
    actions: list[Any] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"#{self.number}"

    @property
    def full_display_name(self) -> str:
        return f"{self.job} #{self.number}"

    def get_environment(self) -> dict[str, str]:
        """Build environment plus the standard job/build variables."""
        env = dict(os.environ if self.environment is None else self.environment)
        env.setdefault("JOB_NAME", self.job)
        env.setdefault("BUILD_NUMBER", str(self.number))
        env.setdefault("BUILD_DISPLAY_NAME", self.display_name)
        return env

    def add_action(self, action: Any) -> None:
        self.actions.append(action)

    def set_result(self, result: BuildResult) -> None:
        """Record the result in memory and in ``build.json``."""
        self.result = result
        self.root_dir.mkdir(parents=True, exist_ok=True)
        record = BuildRecord(
            job=self.job,
            number=self.number,
            result=result,
            actions=[type(a).__name__ for a in self.actions],
        )
        (self.root_dir / BUILD_RECORD_FILENAME).write_text(record.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, job: str, root_dir: Path) -> Run:
        """Load a build directory; ``result`` is None while no record exists."""
        record_path = root_dir / BUILD_RECORD_FILENAME
        result = None
        if record_path.is_file():
            result = BuildRecord.model_validate_json(record_path.read_text(encoding="utf-8")).result
        return cls(job=job, number=int(root_dir.name), root_dir=root_dir, result=result)


@dataclass
class Project:
    """A job: a named directory holding numbered builds."""

    name: str
    root_dir: Path

    @classmethod
    def in_jobs_dir(cls, jobs_dir: Path, name: str) -> Project:
        return cls(name=name, root_dir=Path(jobs_dir) / name)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def builds_dir(self) -> Path:
        return self.root_dir / "builds"

    def build_dir(self, number: int) -> Path:
        return self.builds_dir / str(number)

    def get_build(self, number: int) -> Run | None:
        path = self.build_dir(number)
        if not path.is_dir():
            return None
        return Run.load(self.name, path)

    def new_build(self, number: int | None = None, environment: dict[str, str] | None = None) -> Run:
        """Create the directory for a new build (next number by default)."""
        if number is None:
            number = max(self._build_numbers(), default=0) + 1
        path = self.build_dir(number)
        path.mkdir(parents=True, exist_ok=True)
        return Run(job=self.name, number=number, root_dir=path, environment=environment)

    def get_last_completed_build(self) -> Run | None:
        """Highest-numbered build with a recorded result."""
        for number in sorted(self._build_numbers(), reverse=True):
            run = Run.load(self.name, self.build_dir(number))
            if run.result is not None:
                return run
        return None

    def _build_numbers(self) -> list[int]:
        if not self.builds_dir.is_dir():
            return []
        return [int(p.name) for p in self.builds_dir.iterdir() if p.is_dir() and p.name.isdigit()]
