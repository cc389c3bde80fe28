"""
Result-file discovery and copying.

The step only looks for files matching the include patterns (``**/*.json``
by default) below the configured source directory, relative to the
workspace.
"""

from __future__ import annotations

import fnmatch
import shutil
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from donut.core.errors import SourceError

DEFAULT_FILE_INCLUDES: tuple[str, ...] = ("**/*.json",)


def _match_parts(parts: Sequence[str], pattern: Sequence[str]) -> bool:
    """Ant-style match: ``**`` spans any number of segments, ``*`` stays within one."""
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_parts(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], head) and _match_parts(parts[1:], rest)


def _matches(relative: PurePosixPath, includes: Sequence[str]) -> bool:
    return any(_match_parts(relative.parts, PurePosixPath(pattern).parts) for pattern in includes)


def iter_result_files(directory: Path, includes: Sequence[str] = DEFAULT_FILE_INCLUDES) -> Iterator[Path]:
    """Yield files below ``directory`` matching any include pattern, sorted."""
    if not directory.is_dir():
        return
    for path in sorted(directory.rglob("*")):
        if path.is_file() and _matches(PurePosixPath(path.relative_to(directory).as_posix()), includes):
            yield path


def has_results(directory: Path, includes: Sequence[str] = DEFAULT_FILE_INCLUDES) -> bool:
    """True when at least one result file exists below ``directory``."""
    return next(iter_result_files(directory, includes), None) is not None


def copy_results(
    source: Path,
    destination: Path,
    includes: Sequence[str] = DEFAULT_FILE_INCLUDES,
) -> list[Path]:
    """Copy matching files into ``destination``, preserving relative layout.

    Raises:
        SourceError: If a result file cannot be copied.
    """
    copied: list[Path] = []
    try:
        destination.mkdir(parents=True, exist_ok=True)
        for path in iter_result_files(source, includes):
            target = destination / path.relative_to(source)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            copied.append(target)
    except OSError as e:
        raise SourceError(f"Cannot copy results to {destination}: {e}", cause=e).with_context(
            path=str(e.filename or source)
        )
    return copied


# =============================================================================
# Form validation
# =============================================================================


class CheckKind(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FieldCheck:
    """Outcome of validating a configuration field."""

    kind: CheckKind
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is not CheckKind.ERROR


def validate_relative_directory(workspace: Path | None, value: str | None) -> FieldCheck:
    """Validate the configured source directory against a workspace.

    Empty means the workspace itself. Absolute paths and paths leaving the
    workspace are errors; a directory not (yet) present is only a warning
    because earlier build steps may create it.
    """
    value = (value or "").strip()
    if not value:
        return FieldCheck(CheckKind.OK)

    candidate = PurePosixPath(value.replace("\\", "/"))
    if candidate.is_absolute() or (len(value) > 1 and value[1] == ":"):
        return FieldCheck(CheckKind.ERROR, f"Must be a path relative to the workspace: {value}")
    if ".." in candidate.parts:
        return FieldCheck(CheckKind.ERROR, f"Must not leave the workspace: {value}")

    if workspace is None:
        return FieldCheck(CheckKind.OK)

    target = workspace / candidate
    if not target.exists():
        return FieldCheck(CheckKind.WARNING, f"No such directory in the workspace: {value}")
    if not target.is_dir():
        return FieldCheck(CheckKind.ERROR, f"Not a directory: {value}")
    return FieldCheck(CheckKind.OK)
