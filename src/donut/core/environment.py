"""
Build environment used for placeholder substitution.

An Environment is an insertion-ordered ``str -> str`` mapping constructed
fresh for every report run:

1. the build environment (process/CI variables) is copied in first;
2. properties declared in the workspace ``pom.xml`` are overlaid, adding
   only keys the build environment does not already define.

``Environment.expand`` substitutes ``${NAME}`` and ``$NAME`` references.
Unresolved references expand to an empty string; ``$$`` is a literal ``$``.

Examples:
    >>> env = Environment({"TEAM": "platform"})
    >>> env.expand("owner: ${TEAM}/$TEAM")
    'owner: platform/platform'
    >>> env.expand("branch=${GIT_BRANCH}")
    'branch='
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from pathlib import Path

from donut.core.manifest import read_manifest_properties
from donut.logging import get_logger

log = get_logger(__name__)

# ${name.with-dots} | $NAME | $$
_PLACEHOLDER = re.compile(r"\$(?:\{([A-Za-z0-9_.\-]+)\}|([A-Za-z0-9_]+)|(\$))")


class Environment(MutableMapping[str, str]):
    """Ordered variable mapping with ``${NAME}`` expansion."""

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        self._data: dict[str, str] = {}
        if entries is not None:
            self.update(entries)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[str(key)] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Environment({self._data!r})"

    def overlay(self, entries: Mapping[str, str]) -> int:
        """Add entries whose key is not already present.

        Returns:
            Number of entries added.
        """
        added = 0
        for key, value in entries.items():
            if key not in self._data:
                self[key] = value
                added += 1
        return added

    def expand(self, raw: str) -> str:
        """Substitute ``${NAME}`` / ``$NAME`` references; unknown names become ``""``."""

        def _replace(match: re.Match[str]) -> str:
            if match.group(3) is not None:
                return "$"
            name = match.group(1) or match.group(2)
            return self._data.get(name, "")

        return _PLACEHOLDER.sub(_replace, raw)


def build_environment(
    base: Mapping[str, str] | None = None,
    manifest_path: str | Path | None = None,
) -> Environment:
    """Merge the build environment with manifest-declared properties.

    Build environment entries take precedence: a manifest property is only
    added when its key is absent from ``base``.

    Raises:
        ManifestError: If the manifest exists but cannot be parsed.
    """
    env = Environment(base or {})
    if manifest_path is not None:
        properties = read_manifest_properties(manifest_path)
        added = env.overlay(properties)
        log.debug(
            "environment.manifest_overlaid",
            path=str(manifest_path),
            declared=len(properties),
            added=added,
        )
    return env
