"""
Custom-attribute resolution.

Turns the human-authored attribute block of a report step into the mapping
handed to the report generator::

    owner=${TEAM}
    title=Nightly Run

with ``TEAM=platform`` in the build environment resolves to
``{"owner": "platform", "title": "Nightly Run"}``.

Pipeline:
    1. escape_whitespace(): every unescaped run of spaces/tabs becomes a
       single ``"\\ "`` so values with spaces survive the property grammar
       without manual escaping. Whitespace used as a key/value delimiter is
       escaped too and therefore becomes part of the key or value.
    2. parse(): ``.properties`` grammar (donut.core.properties), plus a
       check for unterminated ``${`` placeholders.
    3. expand(): two-tier lookup per value:
       - strip every ``$``, ``{`` and ``}``; if the remainder is exactly a
         key of the environment, the whole value becomes that variable;
       - otherwise the original value goes through Environment.expand,
         where unknown references become ``""``.

       ``${FOO} and ${BAR}`` strips to ``FOO and BAR``, which is never a
       key, so multi-token values always take the second branch.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from donut.core.environment import Environment
from donut.core.errors import MalformedSpecError
from donut.core.properties import iter_properties
from donut.logging import get_logger

log = get_logger(__name__)

# A run of blanks preceded by an even number of backslashes (possibly none)
_UNESCAPED_BLANKS = re.compile(r"(?<!\\)((?:\\\\)*)[ \t]+")
_PUNCTUATION = re.compile(r"[${}]+")


def escape_whitespace(raw: str) -> str:
    """Escape each unescaped run of spaces/tabs as a single ``"\\ "``.

    A blank is already escaped when an odd number of backslashes precedes
    it; such runs are left untouched, which makes the function idempotent.
    ``a\\\\ b`` has an escaped backslash followed by a bare space, so the
    space is escaped.
    """
    return _UNESCAPED_BLANKS.sub(r"\1\\ ", raw)


def _check_placeholders(key: str, value: str, lineno: int) -> None:
    start = value.find("${")
    while start != -1:
        end = value.find("}", start + 2)
        if end == -1:
            raise MalformedSpecError(
                f"Unterminated placeholder in attribute {key!r}: {value[start:]!r}",
                line=lineno,
            ).with_context(key=key)
        start = value.find("${", end + 1)


def parse(raw_spec: str | None) -> dict[str, str]:
    """Parse a raw attribute block into an ordered ``{name: value}`` dict.

    Raises:
        MalformedSpecError: On an invalid ``\\uXXXX`` escape or an
            unterminated ``${`` placeholder.
    """
    if not raw_spec:
        return {}

    parsed: dict[str, str] = {}
    for key, value, lineno in iter_properties(escape_whitespace(raw_spec)):
        _check_placeholders(key, value, lineno)
        parsed[key] = value
    return parsed


def expand(parsed: Mapping[str, str], env: Mapping[str, str]) -> dict[str, str]:
    """Resolve every value of ``parsed`` against ``env``."""
    environment = env if isinstance(env, Environment) else Environment(env)

    resolved: dict[str, str] = {}
    for key, value in parsed.items():
        bare = _PUNCTUATION.sub("", value)
        if bare in environment:
            resolved[key] = environment[bare]
        else:
            resolved[key] = environment.expand(value)
    return resolved


def resolve_attributes(raw_spec: str | None, env: Mapping[str, str]) -> dict[str, str]:
    """``expand(parse(raw_spec), env)``."""
    resolved = expand(parse(raw_spec), env)
    log.debug("attributes.resolved", count=len(resolved), keys=list(resolved))
    return resolved
