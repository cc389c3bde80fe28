"""
Java ``.properties`` text parser.

Implements the line grammar of ``java.util.Properties.load``:

- Natural lines end at ``\\n``, ``\\r`` or ``\\r\\n``.
- Leading spaces, tabs and form feeds of every natural line are skipped.
- A line whose first non-blank character is ``#`` or ``!`` is a comment.
- A line ending in an odd number of backslashes continues onto the next
  natural line (whose leading whitespace is skipped).
- The key ends at the first unescaped ``=``, ``:`` or whitespace. Whitespace
  after the key, one ``=``/``:`` and whitespace after that are consumed.
- Escapes ``\\t \\n \\r \\f \\uXXXX`` are decoded; any other escaped
  character stands for itself.

Keys keep their first insertion position; a repeated key overwrites the
value.

Usage:
    from donut.core.properties import load_properties

    props = load_properties("# comment\\nowner=platform\\ntitle:Nightly\\\\ Run")
    # {'owner': 'platform', 'title': 'Nightly Run'}
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from donut.core.errors import MalformedSpecError

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


@dataclass(frozen=True)
class LogicalLine:
    """A key/value line after comment removal and continuation joining."""

    text: str
    lineno: int  # 1-based number of the first natural line


def iter_logical_lines(text: str) -> Iterator[LogicalLine]:
    """Yield logical lines, joining continuations and dropping comments."""
    natural = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    buffer: list[str] = []
    start = 0
    for index, raw in enumerate(natural, start=1):
        line = raw.lstrip(_WHITESPACE)
        if not buffer:
            if not line or line[0] in "#!":
                continue
            start = index

        if _ends_with_continuation(line):
            buffer.append(line[:-1])
            continue

        buffer.append(line)
        joined = "".join(buffer)
        buffer = []
        # A continuation into a blank line leaves nothing to parse.
        if joined:
            yield LogicalLine(joined, start)

    if buffer:
        # Continuation on the last line: the dangling backslash is dropped.
        joined = "".join(buffer)
        if joined:
            yield LogicalLine(joined, start)


def _ends_with_continuation(line: str) -> bool:
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def split_key_value(line: str) -> tuple[str, str]:
    """Split a logical line into its raw (still escaped) key and value."""
    length = len(line)
    key_end = 0
    value_start = length
    has_separator = False
    backslash = False

    while key_end < length:
        ch = line[key_end]
        if ch in _SEPARATORS and not backslash:
            value_start = key_end + 1
            has_separator = True
            break
        if ch in _WHITESPACE and not backslash:
            value_start = key_end + 1
            break
        backslash = (not backslash) if ch == "\\" else False
        key_end += 1

    while value_start < length:
        ch = line[value_start]
        if ch not in _WHITESPACE:
            if not has_separator and ch in _SEPARATORS:
                has_separator = True
            else:
                break
        value_start += 1

    return line[:key_end], line[value_start:]


def unescape(text: str, lineno: int | None = None) -> str:
    """Decode backslash escapes.

    Raises:
        MalformedSpecError: If a ``\\u`` escape is not followed by four
            hexadecimal digits.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        i += 1
        if ch != "\\":
            out.append(ch)
            continue
        if i >= length:
            # Trailing lone backslash is dropped
            break
        ch = text[i]
        i += 1
        if ch == "u":
            digits = text[i : i + 4]
            if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise MalformedSpecError(
                    f"Malformed \\uxxxx encoding: {text[i - 2 : i + 4]!r}",
                    line=lineno,
                )
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_ESCAPES.get(ch, ch))
    return "".join(out)


def iter_properties(text: str) -> Iterator[tuple[str, str, int]]:
    """Yield ``(key, value, lineno)`` triples in document order."""
    for logical in iter_logical_lines(text):
        raw_key, raw_value = split_key_value(logical.text)
        yield (
            unescape(raw_key, logical.lineno),
            unescape(raw_value, logical.lineno),
            logical.lineno,
        )


def load_properties(text: str | None) -> dict[str, str]:
    """Parse ``.properties`` text into an insertion-ordered dict."""
    if not text:
        return {}
    return {key: value for key, value, _ in iter_properties(text)}
