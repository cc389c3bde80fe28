"""
Tests for custom-attribute resolution.

Tests cover:
- Whitespace escaping (idempotence, delimiter handling)
- Parsing of the attribute block, malformed input
- Two-tier expansion against the build environment
"""

import pytest

from donut.attributes import escape_whitespace, expand, parse, resolve_attributes
from donut.core.environment import Environment
from donut.core.errors import MalformedSpecError


class TestEscapeWhitespace:
    def test_runs_collapse_to_single_escaped_space(self):
        assert escape_whitespace("Nightly  \t Run") == "Nightly\\ Run"

    def test_idempotent(self):
        raw = "title=Nightly  Run\nnote=a\tb c"
        once = escape_whitespace(raw)
        assert escape_whitespace(once) == once

    def test_already_escaped_space_untouched(self):
        assert escape_whitespace("a\\ b") == "a\\ b"

    def test_blank_after_escaped_backslash_is_escaped(self):
        assert escape_whitespace("a\\\\ b=c") == "a\\\\\\ b=c"
        assert parse("a\\\\ b=c") == {"a\\ b": "c"}

    def test_blank_after_odd_backslashes_untouched(self):
        assert escape_whitespace("a\\\\\\ b") == "a\\\\\\ b"

    def test_bare_blank_after_escaped_blank(self):
        once = escape_whitespace("a\\  b")
        assert once == "a\\ \\ b"
        assert escape_whitespace(once) == once

    def test_newlines_kept(self):
        assert escape_whitespace("a=1\nb=2") == "a=1\nb=2"


class TestParse:
    def test_empty_or_none(self):
        assert parse("") == {}
        assert parse(None) == {}

    def test_values_with_spaces(self):
        assert parse("title=Nightly Run") == {"title": "Nightly Run"}

    def test_order_preserved(self):
        assert list(parse("b=2\na=1\nc=3")) == ["b", "a", "c"]

    def test_comments_skipped(self):
        assert parse("# team owner\nowner=${TEAM}") == {"owner": "${TEAM}"}

    def test_delimiter_whitespace_becomes_part_of_key_and_value(self):
        assert parse("owner = platform") == {"owner ": " platform"}

    def test_unterminated_placeholder_raises(self):
        with pytest.raises(MalformedSpecError) as exc_info:
            parse("title=ok\nowner=${TEAM")
        assert exc_info.value.context.line == 2
        assert exc_info.value.context.metadata["key"] == "owner"

    def test_bad_unicode_escape_raises(self):
        with pytest.raises(MalformedSpecError):
            parse("name=\\uZZZZ")


class TestExpand:
    def test_placeholder_resolved(self):
        assert expand({"owner": "${TEAM}"}, {"TEAM": "platform"}) == {"owner": "platform"}

    def test_unresolved_placeholder_becomes_empty(self):
        assert expand({"branch": "${GIT_BRANCH}"}, {}) == {"branch": ""}

    def test_value_without_placeholders_unchanged(self):
        assert expand({"title": "Nightly Run"}, {"TEAM": "platform"}) == {"title": "Nightly Run"}

    def test_bare_name_matching_a_variable_is_substituted(self):
        assert expand({"owner": "TEAM"}, {"TEAM": "platform"}) == {"owner": "platform"}

    def test_bare_dollar_reference(self):
        assert expand({"owner": "$TEAM"}, Environment({"TEAM": "qa"})) == {"owner": "qa"}

    def test_multiple_placeholders(self):
        env = {"FOO": "x", "BAR": "y"}
        assert expand({"pair": "${FOO} and ${BAR}"}, env) == {"pair": "x and y"}

    def test_mixed_text_with_missing_reference(self):
        assert expand({"v": "build-${MISSING}-rc"}, {}) == {"v": "build--rc"}

    def test_dotted_name_resolved(self):
        env = {"project.version": "1.4.0"}
        assert expand({"version": "${project.version}"}, env) == {"version": "1.4.0"}


class TestResolveAttributes:
    def test_owner_and_title(self):
        result = resolve_attributes("owner=${TEAM}\ntitle=Nightly Run", {"TEAM": "platform"})
        assert result == {"owner": "platform", "title": "Nightly Run"}

    def test_branch_without_environment(self):
        assert resolve_attributes("branch=${GIT_BRANCH}", {}) == {"branch": ""}

    def test_empty_block(self):
        assert resolve_attributes("", {"TEAM": "platform"}) == {}

    def test_malformed_block_raises(self):
        with pytest.raises(MalformedSpecError):
            resolve_attributes("owner=${TEAM", {"TEAM": "platform"})

    def test_indented_continuation_keeps_one_space(self):
        raw = "tags=smoke,\\\n     regression"
        assert resolve_attributes(raw, {}) == {"tags": "smoke, regression"}
