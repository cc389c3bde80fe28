"""
Tests for the report generator boundary.

Tests cover:
- Loading generators from module:qualname references
- Normalizing generator return values
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from donut.core.errors import ConfigError, ErrorCategory, ReportGenerationError
from donut.publisher.generator import (
    CallableGenerator,
    ReportConsole,
    ReportGenerator,
    ReportRequest,
    coerce_console,
    load_generator,
    resolve_ref,
)
from tests._support import RecordingGenerator


@pytest.fixture
def request_for(tmp_path: Path) -> ReportRequest:
    return ReportRequest(source_dir=tmp_path, output_dir=tmp_path, build_name="nightly", build_number="7")


class TestLoadGenerator:
    def test_class_is_instantiated(self):
        generator = load_generator("tests._support:RecordingGenerator")
        assert isinstance(generator, RecordingGenerator)
        assert isinstance(generator, ReportGenerator)

    def test_function_is_wrapped(self, request_for: ReportRequest):
        generator = load_generator("tests._support:failing_generator")
        assert isinstance(generator, CallableGenerator)
        assert generator.generate(request_for).build_failed is True

    def test_nested_qualname(self):
        assert resolve_ref("pathlib:Path.home") == Path.home

    @pytest.mark.parametrize("ref", [None, ""])
    def test_unconfigured(self, ref):
        with pytest.raises(ConfigError, match="No report generator configured"):
            load_generator(ref)

    @pytest.mark.parametrize(
        "ref",
        ["no_colon", "tests._support:", "donut_missing_module:Generator", "tests._support:Missing"],
    )
    def test_unloadable_reference(self, ref: str):
        with pytest.raises(ConfigError):
            load_generator(ref)

    def test_non_callable_object_rejected(self):
        with pytest.raises(ConfigError, match="neither"):
            load_generator("tests._support:SAMPLE_FEATURE")


class TestCoerceConsole:
    def test_console_passthrough(self):
        console = ReportConsole(build_failed=False, passed=3)
        assert coerce_console(console) is console

    def test_bool(self):
        assert coerce_console(True) == ReportConsole(build_failed=True)

    def test_dict(self):
        console = coerce_console({"build_failed": False, "failed": 0, "passed": 12})
        assert console.passed == 12
        assert console.build_failed is False

    def test_object_with_method(self):
        class LegacyConsole:
            def build_failed(self):
                return True

        assert coerce_console(LegacyConsole()).build_failed is True

    @pytest.mark.parametrize("value", [None, "SUCCESS", 0])
    def test_unsupported_value(self, value):
        with pytest.raises(ReportGenerationError) as exc_info:
            coerce_console(value)
        assert exc_info.value.category is ErrorCategory.REPORT
        assert exc_info.value.context.metadata["returned_type"] == type(value).__name__

    def test_invalid_dict(self):
        with pytest.raises(ReportGenerationError) as exc_info:
            coerce_console({"passed": 3})
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_callable_generator_propagates(self, request_for: ReportRequest):
        with pytest.raises(ReportGenerationError):
            CallableGenerator(lambda request: None).generate(request_for)


def test_request_defaults(request_for: ReportRequest):
    assert request_for.template == "default"
    assert request_for.custom_attributes == {}
    assert request_for.count_pending_as_failure is False
