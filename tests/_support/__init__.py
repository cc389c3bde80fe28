"""
Test support utilities for donut-spine tests.

Helpers that are not fixtures but are shared across test files:
POM writers and fake report generators.
"""

from __future__ import annotations

import json
from pathlib import Path

from donut.publisher.generator import ReportConsole, ReportRequest

SAMPLE_FEATURE = [
    {
        "id": "checkout",
        "name": "Checkout",
        "elements": [
            {
                "name": "Pay by card",
                "steps": [{"name": "a card", "result": {"status": "passed"}}],
            }
        ],
    }
]


def write_results(directory: Path, name: str = "checkout.json") -> Path:
    """Write a cucumber JSON result file into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(json.dumps(SAMPLE_FEATURE), encoding="utf-8")
    return path


def write_pom(directory: Path, properties: dict[str, str], *, version: str | None = None) -> Path:
    """Write a minimal namespaced pom.xml declaring ``properties``."""
    props = "".join(f"<{k}>{v}</{k}>" for k, v in properties.items())
    coords = f"<version>{version}</version>" if version else ""
    pom = directory / "pom.xml"
    pom.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">'
        "<modelVersion>4.0.0</modelVersion>"
        "<groupId>io.example</groupId><artifactId>shop</artifactId>"
        f"{coords}<properties>{props}</properties></project>",
        encoding="utf-8",
    )
    return pom


class RecordingGenerator:
    """Report generator that records requests and writes a stub report."""

    def __init__(self, build_failed: bool = False) -> None:
        self.build_failed = build_failed
        self.requests: list[ReportRequest] = []

    def generate(self, request: ReportRequest) -> ReportConsole:
        self.requests.append(request)
        report = request.output_dir / "donut-report.html"
        report.write_text(
            f"<html><body>{request.build_name} #{request.build_number}"
            f"<pre>{json.dumps(request.custom_attributes, sort_keys=True)}</pre></body></html>",
            encoding="utf-8",
        )
        return ReportConsole(build_failed=self.build_failed, report_path=report)


class ExplodingGenerator:
    """Report generator that always raises."""

    def generate(self, request: ReportRequest) -> ReportConsole:
        raise RuntimeError("renderer crashed")


def failing_generator(request: ReportRequest) -> bool:
    """Plain-callable generator reporting a failed build."""
    return True
