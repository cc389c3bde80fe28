"""
Shared pytest fixtures for donut-spine tests.

This module provides:
- Settings cache / log context cleanup for test isolation
- Workspace and project directory builders
- A recording report generator

Usage:
    def test_publish(workspace, project, generator):
        run = project.new_build(environment={})
        DonutReportStep(source_directory="results").perform(run, workspace, generator=generator)
"""

import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure donut package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from donut.core.settings import get_settings
from donut.logging import clear_context
from donut.publisher.model import Project
from tests._support import RecordingGenerator, write_results


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Fresh settings per test, with jobs stored under tmp_path."""
    monkeypatch.setenv("DONUT_JOBS_DIR", str(tmp_path / "jobs"))
    monkeypatch.delenv("DONUT_GENERATOR", raising=False)
    get_settings.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    clear_context()


# =============================================================================
# Filesystem fixtures
# =============================================================================


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with one cucumber JSON file under ``results/``."""
    ws = tmp_path / "workspace"
    write_results(ws / "results")
    return ws


@pytest.fixture
def project(tmp_path: Path) -> Project:
    """Empty job directory under the configured jobs dir."""
    p = Project.in_jobs_dir(tmp_path / "jobs", "nightly")
    p.root_dir.mkdir(parents=True)
    return p


@pytest.fixture
def generator() -> RecordingGenerator:
    return RecordingGenerator()
