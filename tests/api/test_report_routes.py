"""
Tests for the report browsing routes.

Uses TestClient against create_app() with a temporary jobs directory.
"""

from pathlib import Path

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from donut.api import create_app
from donut.api.routes import ERROR_PAGE_URL, serve_action
from donut.core.settings import DonutSettings
from donut.publisher.actions import DonutBuildAction
from donut.publisher.model import BuildResult, Project, Run


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    settings = DonutSettings(_env_file=None, jobs_dir=tmp_path / "jobs")
    return TestClient(create_app(settings=settings))


def _published(project: Project, body: str = "<html>report</html>") -> Run:
    run = project.new_build(environment={})
    report_dir = run.root_dir / "donut"
    report_dir.mkdir(parents=True)
    (report_dir / "donut-report.html").write_text(body, encoding="utf-8")
    (report_dir / "checkout.json").write_text("[]", encoding="utf-8")
    run.set_result(BuildResult.SUCCESS)
    return run


class TestProjectReport:
    def test_serves_latest_report(self, client: TestClient, project: Project):
        _published(project, "<html>first</html>")
        _published(project, "<html>second</html>")

        response = client.get("/job/nightly/donut")

        assert response.status_code == 200
        assert response.text == "<html>second</html>"
        assert response.headers["content-type"].startswith("text/html")

    def test_serves_report_files(self, client: TestClient, project: Project):
        _published(project)
        response = client.get("/job/nightly/donut/checkout.json")
        assert response.status_code == 200
        assert response.json() == []

    def test_missing_report_redirects_to_error_page(self, client: TestClient, project: Project):
        response = client.get("/job/nightly/donut", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == ERROR_PAGE_URL

    def test_unknown_job(self, client: TestClient):
        assert client.get("/job/ghost/donut").status_code == 404

    def test_missing_file(self, client: TestClient, project: Project):
        _published(project)
        assert client.get("/job/nightly/donut/absent.json").status_code == 404


class TestBuildReport:
    def test_serves_build_report(self, client: TestClient, project: Project):
        _published(project, "<html>build one</html>")
        response = client.get("/job/nightly/1/donut/")
        assert response.status_code == 200
        assert "build one" in response.text

    def test_directory_serves_its_index(self, client: TestClient, project: Project):
        run = _published(project)
        nested = run.root_dir / "donut" / "features"
        nested.mkdir()
        (nested / "donut-report.html").write_text("<html>features</html>", encoding="utf-8")

        assert client.get("/job/nightly/1/donut/features").text == "<html>features</html>"

    def test_unknown_build(self, client: TestClient, project: Project):
        _published(project)
        assert client.get("/job/nightly/5/donut").status_code == 404

    def test_build_without_report_redirects(self, client: TestClient, project: Project):
        project.new_build(environment={}).set_result(BuildResult.NOT_BUILT)
        response = client.get("/job/nightly/1/donut", follow_redirects=False)
        assert response.status_code == 302

    def test_path_outside_report_dir_rejected(self, project: Project):
        run = _published(project)
        with pytest.raises(HTTPException) as exc_info:
            serve_action(DonutBuildAction(run), "../build.json")
        assert exc_info.value.status_code == 404


def test_error_page(client: TestClient):
    response = client.get(ERROR_PAGE_URL)
    assert response.status_code == 200
    assert "No Donut report available" in response.text


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_app_metadata(client: TestClient):
    assert client.app.title == "Donut Reporting"
    assert client.app.state.settings.jobs_dir.name == "jobs"
