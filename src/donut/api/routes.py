"""
Report browsing routes.

    GET /job/{job}/donut/{path}            latest report of the project
    GET /job/{job}/{number}/donut/{path}   report of one build
    GET /plugin/donut/error.html           shown when no report exists

An empty ``path`` serves ``donut-report.html``; a missing report redirects
to the error page. Paths resolving outside the report directory are 404.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse, Response

from donut.core.settings import DonutSettings
from donut.logging import get_logger
from donut.publisher.actions import DonutAction, DonutBuildAction, DonutProjectAction
from donut.publisher.model import Project

log = get_logger(__name__)

ERROR_PAGE_URL = "/plugin/donut/error.html"

_ERROR_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Donut Reporting</title>
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
               background: #0f172a; color: #e2e8f0; padding: 2rem; }
        h1 { color: #f8fafc; margin-bottom: 0.5rem; }
        p { color: #94a3b8; }
    </style>
</head>
<body>
    <h1>No Donut report available</h1>
    <p>The report has not been generated for this build, or the build had no results.</p>
</body>
</html>"""

router = APIRouter()


def get_settings_dep(request: Request) -> DonutSettings:
    """Settings attached to the app by create_app()."""
    return request.app.state.settings


Settings = Annotated[DonutSettings, Depends(get_settings_dep)]


def _project(settings: DonutSettings, job: str) -> Project:
    if job in {"", ".", ".."} or "/" in job or "\\" in job:
        raise HTTPException(status_code=404, detail=f"Unknown job: {job}")
    project = Project.in_jobs_dir(settings.jobs_dir, job)
    if not project.root_dir.is_dir():
        raise HTTPException(status_code=404, detail=f"Unknown job: {job}")
    return project


def serve_action(action: DonutAction, path: str = "") -> Response:
    """Serve a file of the action's report directory."""
    if not action.has_report():
        log.info("report.missing", dir=str(action.dir()))
        return RedirectResponse(ERROR_PAGE_URL, status_code=302)

    base = action.dir().resolve()
    target = (base / (path or action.report_filename)).resolve()
    if not target.is_relative_to(base):
        raise HTTPException(status_code=404, detail="Not found")
    if target.is_dir():
        target = target / action.report_filename
    if not target.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(target)


@router.get(ERROR_PAGE_URL, response_class=HTMLResponse, include_in_schema=False)
def error_page() -> HTMLResponse:
    return HTMLResponse(_ERROR_PAGE)


@router.get("/job/{job}/donut", include_in_schema=False)
@router.get("/job/{job}/donut/{path:path}")
def project_report(job: str, settings: Settings, path: str = "") -> Response:
    """Latest report of a project."""
    return serve_action(DonutProjectAction(_project(settings, job)), path)


@router.get("/job/{job}/{number}/donut", include_in_schema=False)
@router.get("/job/{job}/{number}/donut/{path:path}")
def build_report(job: str, number: int, settings: Settings, path: str = "") -> Response:
    """Report of a single build."""
    run = _project(settings, job).get_build(number)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Unknown build: {job} #{number}")
    return serve_action(DonutBuildAction(run), path)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
