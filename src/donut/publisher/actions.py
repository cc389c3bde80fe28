"""Report browsing actions attached to builds and projects.

An action names the directory whose files are served under
``.../donut/`` and the index page (``donut-report.html``). The web app
(donut.api) turns them into routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from donut.publisher.generator import REPORT_FILENAME
from donut.publisher.model import Project, Run

REPORT_DIRNAME = "donut"


class DonutAction(ABC):
    """Base class for report actions."""

    url_name = "donut"
    display_name = "Donut Reporting"
    icon_file_name = "/plugin/donut/icons/donut.png"
    report_filename = REPORT_FILENAME

    @property
    @abstractmethod
    def title(self) -> str:
        """Title shown when browsing the report directory."""

    @abstractmethod
    def dir(self) -> Path:
        """Directory holding the report files."""

    def report_path(self) -> Path:
        return self.dir() / self.report_filename

    def has_report(self) -> bool:
        return self.report_path().is_file()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dir={str(self.dir())!r})"


class DonutBuildAction(DonutAction):
    """Report of a single build: ``<build root>/donut``."""

    def __init__(self, run: Run) -> None:
        self.run = run

    @property
    def title(self) -> str:
        return f"{self.run.display_name} html3"

    def dir(self) -> Path:
        return self.run.root_dir / REPORT_DIRNAME


class DonutProjectAction(DonutAction):
    """Latest report of a project.

    Serves the last completed build's report directory when it exists,
    otherwise ``<project root>/donut``.
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    @property
    def title(self) -> str:
        return f"{self.project.display_name} html2"

    def dir(self) -> Path:
        run = self.project.get_last_completed_build()
        if run is not None:
            build_dir = run.root_dir / REPORT_DIRNAME
            if build_dir.exists():
                return build_dir
        return self.project.root_dir / REPORT_DIRNAME
