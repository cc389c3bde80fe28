"""
Donut report build step.

Runs after the test step of a build:

    1. skip with ABORTED when the build was already aborted;
    2. fail when the source directory is absolute or leaves the workspace;
    3. skip with NOT_BUILT when the source directory holds no result files;
    4. otherwise copy the results to ``<build root>/donut``, resolve the
       custom attributes, call the report generator and map its
       ``build_failed`` flag onto FAILURE / SUCCESS.

Any exception raised in step 4 is written, with its traceback, to the build
console and turns the result into FAILURE; ``perform`` itself never raises
for report problems. A DonutBuildAction is attached in every case.

Usage:
    step = DonutReportStep(source_directory="target/cucumber", custom_attributes="owner=${TEAM}")
    result = step.perform(run, workspace, TaskListener(), generator=my_generator)
"""

from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import ClassVar, TextIO

from pydantic import BaseModel, ConfigDict, field_validator

from donut.attributes import resolve_attributes
from donut.core.environment import Environment, build_environment
from donut.core.errors import InvalidConfigError
from donut.core.manifest import MANIFEST_FILENAME
from donut.core.settings import get_settings
from donut.logging import get_logger, push_context
from donut.publisher.actions import REPORT_DIRNAME, DonutBuildAction, DonutProjectAction
from donut.publisher.generator import ReportGenerator, ReportRequest, coerce_console, load_generator
from donut.publisher.model import BuildResult, Project, Run
from donut.publisher.results import (
    DEFAULT_FILE_INCLUDES,
    CheckKind,
    FieldCheck,
    copy_results,
    has_results,
    validate_relative_directory,
)

log = get_logger(__name__)

LOG_PREFIX = "[DonutReportGenerator]"


class TaskListener:
    """Build console: the human-readable log of one build."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def println(self, message: str) -> None:
        self.stream.write(f"{message}\n")
        self.stream.flush()


class DonutReportStep(BaseModel):
    """Configuration and execution of the report step."""

    model_config = ConfigDict(frozen=True)

    display_name: ClassVar[str] = "Generate Donut report from results"

    source_directory: str = ""
    count_skipped_as_failure: bool = False
    count_pending_as_failure: bool = False
    count_undefined_as_failure: bool = False
    count_missing_as_failure: bool = False
    custom_attributes: str = ""
    file_includes: tuple[str, ...] = DEFAULT_FILE_INCLUDES

    @field_validator("custom_attributes", "source_directory", mode="before")
    @classmethod
    def _none_as_empty(cls, value: str | None) -> str:
        return value or ""

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def perform(
        self,
        run: Run,
        workspace: Path,
        listener: TaskListener | None = None,
        generator: ReportGenerator | None = None,
    ) -> BuildResult:
        """Generate the report for ``run`` and set its result."""
        listener = listener or TaskListener()
        workspace = Path(workspace)
        source_dir = workspace / self.source_directory
        output_dir = run.root_dir / REPORT_DIRNAME
        build_name = run.job
        build_number = str(run.number)
        source_check = validate_relative_directory(workspace, self.source_directory)

        token = push_context(job=build_name, build_number=build_number, step="donut.publish")
        try:
            if run.result is BuildResult.ABORTED:
                listener.println(f"{LOG_PREFIX} Skipping Donut report as build was aborted")
                log.info("report.skipped", reason="aborted")
                result = BuildResult.ABORTED
            elif not source_check.ok:
                listener.println(f"{LOG_PREFIX} Invalid source directory: {source_check.message}")
                log.error(
                    "report.invalid_source",
                    source_directory=self.source_directory,
                    error=source_check.message,
                )
                result = BuildResult.FAILURE
            elif not has_results(source_dir, self.file_includes):
                listener.println(f"{LOG_PREFIX} Skipping Donut report as no results found in: {source_dir}")
                log.info("report.skipped", reason="no_results", source_dir=str(source_dir))
                result = BuildResult.NOT_BUILT
            else:
                result = self._generate(
                    run, workspace, source_dir, output_dir, listener, generator
                )

            run.add_action(DonutBuildAction(run))
            run.set_result(result)
            log.info("report.result", result=result.value)
            return result
        finally:
            token.restore()

    def _generate(
        self,
        run: Run,
        workspace: Path,
        source_dir: Path,
        output_dir: Path,
        listener: TaskListener,
        generator: ReportGenerator | None,
    ) -> BuildResult:
        build_name = run.job
        build_number = str(run.number)
        try:
            env = self.collect_environment(run, workspace)

            listener.println(
                f"{LOG_PREFIX} Generating Donut Report for Job: {build_name} and Build Number: {build_number}"
            )
            listener.println(f"{LOG_PREFIX} Output directory: {output_dir.absolute()}")

            output_dir.mkdir(parents=True, exist_ok=True)
            copied = copy_results(source_dir, output_dir, self.file_includes)
            log.debug("results.copied", count=len(copied), output_dir=str(output_dir))

            if generator is None:
                generator = load_generator(get_settings().generator)

            request = ReportRequest(
                source_dir=output_dir.absolute(),
                output_dir=output_dir.absolute(),
                template=get_settings().report_template,
                count_skipped_as_failure=self.count_skipped_as_failure,
                count_pending_as_failure=self.count_pending_as_failure,
                count_undefined_as_failure=self.count_undefined_as_failure,
                count_missing_as_failure=self.count_missing_as_failure,
                build_name=build_name,
                build_number=build_number,
                custom_attributes=resolve_attributes(self.custom_attributes, env),
            )
            console = coerce_console(generator.generate(request))

            listener.println(f"{LOG_PREFIX} Completed generating Donut Report")
            log.info("report.generated", build_failed=console.build_failed)
            return BuildResult.FAILURE if console.build_failed else BuildResult.SUCCESS
        except Exception as e:
            listener.println(f"{LOG_PREFIX} An error occurred generating the report: {e!r}")
            for line in traceback.format_exception(e):
                listener.println(line.rstrip("\n"))
            log.error("report.failed", error_type=type(e).__name__, error=str(e), exc_info=True)
            return BuildResult.FAILURE

    @staticmethod
    def collect_environment(run: Run, workspace: Path) -> Environment:
        """Build environment overlaid with the workspace ``pom.xml`` properties."""
        return build_environment(run.get_environment(), Path(workspace) / MANIFEST_FILENAME)

    def check_source_directory(self, workspace: Path | None = None) -> FieldCheck:
        """Validate ``source_directory`` against ``workspace``.

        A directory that does not exist yet is returned as a warning.

        Raises:
            InvalidConfigError: If the directory is absolute or leaves the workspace.
        """
        check = validate_relative_directory(workspace, self.source_directory)
        if check.kind is CheckKind.ERROR:
            raise InvalidConfigError("source_directory", self.source_directory, check.message)
        return check

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def get_project_action(self, project: Project) -> DonutProjectAction:
        return DonutProjectAction(project)
