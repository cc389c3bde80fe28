"""
CLI: ``donut publish``: run the report step for one build.
"""

from __future__ import annotations

import os
from pathlib import Path

import typer

from donut.cli.utils import console, err_console, parse_env_pairs
from donut.core.errors import ConfigError
from donut.core.settings import get_settings
from donut.publisher.generator import load_generator
from donut.publisher.model import BuildResult, Project
from donut.publisher.results import CheckKind
from donut.publisher.step import DonutReportStep, TaskListener

_RESULT_STYLE = {
    BuildResult.SUCCESS: "bold green",
    BuildResult.FAILURE: "bold red",
    BuildResult.NOT_BUILT: "yellow",
    BuildResult.ABORTED: "dim",
}


def publish(
    job: str = typer.Option(..., "--job", "-j", help="Job (project) name"),
    number: int | None = typer.Option(None, "--number", "-n", help="Build number (default: next)"),
    workspace: Path = typer.Option(Path("."), "--workspace", "-w", help="Build workspace"),
    source_directory: str = typer.Option("", "--source-dir", "-s", help="Results directory, relative to the workspace"),
    count_skipped_as_failure: bool = typer.Option(False, "--count-skipped-as-failure"),
    count_pending_as_failure: bool = typer.Option(False, "--count-pending-as-failure"),
    count_undefined_as_failure: bool = typer.Option(False, "--count-undefined-as-failure"),
    count_missing_as_failure: bool = typer.Option(False, "--count-missing-as-failure"),
    attributes: str = typer.Option("", "--attributes", "-a", help="Custom attribute block"),
    attributes_file: Path | None = typer.Option(
        None,
        "--attributes-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Read the attribute block from a file",
    ),
    env: list[str] | None = typer.Option(None, "--env", "-e", help="KEY=VALUE build variable (repeatable)"),
    jobs_dir: Path | None = typer.Option(None, "--jobs-dir", help="Override DONUT_JOBS_DIR"),
    generator: str | None = typer.Option(None, "--generator", "-g", help="module:qualname of the report generator"),
    aborted: bool = typer.Option(False, "--aborted", help="Mark the build as already aborted"),
) -> None:
    """Copy results, generate the report and record the build result."""
    settings = get_settings()

    if attributes_file is not None:
        attributes = attributes_file.read_text(encoding="utf-8")

    step = DonutReportStep(
        source_directory=source_directory,
        count_skipped_as_failure=count_skipped_as_failure,
        count_pending_as_failure=count_pending_as_failure,
        count_undefined_as_failure=count_undefined_as_failure,
        count_missing_as_failure=count_missing_as_failure,
        custom_attributes=attributes,
        file_includes=tuple(settings.file_includes),
    )

    report_generator = None
    try:
        check = step.check_source_directory(workspace)
        if generator is not None:
            report_generator = load_generator(generator)
    except ConfigError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=2) from e
    if check.kind is CheckKind.WARNING:
        err_console.print(f"[yellow]Warning[/yellow]: {check.message}")

    build_env = dict(os.environ)
    build_env.update(parse_env_pairs(env))

    project = Project.in_jobs_dir(jobs_dir or settings.jobs_dir, job)
    run = project.new_build(number, environment=build_env)
    if aborted:
        run.result = BuildResult.ABORTED

    result = step.perform(run, workspace, TaskListener(), generator=report_generator)

    style = _RESULT_STYLE[result]
    console.print(f"{run.full_display_name}: [{style}]{result.value}[/{style}]")
    if result is BuildResult.FAILURE:
        raise typer.Exit(code=1)
