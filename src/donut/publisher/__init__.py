"""
Report build step and the actions it attaches.

Usage:
    from donut.publisher import DonutReportStep, Project

    project = Project.in_jobs_dir(jobs_dir, "nightly")
    run = project.new_build()
    DonutReportStep(source_directory="target/cucumber").perform(run, workspace)
"""

from donut.publisher.actions import DonutAction, DonutBuildAction, DonutProjectAction
from donut.publisher.generator import (
    ReportConsole,
    ReportGenerator,
    ReportRequest,
    load_generator,
)
from donut.publisher.model import BuildResult, Project, Run
from donut.publisher.results import DEFAULT_FILE_INCLUDES, copy_results, has_results
from donut.publisher.step import DonutReportStep, TaskListener

__all__ = [
    "DonutReportStep",
    "TaskListener",
    "BuildResult",
    "Project",
    "Run",
    "DonutAction",
    "DonutBuildAction",
    "DonutProjectAction",
    "ReportConsole",
    "ReportGenerator",
    "ReportRequest",
    "load_generator",
    "DEFAULT_FILE_INCLUDES",
    "copy_results",
    "has_results",
]
