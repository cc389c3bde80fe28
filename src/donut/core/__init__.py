"""Core primitives: errors, settings, properties grammar, environment, manifest."""

from donut.core.environment import Environment, build_environment
from donut.core.errors import (
    ConfigError,
    DonutError,
    MalformedSpecError,
    ManifestError,
    ReportGenerationError,
)
from donut.core.manifest import read_manifest_properties
from donut.core.properties import load_properties

__all__ = [
    "Environment",
    "build_environment",
    "read_manifest_properties",
    "load_properties",
    "DonutError",
    "ConfigError",
    "MalformedSpecError",
    "ManifestError",
    "ReportGenerationError",
]
