"""Settings for donut-spine.

Configuration is environment-driven (``DONUT_`` prefix, optional ``.env``
file) and validated by pydantic-settings at startup.

Fields
──────
jobs_dir        : Root directory holding ``<job>/builds/<number>`` trees
generator       : ``module:qualname`` reference to the report generator
file_includes   : Glob patterns selecting result files
report_template : Template name handed to the generator
log_level       : Log level
log_format      : ``console`` or ``json``
host / port     : Bind address for ``donut serve``

Examples:
    >>> import os
    >>> os.environ["DONUT_GENERATOR"] = "acme.reports:Generator"
    >>> get_settings.cache_clear()
    >>> get_settings().generator
    'acme.reports:Generator'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DonutSettings(BaseSettings):
    """Settings shared by the CLI, the build step and the web app.

    Order of precedence (highest → lowest):
        1. Environment variables (``DONUT_JOBS_DIR``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    model_config = SettingsConfigDict(
        env_prefix="DONUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    jobs_dir: Path = Field(
        default_factory=lambda: Path.home() / ".donut" / "jobs",
        description="Root of the <job>/builds/<number> tree",
    )

    # ── Report generation ────────────────────────────────────────
    generator: str | None = Field(
        default=None,
        description="module:qualname of the report generator",
    )
    file_includes: list[str] = Field(
        default_factory=lambda: ["**/*.json"],
        description="Glob patterns selecting result files",
    )
    report_template: str = Field(default="default", description="Generator template name")

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "console"

    # ── Web app ──────────────────────────────────────────────────
    host: str = "127.0.0.1"
    port: int = 8080

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"unsupported log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in {"console", "json"}:
            raise ValueError(f"unsupported log format: {value}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> DonutSettings:
    """Settings, loaded once per process."""
    return DonutSettings()
