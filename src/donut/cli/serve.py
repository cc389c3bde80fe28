"""
CLI: ``donut serve``: start the report browser.
"""

from __future__ import annotations

import typer

from donut.cli.utils import console
from donut.core.settings import get_settings


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
) -> None:
    """Serve generated reports over HTTP."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Serving Donut reports[/bold green] from {settings.jobs_dir} on {host}:{port}")
    uvicorn.run(
        "donut.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
