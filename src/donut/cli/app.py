"""
Root Typer application for the donut CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from donut import __version__
from donut.core.settings import get_settings
from donut.logging import configure_logging

app = Typer(
    name="donut",
    help="Publish Donut test reports for CI builds.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"donut-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    """Resolve report attributes, publish reports and browse them."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, format=settings.log_format)


# ── Sub-command registration ─────────────────────────────────────────────

from donut.cli.attributes import app as attributes_app  # noqa: E402
from donut.cli.publish import publish  # noqa: E402
from donut.cli.serve import serve  # noqa: E402

app.add_typer(attributes_app, name="attributes", help="Custom attribute tools.")
app.command("publish")(publish)
app.command("serve")(serve)
