"""
CLI: ``donut attributes``: preview custom attribute resolution.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import typer
from rich.table import Table

from donut.attributes import resolve_attributes
from donut.cli.utils import console, err_console, parse_env_pairs
from donut.core.environment import build_environment
from donut.core.errors import DonutError

app = typer.Typer(no_args_is_help=True)


@app.command("resolve")
def resolve(
    attributes: str | None = typer.Option(None, "--attributes", "-a", help="Attribute block (key=value lines)"),
    file: Path | None = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, readable=True, help="Read the attribute block from a file"
    ),
    env: list[str] | None = typer.Option(None, "--env", "-e", help="KEY=VALUE build variable (repeatable)"),
    pom: Path | None = typer.Option(None, "--pom", help="pom.xml whose properties join the environment"),
    process_env: bool = typer.Option(True, "--process-env/--no-process-env", help="Start from the process environment"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Resolve an attribute block against the build environment."""
    if attributes is not None and file is not None:
        err_console.print("[bold red]Error[/bold red]: use either --attributes or --file")
        raise typer.Exit(code=2)

    raw = file.read_text(encoding="utf-8") if file is not None else (attributes or "")

    base = dict(os.environ) if process_env else {}
    base.update(parse_env_pairs(env))

    try:
        environment = build_environment(base, pom)
        resolved = resolve_attributes(raw, environment)
    except DonutError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e

    if as_json:
        console.print_json(json.dumps(resolved))
        return

    table = Table(title="Custom attributes")
    table.add_column("Attribute")
    table.add_column("Value")
    for key, value in resolved.items():
        table.add_row(key, value)
    console.print(table)
