"""
CLI utility helpers: consoles and option parsing.
"""

from __future__ import annotations

import typer
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def parse_env_pairs(pairs: list[str] | None) -> dict[str, str]:
    """Turn repeated ``--env KEY=VALUE`` options into a dict (order kept)."""
    env: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            err_console.print(f"[bold red]Error[/bold red]: expected KEY=VALUE, got {pair!r}")
            raise typer.Exit(code=2)
        env[key] = value
    return env
