"""
Shared plumbing for the CLI command groups.

Every command builds the textual command the dispatcher understands and
hands it to the run use case, so ``cleat django migrate api`` and typing
``django migrate:api`` in the browser do exactly the same thing.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click


def resolve_project_root(ctx: click.Context) -> Path:
    """Resolve project root from context or CWD."""
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        from cleat.core.config.loader import find_project_file

        config_path = find_project_file()
    return config_path.parent.resolve() if config_path else Path.cwd()


def scoped(command: str, target: str | None) -> str:
    """``command`` with an optional ``:<target>`` suffix."""
    return f"{command}:{target}" if target else command


def execute(ctx: click.Context, command: str) -> None:
    """Run ``command``; report failure on stderr and exit 1."""
    from cleat.core.use_cases.run import run_command

    result = run_command(
        command,
        config_path=ctx.obj.get("config_path"),
        runner=ctx.obj.get("runner"),
    )
    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)
