"""
CLI command for npm.

    cleat npm install [service]
    cleat npm <script> [service]
"""

from __future__ import annotations

import click

from cleat.ui.cli.helpers import execute, scoped


@click.command()
@click.argument("script")
@click.argument("service", required=False)
@click.pass_context
def npm(ctx: click.Context, script: str, service: str | None) -> None:
    """Run an npm script, or `install`, for a service.

    Examples:

        cleat npm install

        cleat npm build frontend
    """
    if script == "install":
        execute(ctx, scoped("npm install", service))
        return
    target = f"{service}:{script}" if service else script
    execute(ctx, f"npm run {target}")
