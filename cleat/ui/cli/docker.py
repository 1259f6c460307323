"""
CLI commands for the Docker Compose lifecycle.

``cleat docker <action> [service]``; without a service the action covers
every compose profile, with one it runs in that service's directory.
"""

from __future__ import annotations

import click

from cleat.core.tasks.docker import ACTIONS, DESCRIPTIONS
from cleat.ui.cli.helpers import execute, scoped


@click.group()
def docker() -> None:
    """Docker Compose — build, up, down, rebuild, remove-orphans."""


def _register(action: str) -> None:
    @docker.command(action, help=f"{DESCRIPTIONS[action]}.")
    @click.argument("service", required=False)
    @click.pass_context
    def _command(ctx: click.Context, service: str | None) -> None:
        execute(ctx, scoped(f"docker {action}", service))


for _action in ACTIONS:
    _register(_action)
