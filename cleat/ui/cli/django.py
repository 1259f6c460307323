"""CLI commands for Django services (``cleat django <action> [service]``)."""

from __future__ import annotations

import click

from cleat.core.tasks.django import ACTIONS
from cleat.ui.cli.helpers import execute, scoped


@click.group()
def django() -> None:
    """Django — migrations, static files, dev user, secret key."""


def _register(action: str, description: str) -> None:
    @django.command(action, help=f"{description}.")
    @click.argument("service", required=False)
    @click.pass_context
    def _command(ctx: click.Context, service: str | None) -> None:
        execute(ctx, scoped(f"django {action}", service))


for _action, (_args, _description, _deps) in ACTIONS.items():
    _register(_action, _description)
