"""CLI commands for Ruby and Rails services (``cleat ruby <action> [service]``)."""

from __future__ import annotations

import click

from cleat.ui.cli.helpers import execute, scoped

COMMANDS = {
    "migrate": "Run Rails migrations.",
    "console": "Open a Rails console.",
    "server": "Start the Rails server.",
    "install": "Run bundle install.",
}


@click.group()
def ruby() -> None:
    """Ruby — migrate, console, server, install."""


def _register(action: str, help_text: str) -> None:
    @ruby.command(action, help=help_text)
    @click.argument("service", required=False)
    @click.pass_context
    def _command(ctx: click.Context, service: str | None) -> None:
        execute(ctx, scoped(f"ruby {action}", service))


for _action, _help in COMMANDS.items():
    _register(_action, _help)
