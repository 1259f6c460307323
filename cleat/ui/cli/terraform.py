"""
CLI commands for Terraform.

``cleat terraform <action> [env]``; an environment is required when the
IaC directory holds one folder per environment.
"""

from __future__ import annotations

import click

from cleat.ui.cli.helpers import execute, scoped

COMMANDS = {
    "init": "Initialize the working directory.",
    "init-upgrade": "Initialize and upgrade providers and modules.",
    "plan": "Show the execution plan.",
    "apply": "Apply the changes.",
    "apply-refresh": "Refresh state without changing infrastructure.",
}


@click.group()
def terraform() -> None:
    """Terraform — init, plan, apply."""


def _register(action: str, help_text: str) -> None:
    @terraform.command(action, help=help_text)
    @click.argument("env", required=False)
    @click.pass_context
    def _command(ctx: click.Context, env: str | None) -> None:
        execute(ctx, scoped(f"terraform {action}", env))


for _action, _help in COMMANDS.items():
    _register(_action, _help)
