"""CLI commands for Go services (``cleat go <action> [service]``)."""

from __future__ import annotations

import click

from cleat.core.tasks.golang import ACTIONS
from cleat.ui.cli.helpers import execute, scoped

HELP = {
    "build": "Build all packages.",
    "test": "Run the tests.",
    "fmt": "Format the sources.",
    "vet": "Report suspicious constructs.",
    "generate": "Run go generate.",
    "run": "Run the main package.",
    "coverage": "Run the tests with a coverage report.",
}


@click.group()
def go() -> None:
    """Go — build, test, fmt, vet, generate, run, coverage, install, mod tidy."""


def _register(action: str) -> None:
    @go.command(action, help=HELP[action])
    @click.argument("service", required=False)
    @click.pass_context
    def _command(ctx: click.Context, service: str | None) -> None:
        execute(ctx, scoped(f"go {action}", service))


for _action in ACTIONS:
    if " " not in _action:
        _register(_action)


@go.command()
@click.argument("service", required=False)
@click.pass_context
def install(ctx: click.Context, service: str | None) -> None:
    """Build the binary and copy it to an install directory."""
    execute(ctx, scoped("go install", service))


@go.group()
def mod() -> None:
    """Module maintenance."""


@mod.command()
@click.argument("service", required=False)
@click.pass_context
def tidy(ctx: click.Context, service: str | None) -> None:
    """Add missing and remove unused modules."""
    execute(ctx, scoped("go mod tidy", service))
