"""
CLI commands for Google Cloud.

Thin wrappers: each command dispatches ``cloud <action>`` through the run
use case, which prompts for any missing account, version or service
account.
"""

from __future__ import annotations

import click

from cleat.ui.cli.helpers import execute, scoped


@click.group()
def cloud() -> None:
    """Google Cloud — configuration, login, console, App Engine."""


@cloud.command()
@click.pass_context
def activate(ctx: click.Context) -> None:
    """Activate this project's gcloud configuration."""
    execute(ctx, "cloud activate")


@cloud.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create this project's gcloud configuration."""
    execute(ctx, "cloud init")


@cloud.command("set-config")
@click.pass_context
def set_config(ctx: click.Context) -> None:
    """Set account, project and quota project."""
    execute(ctx, "cloud set-config")


@cloud.command("adc-login")
@click.pass_context
def adc_login(ctx: click.Context) -> None:
    """Log in and create application default credentials."""
    execute(ctx, "cloud adc-login")


@cloud.command("adc-impersonate-login")
@click.pass_context
def adc_impersonate_login(ctx: click.Context) -> None:
    """Log in impersonating a service account."""
    execute(ctx, "cloud adc-impersonate-login")


@cloud.command()
@click.pass_context
def console(ctx: click.Context) -> None:
    """Open the Cloud console in a browser."""
    execute(ctx, "cloud console")


# ── App Engine ──────────────────────────────────────────────────


@cloud.group("app-engine")
def app_engine() -> None:
    """App Engine deploys and promotions."""


@app_engine.command()
@click.argument("service", required=False)
@click.pass_context
def deploy(ctx: click.Context, service: str | None) -> None:
    """Deploy the app (or one service) to App Engine."""
    execute(ctx, scoped("cloud app-engine deploy", service))


@app_engine.command()
@click.argument("service", required=False)
@click.pass_context
def promote(ctx: click.Context, service: str | None) -> None:
    """Route all traffic to a version."""
    execute(ctx, scoped("cloud app-engine promote", service))
