"""
Cleat — CLI entrypoint.

Usage:
    cleat                   open the command browser
    cleat build
    cleat django migrate api
    cleat plan "npm run build"
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from cleat import __version__
from cleat.core.observability.logging_config import configure_from_env
from cleat.ui.cli.helpers import execute, resolve_project_root


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cleat")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to cleat.yaml (default: search upward from the current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Cleat — one command surface for every service in the project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # Register project root in core context
    from cleat.core.config.loader import project_id
    from cleat.core.context import set_project_root

    root = resolve_project_root(ctx)
    set_project_root(root)

    # ── Logging setup (once, at process start) ──────────────────
    flag_level = None
    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    configure_from_env(flag_level, project=project_id(root))

    if ctx.invoked_subcommand is None:
        from cleat.ui.browser.app import run_browser

        code = run_browser(
            config_path=ctx.obj["config_path"],
            runner=ctx.obj.get("runner"),
        )
        sys.exit(code)


# ── Lifecycle ───────────────────────────────────────────────────


@cli.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Build every service (containers, npm, go, static files, assets)."""
    execute(ctx, "build")


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the project (compose up, or local dev servers)."""
    execute(ctx, "run")


@cli.command()
def version() -> None:
    """Print the cleat version."""
    click.echo(f"Cleat {__version__}")


@cli.command("run-workflow")
@click.argument("name")
@click.pass_context
def run_workflow(ctx: click.Context, name: str) -> None:
    """Run a workflow by id or name."""
    execute(ctx, f"workflow:{name}")


# ── Inspection ──────────────────────────────────────────────────


@cli.command()
@click.argument("command", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, command: tuple[str, ...], as_json: bool) -> None:
    """Show what COMMAND would run, without running it.

    Examples:

        cleat plan build

        cleat plan docker rebuild
    """
    from cleat.core.use_cases.run import plan_command

    result = plan_command(" ".join(command), config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"\n📋 {result.strategy}", fg="cyan", bold=True)
    if not result.planned:
        click.secho("   Nothing to do for this project", fg="yellow")
    for planned in result.planned:
        click.secho(f"   • {planned.task.name}", fg="green", nl=False)
        click.echo(f"  {planned.task.description}")
        for inv in planned.invocations:
            where = f"  (in {inv.cwd})" if inv.cwd else ""
            click.echo(f"       $ {' '.join(inv.argv)}{where}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Print the project as cleat sees it after auto-detection."""
    import yaml

    from cleat.core.use_cases.detect import run_detect

    result = run_detect(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    assert result.project is not None
    if not ctx.obj.get("quiet"):
        click.secho(f"# 🔍 {result.project_id}", fg="cyan", bold=True)
    click.echo(yaml.safe_dump(result.project.to_yaml_dict(), sort_keys=False), nl=False)


@cli.command()
@click.option("--limit", "-n", default=20, show_default=True, help="Entries to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def history(limit: int, as_json: bool) -> None:
    """Show the most recent commands run in this project."""
    from cleat.core.config.loader import project_id
    from cleat.core.context import get_project_root
    from cleat.core.persistence.history import HistoryStore

    entries = HistoryStore(project_id(get_project_root() or Path.cwd())).load()[:limit]

    if as_json:
        click.echo(json.dumps([e.model_dump(exclude_none=True) for e in entries], indent=2))
        return

    if not entries:
        click.secho("No history yet", fg="yellow")
        return

    for entry in entries:
        mark, color = ("✓", "green") if entry.success else ("✗", "red")
        click.secho(f"   {mark} ", fg=color, nl=False)
        step = f"  [{entry.workflow_run_id}]" if entry.workflow_run_id else ""
        click.echo(f"{entry.timestamp[:19]}  {entry.command}{step}")


@cli.command()
@click.option("--limit", "-n", default=3, show_default=True, help="Commands to show.")
def top(limit: int) -> None:
    """Show the most used commands in this project."""
    from cleat.core.config.loader import project_id
    from cleat.core.context import get_project_root
    from cleat.core.persistence.stats import StatsStore

    ranked = StatsStore(project_id(get_project_root() or Path.cwd())).top_commands(limit)
    if not ranked:
        click.secho("No commands run yet", fg="yellow")
        return
    for command, count in ranked:
        click.echo(f"   {count:>4}  {command}")


# ── Register sub-command groups from cleat/ui/cli/ ─────────────

from cleat.ui.cli.cloud import cloud
from cleat.ui.cli.django import django
from cleat.ui.cli.docker import docker
from cleat.ui.cli.go import go
from cleat.ui.cli.npm import npm
from cleat.ui.cli.ruby import ruby
from cleat.ui.cli.terraform import terraform
from cleat.ui.cli.workflow import workflow

cli.add_command(docker)
cli.add_command(django)
cli.add_command(npm)
cli.add_command(go)
cli.add_command(ruby)
cli.add_command(terraform)
cli.add_command(cloud)
cli.add_command(workflow)


def main() -> None:
    """Console-script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
