"""
CLI commands for workflows kept in workflow files.

    cleat workflow list
    cleat workflow add "deploy all" "build" "cloud app-engine deploy"
    cleat workflow remove deploy-all [--user]
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def workflow() -> None:
    """Workflows — named sequences of commands."""


@workflow.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_(ctx: click.Context, as_json: bool) -> None:
    """List every workflow (declared and file-based)."""
    from cleat.core.use_cases.workflows import list_workflows

    result = list_workflows(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if not result.workflows:
        click.secho("No workflows defined", fg="yellow")
        return

    for wf in result.workflows:
        click.secho(f"⚙️  {wf.name}", fg="cyan", bold=True, nl=False)
        click.echo(f"  (workflow:{wf.id})")
        for step in wf.ordered_commands:
            click.echo(f"     • {step}")


@workflow.command()
@click.argument("name")
@click.argument("commands", nargs=-1, required=True)
@click.option("--user", is_flag=True, help="Save to the personal workflow file.")
@click.pass_context
def add(ctx: click.Context, name: str, commands: tuple[str, ...], user: bool) -> None:
    """Save a workflow running COMMANDS in order."""
    from cleat.core.use_cases.workflows import add_workflow

    result = add_workflow(
        name, list(commands), config_path=ctx.obj.get("config_path"), user=user,
    )
    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    wf = result.workflows[0]
    click.secho(f"✅ Saved workflow '{wf.name}' ({wf.id})", fg="green")
    click.echo(f"   {result.path}")


@workflow.command()
@click.argument("workflow_id")
@click.option("--user", is_flag=True, help="Remove from the personal workflow file.")
@click.pass_context
def remove(ctx: click.Context, workflow_id: str, user: bool) -> None:
    """Delete a file-based workflow by id."""
    from cleat.core.use_cases.workflows import remove_workflow

    result = remove_workflow(workflow_id, config_path=ctx.obj.get("config_path"), user=user)
    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"✅ Removed workflow '{workflow_id}'", fg="green")
