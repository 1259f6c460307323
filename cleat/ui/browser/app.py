"""
Terminal browser — pick a command from the project tree and run it.

A plain prompt loop on top of click:

    <number>   select a command (preview, confirm, run)
    /text      filter the tree (``/`` alone clears the filter)
    e          edit cleat.yaml in $EDITOR, then reload
    q          quit

The selected command goes through the same run use case as the CLI,
so history and stats are recorded identically.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from cleat.adapters.base import Runner
from cleat.core.config.loader import project_id
from cleat.core.errors import CleatError
from cleat.core.persistence.history import HistoryStore
from cleat.core.persistence.stats import StatsStore
from cleat.core.session import Session
from cleat.core.use_cases.run import open_session, plan_command, run_command
from cleat.ui.browser.tree import CommandItem, build_command_tree, filter_tree, flatten

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"
HISTORY_SHOWN = 5


def editor_command() -> str:
    return os.environ.get("EDITOR") or DEFAULT_EDITOR


def render(rows: list[tuple[int, CommandItem]], query: str) -> list[CommandItem]:
    """Print the numbered tree; returns the selectable leaves in number order."""
    leaves: list[CommandItem] = []
    click.echo()
    if query:
        click.secho(f"   filter: {query}", fg="yellow")
    for depth, item in rows:
        indent = "   " + "  " * depth
        if item.is_group:
            click.secho(f"{indent}▸ {item.label}", fg="cyan", bold=True)
            continue
        leaves.append(item)
        click.secho(f"{indent}{len(leaves):>3} ", fg="green", nl=False)
        click.echo(item.label)
    if not leaves:
        click.secho("   No matching commands", fg="yellow")
    return leaves


def _render_history(session: Session) -> None:
    entries = HistoryStore(project_id(session.root)).load()[:HISTORY_SHOWN]
    if not entries:
        return
    click.echo()
    click.secho("   history", fg="white", bold=True)
    for entry in entries:
        mark, color = ("✓", "green") if entry.success else ("✗", "red")
        click.secho(f"     {mark} ", fg=color, nl=False)
        click.echo(entry.command)


def _preview(session: Session, command: str) -> bool:
    """Show the planned tasks; False when the command cannot be planned."""
    result = plan_command(command, session=session)
    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        return False

    click.echo()
    click.secho(f"📋 {command}", fg="cyan", bold=True)
    if not result.planned:
        click.secho("   Nothing to do for this project", fg="yellow")
    for planned in result.planned:
        click.secho(f"   • {planned.task.name}", fg="green", nl=False)
        click.echo(f"  {planned.task.description}")
        for inv in planned.invocations:
            click.echo(f"       $ {' '.join(inv.argv)}")
    return True


def _run(session: Session, command: str) -> tuple[int, bool]:
    """Run ``command`` until the user stops rerunning it.

    Returns the last exit code and whether the user asked to quit.
    """
    while True:
        # answers are collected fresh on every run
        session.project.inputs.clear()
        result = run_command(command, session=session)
        if result.error:
            click.secho(f"❌ {result.error}", fg="red", err=True)
        else:
            click.secho(f"✅ {command}", fg="green")
        code = 0 if result.ok else 1

        choice = click.prompt(
            "[q] quit, [r] rerun, any other key to go back",
            default="", show_default=False,
        ).strip().lower()
        if choice != "r":
            return code, choice == "q"


def _edit_config(session: Session, config_path: Path | None, runner: Runner | None) -> Session:
    path = Path(session.project.source_path) if session.project.source_path else None
    if path is None:
        click.secho("❌ No configuration file to edit", fg="red", err=True)
        return session
    click.edit(filename=str(path), editor=editor_command())
    try:
        return open_session(config_path or path, runner)
    except CleatError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        return session


def run_browser(config_path: Path | None = None, runner: Runner | None = None) -> int:
    """Interactive loop; returns the process exit code."""
    try:
        session = open_session(config_path, runner)
    except CleatError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        return 1

    query = ""
    code = 0
    while True:
        top = [command for command, _ in StatsStore(project_id(session.root)).top_commands()]
        tree = filter_tree(build_command_tree(session.project, top), query)
        leaves = render(flatten(tree), query)
        _render_history(session)

        choice = click.prompt(
            "\nSelect [number, /filter, e, q]", default="", show_default=False,
        ).strip()

        if choice == "q":
            return code
        if choice == "e":
            session = _edit_config(session, config_path, runner)
            continue
        if choice.startswith("/"):
            query = choice[1:].strip()
            continue
        if not choice:
            continue
        if not choice.isdigit() or not 1 <= int(choice) <= len(leaves):
            click.secho(f"   Unknown choice: {choice}", fg="yellow")
            continue

        command = leaves[int(choice) - 1].command
        logger.debug("Browser selected %r", command)
        if not _preview(session, command):
            continue
        if not click.confirm("Run it?", default=True):
            continue
        code, quit_ = _run(session, command)
        if quit_:
            return code
