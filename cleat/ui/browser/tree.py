"""
Command tree — everything the browser can run, grouped for display.

Top-level order:

    recent → build/run → workflows → docker → cloud → terraform → services

A project whose only service is the synthetic ``default`` one shows that
service's module groups at the top level; their commands still name
the service (``django migrate:default``) so dispatch is unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.tasks import django as django_tasks
from cleat.core.tasks import docker as docker_tasks
from cleat.core.tasks import golang as go_tasks
from cleat.core.tasks import ruby as ruby_tasks
from cleat.core.tasks import terraform as terraform_tasks
from cleat.core.tasks.cloud import REGISTRY as CLOUD_COMMANDS
from cleat.core.tasks.lifecycle import is_containerful

RECENT_LIMIT = 3


@dataclass
class CommandItem:
    """A tree node; leaves carry the command they dispatch."""

    label: str
    command: str = ""
    children: list[CommandItem] = field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return not self.command

    def leaves(self) -> list[CommandItem]:
        if not self.is_group:
            return [self]
        result: list[CommandItem] = []
        for child in self.children:
            result.extend(child.leaves())
        return result


def _group(label: str, children: list[CommandItem]) -> list[CommandItem]:
    return [CommandItem(label, children=children)] if children else []


# ── Per-module groups ───────────────────────────────────────────


def _django_items(svc: Service) -> list[CommandItem]:
    if not django_tasks.is_django_service(svc):
        return []
    return _group("django", [
        CommandItem(action, f"django {action}:{svc.name}")
        for action in django_tasks.ACTIONS
    ])


def _npm_items(svc: Service) -> list[CommandItem]:
    if svc.enabled_module("npm") is None:
        return []
    items = [CommandItem("install", f"npm install:{svc.name}")]
    items += [
        CommandItem(f"run {script}", f"npm run {svc.name}:{script}")
        for script in svc.npm.declared_scripts
    ]
    return _group("npm", items)


def _go_items(svc: Service) -> list[CommandItem]:
    if svc.enabled_module("go") is None:
        return []
    actions = [*go_tasks.ACTIONS, go_tasks.INSTALL]
    return _group("go", [CommandItem(action, f"go {action}:{svc.name}") for action in actions])


def _ruby_items(svc: Service) -> list[CommandItem]:
    if svc.enabled_module("ruby") is None:
        return []
    actions = list(ruby_tasks.ACTIONS)
    if not ruby_tasks.is_rails_service(svc):
        actions = [ruby_tasks.INSTALL]
    return _group("ruby", [CommandItem(action, f"ruby {action}:{svc.name}") for action in actions])


def _docker_service_items(project: Project, svc: Service) -> list[CommandItem]:
    if svc.is_root or not project.is_docker_effective(svc):
        return []
    return _group("docker", [
        CommandItem(action, f"docker {action}:{svc.name}")
        for action in ("build", "up")
    ])


def service_items(project: Project, svc: Service) -> list[CommandItem]:
    """Module groups of one service."""
    return [
        *_docker_service_items(project, svc),
        *_django_items(svc),
        *_npm_items(svc),
        *_go_items(svc),
        *_ruby_items(svc),
    ]


# ── Project-wide groups ─────────────────────────────────────────


def _workflow_items(project: Project) -> list[CommandItem]:
    return _group("workflows", [
        CommandItem(wf.name, f"workflow:{wf.id}") for wf in project.workflows
    ])


def _docker_items(project: Project) -> list[CommandItem]:
    if not is_containerful(project):
        return []
    return _group("docker", [
        CommandItem(action, f"docker {action}") for action in docker_tasks.ACTIONS
    ])


def _cloud_items(project: Project) -> list[CommandItem]:
    if project.cloud is None or not project.cloud.project_id:
        return []
    items = [CommandItem(command.split(" ", 1)[1], command) for command in CLOUD_COMMANDS]
    items.append(CommandItem("app-engine deploy", "cloud app-engine deploy"))
    for svc in project.services:
        if svc.app_descriptor_path:
            items.append(CommandItem(
                f"app-engine deploy {svc.name}", f"cloud app-engine deploy:{svc.name}"
            ))
    items.append(CommandItem("app-engine promote", "cloud app-engine promote"))
    return _group("cloud", items)


def _terraform_items(project: Project) -> list[CommandItem]:
    iac = project.iac
    if iac is None:
        return []
    actions = list(terraform_tasks.ACTIONS)
    if not iac.uses_env_folders:
        return _group("terraform", [
            CommandItem(action, f"terraform {action}") for action in actions
        ])
    envs = [
        CommandItem(env, children=[
            CommandItem(action, f"terraform {action}:{env}") for action in actions
        ])
        for env in iac.env_names
    ]
    return _group("terraform", envs)


def build_command_tree(project: Project, top_commands: list[str] | None = None) -> list[CommandItem]:
    """The browser tree for ``project``.

    Args:
        project: Loaded (and detected) project.
        top_commands: Most used commands, most used first; those present
            in the tree are listed under ``recent``.
    """
    items: list[CommandItem] = [CommandItem("build", "build"), CommandItem("run", "run")]
    items += _workflow_items(project)
    items += _docker_items(project)
    items += _cloud_items(project)
    items += _terraform_items(project)

    services = project.services
    if len(services) == 1 and services[0].name == "default":
        items += service_items(project, services[0])
    else:
        for svc in services:
            items += _group(svc.name, service_items(project, svc))

    known = {leaf.command for item in items for leaf in item.leaves()}
    recent = [
        CommandItem(command, command)
        for command in (top_commands or [])
        if command in known
    ][:RECENT_LIMIT]
    return _group("recent", recent) + items


# ── Navigation ──────────────────────────────────────────────────


def flatten(items: list[CommandItem], depth: int = 0) -> list[tuple[int, CommandItem]]:
    """Depth-first ``(depth, item)`` pairs for rendering."""
    rows: list[tuple[int, CommandItem]] = []
    for item in items:
        rows.append((depth, item))
        rows.extend(flatten(item.children, depth + 1))
    return rows


def matches(item: CommandItem, query: str) -> bool:
    """Whether every word of ``query`` appears, in order, in the label or command."""
    tokens = query.lower().split()
    if not tokens:
        return True
    return any(_in_order(tokens, text.lower()) for text in (item.label, item.command) if text)


def _in_order(tokens: list[str], text: str) -> bool:
    pos = 0
    for token in tokens:
        found = text.find(token, pos)
        if found < 0:
            return False
        pos = found + len(token)
    return True


def filter_tree(items: list[CommandItem], query: str) -> list[CommandItem]:
    """Leaves matching ``query`` with the groups leading to them."""
    if not query.strip():
        return items
    kept: list[CommandItem] = []
    for item in items:
        if item.is_group:
            children = filter_tree(item.children, query)
            if children:
                kept.append(CommandItem(item.label, children=children))
        elif matches(item, query):
            kept.append(item)
    return kept
