"""
Npm tasks — ``npm install`` and ``npm run <script>`` per service.

Local commands run in the directory holding the service's package.json;
in a container project they run in the service's compose container.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cleat.core.detection.npm import package_dir
from cleat.core.engine.provider import Provider, find_service
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import Invocation, Task
from cleat.core.models.module import NpmModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.session import Session
from cleat.core.tasks.common import compose_run, scoped_name

logger = logging.getLogger(__name__)


def npm_argv(project: Project, service: Service, npm_args: list[str]) -> tuple[list[str], Path]:
    module = service.npm
    if module is not None and module.container_service_name and project.uses_container(service):
        return [*compose_run(module.container_service_name), "npm", *npm_args], project.root
    return ["npm", *npm_args], package_dir(project.root, service)


def _has_npm(service: Service) -> bool:
    return isinstance(service.enabled_module("npm"), NpmModule)


def npm_install_task(service: Service) -> Task:
    def materialize(s: Session) -> list[Invocation]:
        argv, cwd = npm_argv(s.project, service, ["install"])
        return [Invocation(argv, cwd, s.project.service_path(service))]

    return Task(
        name=scoped_name("npm", "install", service),
        description=f"Install npm dependencies ({service.name})",
        materialize=materialize,
        guard=lambda _s: _has_npm(service),
    )


def npm_run_task(service: Service, script: str) -> Task:
    def materialize(s: Session) -> list[Invocation]:
        argv, cwd = npm_argv(s.project, service, ["run", script])
        return [Invocation(argv, cwd, s.project.service_path(service))]

    deps = ["docker:build"] if script == "build" else []
    return Task(
        name=scoped_name("npm", f"run:{script}", service),
        description=f"Run npm script '{script}' ({service.name})",
        materialize=materialize,
        dependencies=deps,
        guard=lambda _s: _has_npm(service),
    )


def resolve_script(project: Project, target: str) -> tuple[Service, str] | None:
    """Find the service that should run ``target`` (``script`` or ``svc:script``).

    Resolution order: a named service declaring the script, any service
    declaring the whole text as a script, the first npm service.
    """
    npm_services = [svc for svc in project.services if _has_npm(svc)]
    if not npm_services:
        return None

    named: Service | None = None
    rest = target
    if ":" in target:
        head, rest = target.split(":", 1)
        named = project.service_by_name(head)
        if named is not None and not _has_npm(named):
            named = None
        if named is not None and rest in named.npm.declared_scripts:
            return named, rest

    for svc in npm_services:
        if target in svc.npm.declared_scripts:
            return svc, target

    # scripts were not listed for the named service
    if named is not None:
        return named, rest
    return npm_services[0], target


class NpmProvider(Provider):
    """``npm install[:<service>]`` and ``npm run [<service>:]<script>``."""

    @property
    def name(self) -> str:
        return "npm"

    def can_handle(self, command: str) -> bool:
        return command == "npm install" or command.startswith(("npm install:", "npm run "))

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        project = session.project

        if command.startswith("npm install"):
            target = command[len("npm install:"):] if command.startswith("npm install:") else ""
            if target:
                services = [find_service(project, target, command)]
            else:
                services = [svc for svc in project.services if _has_npm(svc)]
            if not services:
                return None
            return Strategy(command, [npm_install_task(svc) for svc in services])

        target = command[len("npm run "):].strip()
        if not target:
            return None
        resolved = resolve_script(project, target)
        if resolved is None:
            return None
        service, script = resolved
        logger.debug("npm run %s resolved to service '%s'", script, service.name)
        return Strategy(command, [npm_run_task(service, script)])
