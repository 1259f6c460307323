"""
Go tasks — the everyday ``go`` toolchain commands per service.

``coverage`` and ``install`` are composite: coverage runs the tests with
a profile and prints the per-function report; install builds a binary
and copies it into a directory the user picks.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from cleat.core.engine.provider import Provider, find_service, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import InputRequirement, Invocation, Task
from cleat.core.models.module import GoModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.session import Session
from cleat.core.tasks.common import compose_run, scoped_name

# action -> list of `go` argument vectors
ACTIONS: dict[str, list[list[str]]] = {
    "build": [["build", "./..."]],
    "test": [["test", "./..."]],
    "fmt": [["fmt", "./..."]],
    "vet": [["vet", "./..."]],
    "mod tidy": [["mod", "tidy"]],
    "generate": [["generate", "./..."]],
    "run": [["run", "."]],
    "coverage": [
        ["test", "-cover", "-coverprofile=coverage.out", "./..."],
        ["tool", "cover", "-func=coverage.out"],
    ],
}

INSTALL = "install"
INSTALL_PATH_KEY = "install_path"


def default_install_path() -> str:
    if sys.platform == "darwin":
        return "/usr/local/bin"
    return str(Path.home() / ".local" / "bin")


def _has_go(service: Service) -> bool:
    return isinstance(service.enabled_module("go"), GoModule)


def binary_name(project: Project, service: Service) -> str:
    if service.is_default:
        return project.service_path(service).resolve().name or "app"
    return service.name


def go_argv(project: Project, service: Service, go_args: list[str]) -> tuple[list[str], Path]:
    module = service.go
    if module is not None and module.container_service_name and project.uses_container(service):
        return [*compose_run(module.container_service_name), "go", *go_args], project.root
    return ["go", *go_args], project.service_path(service)


def go_task(action: str, service: Service) -> Task:
    def materialize(s: Session) -> list[Invocation]:
        result = []
        for go_args in ACTIONS[action]:
            argv, cwd = go_argv(s.project, service, go_args)
            result.append(Invocation(argv, cwd, s.project.service_path(service)))
        return result

    return Task(
        name=scoped_name("go", action.replace(" ", "-"), service),
        description=f"Run 'go {action}' ({service.name})",
        materialize=materialize,
        guard=lambda _s: _has_go(service),
    )


def go_install_task(service: Service) -> Task:
    def materialize(s: Session) -> list[Invocation]:
        cwd = s.project.service_path(service)
        binary = binary_name(s.project, service)
        target = os.path.expanduser(s.inputs.get(INSTALL_PATH_KEY) or default_install_path())
        return [
            Invocation(["go", "build", "-o", binary, "."], cwd),
            Invocation(["mkdir", "-p", target], cwd),
            Invocation(["cp", binary, f"{target}/{binary}"], cwd),
        ]

    def needs(_s: Session) -> list[InputRequirement]:
        return [InputRequirement(INSTALL_PATH_KEY, "Installation path", default_install_path())]

    return Task(
        name=scoped_name("go", INSTALL, service),
        description=f"Build and install the Go binary ({service.name})",
        materialize=materialize,
        guard=lambda _s: _has_go(service),
        needs=needs,
    )


def go_strategy(action: str, project: Project, service: Service | None = None) -> Strategy:
    targets = [service] if service is not None else [
        svc for svc in project.services if _has_go(svc)
    ]
    make = go_install_task if action == INSTALL else (lambda svc: go_task(action, svc))
    name = f"go {action}" + (f":{service.name}" if service is not None else "")
    return Strategy(name, [make(svc) for svc in targets])


class GoProvider(Provider):
    """``go <action>[:<service>]``."""

    @property
    def name(self) -> str:
        return "go"

    def can_handle(self, command: str) -> bool:
        return command.startswith("go ")

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len("go "):].strip(), (*ACTIONS, INSTALL))
        if parsed is None:
            return None
        action, target = parsed
        service = find_service(session.project, target, command) if target else None
        return go_strategy(action, session.project, service)
