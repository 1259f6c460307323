"""
Docker tasks — compose lifecycle for the whole project or one service.

Project-wide commands run from the project root with ``--profile *`` so
every profile is included; per-service commands run in the service
directory without the profile flag.
"""

from __future__ import annotations

from cleat.core.engine.provider import Provider, find_service, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import Invocation, Task
from cleat.core.models.service import Service
from cleat.core.session import Session
from cleat.core.tasks.common import DOCKER, QUIET_LOGS, scoped_name

ALL_PROFILES = ["--profile", "*"]

ACTIONS = ("build", "up", "down", "rebuild", "remove-orphans")

DESCRIPTIONS = {
    "build": "Build Docker containers",
    "up": "Start Docker containers",
    "down": "Stop Docker containers and remove orphans",
    "rebuild": "Remove images and volumes, then rebuild without cache",
    "remove-orphans": "Remove orphaned containers",
}


def compose_argv(action: str, profiles: list[str]) -> list[list[str]]:
    """Command lines for a compose lifecycle action."""
    if action == "build":
        return [[DOCKER, *QUIET_LOGS, "compose", *profiles, "build"]]
    if action == "up":
        return [[DOCKER, *QUIET_LOGS, "compose", *profiles, "up", "--remove-orphans"]]
    if action in ("down", "remove-orphans"):
        return [[DOCKER, "compose", *profiles, "down", "--remove-orphans"]]
    if action == "rebuild":
        return [
            [DOCKER, "compose", *profiles, "down", "--remove-orphans", "--rmi", "all", "--volumes"],
            [DOCKER, "compose", *profiles, "build", "--no-cache"],
        ]
    raise ValueError(f"unknown docker action: {action}")


def docker_task(action: str, service: Service | None = None) -> Task:
    """A compose task for the project (``service=None``) or one service."""
    if service is None:
        def materialize(s: Session) -> list[Invocation]:
            return [Invocation(argv, s.root) for argv in compose_argv(action, ALL_PROFILES)]

        def guard(s: Session) -> bool:
            return s.project.is_docker_effective() or any(
                s.project.is_docker_effective(svc) for svc in s.project.services
            )

        description = DESCRIPTIONS[action]
    else:
        def materialize(s: Session) -> list[Invocation]:
            cwd = s.project.service_path(service)
            return [Invocation(argv, cwd) for argv in compose_argv(action, [])]

        def guard(s: Session) -> bool:
            return s.project.is_docker_effective(service)

        description = f"{DESCRIPTIONS[action]} ({service.name})"

    return Task(
        name=scoped_name("docker", action, service),
        description=description,
        materialize=materialize,
        guard=guard,
    )


def docker_strategy(action: str, service: Service | None = None) -> Strategy:
    name = f"docker {action}" + (f":{service.name}" if service is not None else "")
    return Strategy(name, [docker_task(action, service)])


class DockerProvider(Provider):
    """``docker <action>[:<service>]``."""

    @property
    def name(self) -> str:
        return "docker"

    def can_handle(self, command: str) -> bool:
        return command.startswith("docker ")

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len("docker "):].strip(), ACTIONS)
        if parsed is None:
            return None
        action, target = parsed
        service = find_service(session.project, target, command) if target else None
        return docker_strategy(action, service)
