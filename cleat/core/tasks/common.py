"""Helpers shared by the task families."""

from __future__ import annotations

from cleat.core.models.service import Service

DOCKER = "docker"
QUIET_LOGS = ["--log-level", "error"]


def scoped_name(namespace: str, action: str, service: Service | None = None) -> str:
    """``<namespace>:<action>[:<service>]``; the default service adds no suffix."""
    name = f"{namespace}:{action}"
    if service is not None:
        name += service.task_suffix()
    return name


def compose_run(container_service: str) -> list[str]:
    """Prefix that runs a one-off command inside a compose service."""
    return [DOCKER, *QUIET_LOGS, "compose", "run", "--rm", container_service]
