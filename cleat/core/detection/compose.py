"""
Container orchestration detector — reads docker-compose.yaml / .yml.

The compose file switches the project to container mode and is the
authority on where each service lives (its build context). Services
that only exist in the compose file are appended with ``docker: true``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from cleat.core.errors import ConfigParseError
from cleat.core.models.project import Project
from cleat.core.models.service import Service

logger = logging.getLogger(__name__)

COMPOSE_FILES = ("docker-compose.yaml", "docker-compose.yml")


def find_compose_file(base_dir: Path) -> Path | None:
    for name in COMPOSE_FILES:
        candidate = base_dir / name
        if candidate.is_file():
            return candidate
    return None


def _build_info(build: Any) -> tuple[str, str]:
    """Return (context, dockerfile) from a compose ``build`` entry."""
    if isinstance(build, str):
        return build, ""
    if isinstance(build, dict):
        context = build.get("context")
        dockerfile = build.get("dockerfile")
        return (
            context if isinstance(context, str) else "",
            dockerfile if isinstance(dockerfile, str) else "",
        )
    return "", ""


def _command_text(command: Any) -> str:
    if isinstance(command, str):
        return command
    if isinstance(command, list):
        return " ".join(str(part) for part in command if isinstance(part, str))
    return ""


def _normalize_dir(context: str) -> str:
    if context.startswith("./"):
        context = context[2:]
    return context.rstrip("/") or "."


def detect(base_dir: Path, project: Project) -> None:
    compose_file = find_compose_file(base_dir)
    if compose_file is None:
        return

    project.docker_enabled = True

    try:
        data = yaml.safe_load(compose_file.read_text(encoding="utf-8")) or {}
    except OSError as e:
        logger.warning("Cannot read %s: %s", compose_file, e)
        return
    except yaml.YAMLError as e:
        raise ConfigParseError(compose_file, f"invalid YAML: {e}") from e

    entries = data.get("services") if isinstance(data, dict) else None
    if not isinstance(entries, dict):
        return

    for name, entry in entries.items():
        entry = entry if isinstance(entry, dict) else {}
        context, dockerfile = _build_info(entry.get("build"))
        image = entry.get("image") if isinstance(entry.get("image"), str) else ""
        command = _command_text(entry.get("command"))
        directory = _normalize_dir(context) if context else ""

        svc = project.service_by_name(str(name))
        if svc is None:
            logger.debug("Compose service '%s' added (dir=%r)", name, directory)
            project.services.append(
                Service(
                    name=str(name),
                    dir=directory,
                    docker_explicit=True,
                    dockerfile_hint=dockerfile,
                    image_hint=image,
                    command_hint=command,
                )
            )
            continue

        if svc.docker_explicit is None:
            svc.docker_explicit = True
        if not svc.dir and directory:
            svc.dir = directory
        if not svc.dockerfile_hint and dockerfile:
            svc.dockerfile_hint = dockerfile
        if not svc.image_hint and image:
            svc.image_hint = image
        if not svc.command_hint and command:
            svc.command_hint = command
