"""
Shared plumbing for the framework detectors (Django, Ruby, Npm, Go).

Every framework detector has the same shape:

    1. If no service covers the project root and the root holds the
       framework's marker file, add a ``default`` service at ``.``.
    2. Group services by directory; for each directory that holds the
       marker, let the stack heuristics choose who gets the module.
    3. Fill in module defaults.

Only steps 1 and 2 live here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from cleat.core.detection.heuristics import select_services
from cleat.core.models.module import ModuleConfig
from cleat.core.models.project import Project
from cleat.core.models.service import DEFAULT_SERVICE, Service

logger = logging.getLogger(__name__)


def search_dir(base_dir: Path, service: Service) -> Path:
    return base_dir if service.is_root else base_dir / service.dir


def root_covered(project: Project) -> bool:
    return any(svc.is_root for svc in project.services)


def ensure_root_service(base_dir: Path, project: Project, markers: tuple[str, ...]) -> None:
    """Add a ``default`` root service when the root holds a marker and nobody covers it."""
    if root_covered(project) or not has_marker(base_dir, markers):
        return
    if project.service_by_name(DEFAULT_SERVICE) is not None:
        return
    logger.debug("Found %s at project root; adding '%s' service", markers, DEFAULT_SERVICE)
    project.services.append(Service(name=DEFAULT_SERVICE, dir="."))


def services_by_dir(base_dir: Path, services: list[Service]) -> dict[Path, list[Service]]:
    """Group services by their resolved directory, in declaration order."""
    groups: dict[Path, list[Service]] = {}
    for svc in services:
        groups.setdefault(search_dir(base_dir, svc), []).append(svc)
    return groups


def has_marker(directory: Path, markers: tuple[str, ...]) -> bool:
    return any((directory / marker).is_file() for marker in markers)


def attach_modules(
    base_dir: Path,
    project: Project,
    tag: str,
    markers: tuple[str, ...],
    make_module: Callable[[Path], ModuleConfig],
    services: list[Service] | None = None,
) -> None:
    """Attach a ``tag`` module to the services chosen in each marker directory.

    For services at the root, ``<root>/<service name>/<marker>`` also counts,
    so a root-level ``frontend`` service finds ``frontend/package.json``.
    ``services`` limits the pass to a subset of the project (default: all).
    """
    scope = project.services if services is None else services
    for directory, candidates in services_by_dir(base_dir, scope).items():
        positive = has_marker(directory, markers)
        if not positive and directory == base_dir:
            positive = any(
                svc.name and has_marker(base_dir / svc.name, markers)
                for svc in candidates
                if svc.is_root
            )
        if not positive:
            continue

        for svc in select_services(tag, candidates, directory):
            svc.modules.append(make_module(directory))
