"""
Django detector — ``manage.py`` marks a Python/Django service.

Also fills the defaults every Python module needs: the compose service
that runs Django, and the package manager found on disk.
"""

from __future__ import annotations

from pathlib import Path

from cleat.core.detection.base import attach_modules, ensure_root_service, search_dir
from cleat.core.models.module import ModuleConfig, PythonModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service

MARKERS = ("manage.py", "backend/manage.py")

# (lock file, package manager), checked in order
PACKAGE_MANAGER_PROBES = (
    ("uv.lock", "uv"),
    ("requirements.txt", "pip"),
    ("poetry.lock", "poetry"),
)
DEFAULT_PACKAGE_MANAGER = "uv"

# Compose service assumed for a root-level project
DEFAULT_DJANGO_SERVICE = "backend"


def detect_package_manager(service_dir: Path, base_dir: Path) -> str:
    for directory in (service_dir, base_dir):
        for lock_file, manager in PACKAGE_MANAGER_PROBES:
            if (directory / lock_file).is_file():
                return manager
    return DEFAULT_PACKAGE_MANAGER


def detect(base_dir: Path, project: Project, services: list[Service] | None = None) -> None:
    if services is None:
        ensure_root_service(base_dir, project, MARKERS)
    attach_modules(
        base_dir,
        project,
        "python",
        MARKERS,
        lambda _directory: ModuleConfig(python=PythonModule(is_django_app=True)),
        services,
    )

    for svc in project.services if services is None else services:
        python = svc.python
        if python is None:
            continue
        if not python.django_service_name:
            python.django_service_name = (
                DEFAULT_DJANGO_SERVICE if svc.is_default else svc.name
            )
        if not python.package_manager:
            python.package_manager = detect_package_manager(
                search_dir(base_dir, svc), base_dir
            )
