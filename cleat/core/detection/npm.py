"""Npm detector — ``package.json`` marks a Node service; its scripts are recorded."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cleat.core.detection.base import attach_modules, ensure_root_service, search_dir
from cleat.core.errors import ConfigParseError
from cleat.core.models.module import ModuleConfig, NpmModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service

logger = logging.getLogger(__name__)

MARKERS = ("package.json",)
DEFAULT_NODE_SERVICE = "backend-node"


def read_scripts(package_json: Path) -> list[str]:
    """Sorted script names from a package.json."""
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigParseError(package_json, f"cannot read package.json: {e}") from e
    scripts = data.get("scripts") if isinstance(data, dict) else None
    if not isinstance(scripts, dict):
        return []
    return sorted(scripts)


def package_dir(base_dir: Path, service: Service) -> Path:
    """Directory holding the service's package.json.

    A root service named after a subdirectory that has its own
    package.json resolves to that subdirectory.
    """
    directory = search_dir(base_dir, service)
    if service.is_root and not (directory / "package.json").is_file():
        nested = base_dir / service.name
        if service.name and (nested / "package.json").is_file():
            return nested
    return directory


def detect(base_dir: Path, project: Project, services: list[Service] | None = None) -> None:
    if services is None:
        ensure_root_service(base_dir, project, MARKERS)
    attach_modules(
        base_dir, project, "npm", MARKERS, lambda _directory: ModuleConfig(npm=NpmModule()),
        services,
    )

    for svc in project.services if services is None else services:
        npm = svc.npm
        if npm is None or not npm.is_enabled():
            continue
        if not npm.declared_scripts:
            package_json = package_dir(base_dir, svc) / "package.json"
            if package_json.is_file():
                npm.declared_scripts = read_scripts(package_json)
                logger.debug("npm scripts for '%s': %s", svc.name, npm.declared_scripts)
        if not npm.container_service_name:
            npm.container_service_name = DEFAULT_NODE_SERVICE if svc.is_default else svc.name
