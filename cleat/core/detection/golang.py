"""Go detector — ``go.mod`` marks a Go service."""

from __future__ import annotations

from pathlib import Path

from cleat.core.detection.base import attach_modules, ensure_root_service
from cleat.core.models.module import GoModule, ModuleConfig
from cleat.core.models.project import Project
from cleat.core.models.service import Service

MARKERS = ("go.mod",)
DEFAULT_GO_SERVICE = "backend-go"


def detect(base_dir: Path, project: Project, services: list[Service] | None = None) -> None:
    if services is None:
        ensure_root_service(base_dir, project, MARKERS)
    attach_modules(
        base_dir, project, "go", MARKERS, lambda _directory: ModuleConfig(go=GoModule()),
        services,
    )

    for svc in project.services if services is None else services:
        go = svc.go
        if go is not None and go.is_enabled() and not go.container_service_name:
            go.container_service_name = DEFAULT_GO_SERVICE if svc.is_default else svc.name
