"""
Cloud app descriptor detector — finds App Engine ``app.yaml`` files.

Only runs when ``google_cloud_platform`` is configured. A root
``app.yaml`` becomes the project descriptor; each immediate subdirectory
with an ``app.yaml`` is attached to its service or becomes one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cleat.core.models.project import Project
from cleat.core.models.service import Service

logger = logging.getLogger(__name__)

APP_DESCRIPTOR = "app.yaml"
IGNORED_DIRS = frozenset({".git", ".envs", ".iac", "terraform"})


def detect(base_dir: Path, project: Project) -> None:
    if project.cloud is None:
        return

    if (base_dir / APP_DESCRIPTOR).is_file() and not project.app_descriptor_path:
        project.app_descriptor_path = APP_DESCRIPTOR

    try:
        entries = sorted(p for p in base_dir.iterdir() if p.is_dir())
    except OSError:
        return

    for entry in entries:
        if entry.name in IGNORED_DIRS or not (entry / APP_DESCRIPTOR).is_file():
            continue
        descriptor = f"{entry.name}/{APP_DESCRIPTOR}"

        svc = next(
            (s for s in project.services if s.dir == entry.name or s.name == entry.name),
            None,
        )
        if svc is not None:
            if not svc.app_descriptor_path:
                svc.app_descriptor_path = descriptor
            continue

        logger.debug("App descriptor %s adds service '%s'", descriptor, entry.name)
        project.services.append(
            Service(name=entry.name, dir=entry.name, app_descriptor_path=descriptor)
        )
