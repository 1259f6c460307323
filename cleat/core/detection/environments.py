"""Environments detector — ``.envs/<name>.env`` files declare environments."""

from __future__ import annotations

import logging
from pathlib import Path

from cleat.core.models.project import Project

logger = logging.getLogger(__name__)

ENVS_DIR = ".envs"


def detect(base_dir: Path, project: Project) -> None:
    if project.environment_names:
        return

    envs_dir = base_dir / ENVS_DIR
    if not envs_dir.is_dir():
        return

    names = sorted(p.stem for p in envs_dir.glob("*.env") if p.is_file())
    if names:
        logger.debug("Detected environments from %s: %s", envs_dir, names)
        project.environment_names = names
