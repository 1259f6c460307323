"""
IaC detector — finds the Terraform root and its environment folders.

``.iac/*.tf`` is a single-environment layout; ``.iac/<env>/**/*.tf`` is
one folder per environment, and the folder names become environments.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cleat.core.models.project import DEFAULT_IAC_DIR, IacConfig, Project

logger = logging.getLogger(__name__)

# Not worth descending into when looking for a nested .iac
SKIPPED_DIRS = frozenset({
    ".git", "node_modules", ".venv", "venv", "vendor", "dist", "build",
    "__pycache__", ".envs", "tmp",
})


def locate_iac_dir(base_dir: Path, configured: str) -> Path | None:
    """The IaC root: configured dir, ``.iac``, or ``<child>/.iac`` one level down."""
    direct = base_dir / (configured or DEFAULT_IAC_DIR)
    if direct.is_dir():
        return direct
    if configured:
        return None

    try:
        children = sorted(p for p in base_dir.iterdir() if p.is_dir())
    except OSError:
        return None
    for child in children:
        if child.name in SKIPPED_DIRS:
            continue
        nested = child / DEFAULT_IAC_DIR
        if nested.is_dir():
            return nested
    return None


def _has_tf(directory: Path) -> bool:
    return any(p.is_file() for p in directory.rglob("*.tf"))


def detect(base_dir: Path, project: Project) -> None:
    configured = project.iac.directory if project.iac else ""
    iac_dir = locate_iac_dir(base_dir, configured)

    if iac_dir is not None:
        if project.iac is None:
            project.iac = IacConfig()
        if not project.iac.directory:
            project.iac.directory = iac_dir.relative_to(base_dir).as_posix()

        env_dirs = sorted(
            p.name for p in iac_dir.iterdir()
            if p.is_dir() and not p.name.startswith(".") and _has_tf(p)
        )
        if env_dirs:
            project.iac.uses_env_folders = True
            if not project.iac.env_names:
                project.iac.env_names = env_dirs
            logger.debug("Terraform env folders in %s: %s", iac_dir, env_dirs)
        else:
            project.iac.uses_env_folders = False

    if project.iac is not None:
        for env in project.iac.env_names:
            if env not in project.environment_names:
                project.environment_names.append(env)
