"""
Configuration loader — reads cleat.yaml into the canonical Project.

Reads YAML, upgrades legacy layouts, validates against the Pydantic
models, runs the auto-detector chain, and checks the invariants every
consumer relies on (unique service names, one module per tag, a Django
service name on every Python module).
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cleat.core.errors import ConfigNotFound, ConfigParseError, UnsupportedVersion
from cleat.core.models.module import MODULE_TAGS
from cleat.core.models.project import LATEST_VERSION, SUPPORTED_VERSIONS, Project
from cleat.core.models.service import DEFAULT_SERVICE

logger = logging.getLogger(__name__)

# Searched in order in each directory while walking up
CONFIG_FILENAMES = ("cleat.yaml", "cleat.yml")


def find_project_file(start_dir: Path | None = None) -> Path | None:
    """Search for cleat.yaml / cleat.yml starting from ``start_dir``, walking up.

    Returns:
        Path to the declaration, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def find_project_root(start_dir: Path | None = None) -> Path:
    """Directory holding the declaration, else the enclosing git checkout, else cwd."""
    start = (start_dir or Path.cwd()).resolve()
    found = find_project_file(start)
    if found is not None:
        return found.parent

    current = start
    for _ in range(20):
        if (current / ".git").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return start


def project_id(root: Path) -> str:
    """Stable identifier for a project root: ``<dirname>-<16 hex chars>``."""
    absolute = root.resolve()
    name = absolute.name
    if name in ("", "/", "."):
        name = "root"
    digest = hashlib.sha256(str(absolute).encode("utf-8")).hexdigest()
    return f"{name}-{digest[:16]}"


def load_project(path: Path | None = None, *, detect: bool = True) -> Project:
    """Load, upgrade, validate and auto-detect the project.

    Args:
        path: Explicit path to the declaration. If None, searches upward;
            when nothing is found the project is purely auto-detected from cwd.
        detect: Run the detector chain (disabled by a few tests).

    Raises:
        ConfigNotFound: An explicit ``path`` does not exist.
        ConfigParseError: The YAML or its shape is invalid.
        UnsupportedVersion: ``version`` is outside the supported set.
    """
    if path is None:
        path = find_project_file()
        if path is None:
            path = Path.cwd() / CONFIG_FILENAMES[0]
            logger.info("No cleat.yaml found; auto-detecting from %s", path.parent)
            data: dict[str, Any] = {}
        else:
            data = _read(path)
    elif not path.is_file():
        raise ConfigNotFound(path)
    else:
        data = _read(path)

    path = path.resolve()
    data = upgrade(data, path)

    if "envs" in data and data["envs"] is not None and len(data["envs"]) == 0:
        raise ConfigParseError(path, "envs must have at least one item if provided")

    try:
        project = Project.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(path, _summarize(e)) from e

    project.source_path = str(path)

    if detect:
        from cleat.core.detection import detect_all

        detect_all(path.parent, project)

    check_invariants(project, path)
    logger.info(
        "Loaded project from %s with %d services", path, len(project.services)
    )
    return project


def _read(path: Path) -> dict[str, Any]:
    logger.debug("Loading project config from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(path, f"cannot read file: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(path, f"expected a YAML mapping, got {type(data).__name__}")
    return data


def upgrade(data: dict[str, Any], path: Path | str = "<memory>") -> dict[str, Any]:
    """Normalize ``version`` and lift legacy root-level module blocks.

    Older declarations put ``python:``/``npm:``/``go:``/``ruby:`` at the
    top level. Those become modules of a synthetic ``default`` service
    rooted at ``.``.
    """
    data = dict(data)
    version = data.get("version") or LATEST_VERSION
    if not isinstance(version, int) or version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersion(version, SUPPORTED_VERSIONS)
    data["version"] = version

    legacy = [{tag: data.pop(tag) or {}} for tag in MODULE_TAGS if tag in data]
    if legacy:
        services = list(data.get("services") or [])
        index = next(
            (i for i, s in enumerate(services)
             if isinstance(s, dict) and s.get("name") == DEFAULT_SERVICE),
            None,
        )
        if index is None:
            services.insert(0, {"name": DEFAULT_SERVICE, "dir": ".", "modules": legacy})
        else:
            merged = dict(services[index])
            merged["modules"] = list(merged.get("modules") or []) + legacy
            services[index] = merged
        data["services"] = services
        logger.debug("Lifted legacy modules %s into '%s' service (%s)",
                     [next(iter(m)) for m in legacy], DEFAULT_SERVICE, path)
    return data


def check_invariants(project: Project, path: Path | str) -> None:
    """Validate post-load invariants; raises ConfigParseError."""
    seen: set[str] = set()
    for svc in project.services:
        if not svc.name:
            raise ConfigParseError(path, "every service needs a name")
        if svc.name in seen:
            raise ConfigParseError(path, f"duplicate service name '{svc.name}'")
        seen.add(svc.name)

        tags: list[str] = []
        for mod in svc.modules:
            tags.extend(mod.tags)
        for tag in MODULE_TAGS:
            if tags.count(tag) > 1:
                raise ConfigParseError(
                    path, f"service '{svc.name}' declares more than one {tag} module"
                )

        python = svc.python
        if python is not None and not python.django_service_name:
            raise ConfigParseError(path, f"service '{svc.name}' has no django_service")

    if project.iac is not None:
        missing = [e for e in project.iac.env_names if e not in project.environment_names]
        if missing:
            raise ConfigParseError(path, f"terraform envs not declared in envs: {missing}")


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", ""))
    return "; ".join(parts)
