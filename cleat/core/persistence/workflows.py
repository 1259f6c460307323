"""
Workflow files — workflows kept outside cleat.yaml.

Two optional locations, merged after the declared ones:

    <project root>/cleat.workflows.yaml   shared with the team
    ~/.cleat/<project_id>.workflows.yaml  personal

A later workflow with the same id replaces an earlier one.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from cleat.core.context import state_dir
from cleat.core.errors import ConfigParseError
from cleat.core.models.project import Project, Workflow
from cleat.core.persistence.files import read_yaml, write_yaml

logger = logging.getLogger(__name__)

PROJECT_WORKFLOW_FILES = ("cleat.workflows.yaml", "cleat.workflows.yml")


def project_workflows_path(root: Path) -> Path:
    """Existing project workflow file, or where a new one would be written."""
    for name in PROJECT_WORKFLOW_FILES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return root / PROJECT_WORKFLOW_FILES[0]


def user_workflows_path(project_id: str, base_dir: Path | None = None) -> Path:
    return (base_dir or state_dir()) / f"{project_id}.workflows.yaml"


def load_workflows(path: Path) -> list[Workflow]:
    """Workflows stored in ``path`` (empty when the file is missing).

    Raises:
        ConfigParseError: The file is not valid YAML or a workflow is malformed.
    """
    try:
        data = read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigParseError(path, f"cannot read workflows: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("workflows") or []
    if not isinstance(data, list):
        raise ConfigParseError(path, "expected a list of workflows")

    try:
        return [Workflow.model_validate(item) for item in data]
    except ValidationError as e:
        raise ConfigParseError(path, f"invalid workflow: {e.errors()[0].get('msg', e)}") from e


def _dump(workflows: list[Workflow]) -> list[dict]:
    return [w.model_dump(mode="json", by_alias=True) for w in workflows]


def save_workflow(workflow: Workflow, path: Path) -> None:
    """Add ``workflow`` to the file at ``path``, replacing one with the same id."""
    existing = load_workflows(path)
    updated = [w for w in existing if w.id != workflow.id]
    index = next((i for i, w in enumerate(existing) if w.id == workflow.id), len(updated))
    updated.insert(index, workflow)
    write_yaml(path, _dump(updated))
    logger.info("Saved workflow '%s' to %s", workflow.id, path)


def delete_workflow(workflow_id: str, path: Path) -> bool:
    """Remove a workflow by id; returns False when it was not there."""
    existing = load_workflows(path)
    remaining = [w for w in existing if w.id != workflow_id]
    if len(remaining) == len(existing):
        return False
    write_yaml(path, _dump(remaining))
    logger.info("Deleted workflow '%s' from %s", workflow_id, path)
    return True


def merge_workflows(project: Project, project_id: str, base_dir: Path | None = None) -> Project:
    """Append file-based workflows to ``project.workflows`` (in place)."""
    sources = [
        project_workflows_path(project.root),
        user_workflows_path(project_id, base_dir),
    ]
    for path in sources:
        for workflow in load_workflows(path):
            index = next(
                (i for i, w in enumerate(project.workflows) if w.id == workflow.id), None
            )
            if index is None:
                project.workflows.append(workflow)
            else:
                project.workflows[index] = workflow
    return project
