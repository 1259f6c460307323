"""
Workflow use cases — list, add and remove file-based workflows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from cleat.core.config.loader import load_project, project_id
from cleat.core.errors import CleatError
from cleat.core.models.project import Workflow
from cleat.core.persistence.workflows import (
    delete_workflow,
    merge_workflows,
    project_workflows_path,
    save_workflow,
    user_workflows_path,
)


@dataclass
class WorkflowResult:
    workflows: list[Workflow] = field(default_factory=list)
    path: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "workflows": [w.model_dump(mode="json", by_alias=True) for w in self.workflows],
        }
        if self.path is not None:
            result["path"] = str(self.path)
        if self.error:
            result["error"] = self.error
        return result


def _target(config_path: Path | None, user: bool) -> Path:
    project = load_project(config_path, detect=False)
    if user:
        return user_workflows_path(project_id(project.root))
    return project_workflows_path(project.root)


def list_workflows(config_path: Path | None = None) -> WorkflowResult:
    """Declared workflows followed by the project and user files."""
    try:
        project = load_project(config_path, detect=False)
        merge_workflows(project, project_id(project.root))
    except CleatError as e:
        return WorkflowResult(error=str(e))
    return WorkflowResult(workflows=list(project.workflows))


def add_workflow(
    name: str,
    commands: list[str],
    config_path: Path | None = None,
    user: bool = False,
) -> WorkflowResult:
    """Save a workflow to the project file (or the user file with ``user``)."""
    try:
        workflow = Workflow(name=name, ordered_commands=commands)
    except ValidationError as e:
        return WorkflowResult(error=e.errors()[0].get("msg", str(e)))
    try:
        path = _target(config_path, user)
        save_workflow(workflow, path)
    except CleatError as e:
        return WorkflowResult(error=str(e))
    return WorkflowResult(workflows=[workflow], path=path)


def remove_workflow(
    workflow_id: str,
    config_path: Path | None = None,
    user: bool = False,
) -> WorkflowResult:
    try:
        path = _target(config_path, user)
        removed = delete_workflow(workflow_id, path)
    except CleatError as e:
        return WorkflowResult(error=str(e))
    if not removed:
        return WorkflowResult(path=path, error=f"No workflow '{workflow_id}' in {path}")
    return WorkflowResult(path=path)
