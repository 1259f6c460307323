"""
Detect use case — show the canonical project after auto-detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cleat.core.config.loader import load_project, project_id
from cleat.core.errors import CleatError
from cleat.core.models.project import Project


@dataclass
class DetectResult:
    project: Project | None = None
    project_id: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.project is not None
        return {
            "project_id": self.project_id,
            "source_path": self.project.source_path,
            "project": self.project.to_yaml_dict(),
        }


def run_detect(config_path: Path | None = None) -> DetectResult:
    try:
        project = load_project(config_path)
    except CleatError as e:
        return DetectResult(error=str(e))
    return DetectResult(project=project, project_id=project_id(project.root))
