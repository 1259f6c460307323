"""
Session — what a running command needs: the project and a runner.

``inputs`` is the project's own answer map, so anything a strategy
collects is visible to every task of the invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cleat.adapters.base import Runner
from cleat.core.models.project import Project

MAX_WORKFLOW_DEPTH = 50


@dataclass
class Session:
    project: Project
    runner: Runner
    # workflows currently being expanded, outermost first
    workflow_stack: list[str] = field(default_factory=list)

    @property
    def inputs(self) -> dict[str, str]:
        return self.project.inputs

    @property
    def root(self) -> Path:
        return self.project.root
