"""
Invocation history — ``~/.cleat/<project_id>.history.yaml``.

Newest entry first, never more than 50. Workflow steps share the
``workflow_run_id`` of the run they belong to.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from cleat.core.context import state_dir
from cleat.core.persistence.files import read_yaml, write_yaml

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50


class HistoryEntry(BaseModel):
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    command: str
    inputs: dict[str, str] | None = None
    success: bool = True
    workflow_run_id: str | None = None


def new_workflow_run_id() -> str:
    return uuid.uuid4().hex[:12]


class HistoryStore:
    """Reads and rewrites one project's history file."""

    def __init__(self, project_id: str, base_dir: Path | None = None):
        self._path = (base_dir or state_dir()) / f"{project_id}.history.yaml"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[HistoryEntry]:
        """All entries, newest first. A corrupt file reads as empty."""
        try:
            data = read_yaml(self._path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Cannot read history %s: %s — starting fresh", self._path, e)
            return []
        if not isinstance(data, list):
            return []

        entries = []
        for item in data:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed history entry in %s", self._path)
        return entries

    def save(self, entries: list[HistoryEntry]) -> None:
        kept = entries[:MAX_ENTRIES]
        write_yaml(
            self._path,
            [e.model_dump(mode="json", exclude_none=True) for e in kept],
        )

    def record(
        self,
        command: str,
        success: bool,
        inputs: dict[str, str] | None = None,
        workflow_run_id: str | None = None,
    ) -> HistoryEntry:
        """Prepend a new entry and rewrite the file."""
        entry = HistoryEntry(
            command=command,
            success=success,
            inputs=dict(inputs) if inputs else None,
            workflow_run_id=workflow_run_id,
        )
        self.save([entry, *self.load()])
        return entry
