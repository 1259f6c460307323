"""
Command frequency — ``~/.cleat/<project_id>.stats.yaml``.

    commands:
      build: {count: 12}
      npm run dev: {count: 3}
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from cleat.core.context import state_dir
from cleat.core.persistence.files import read_yaml, write_yaml

logger = logging.getLogger(__name__)


class StatsStore:
    def __init__(self, project_id: str, base_dir: Path | None = None):
        self._path = (base_dir or state_dir()) / f"{project_id}.stats.yaml"

    @property
    def path(self) -> Path:
        return self._path

    def counts(self) -> dict[str, int]:
        """Usage count per command. A corrupt file reads as empty."""
        try:
            data = read_yaml(self._path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Cannot read stats %s: %s — starting fresh", self._path, e)
            return {}

        commands = data.get("commands") if isinstance(data, dict) else None
        if not isinstance(commands, dict):
            return {}

        result: dict[str, int] = {}
        for command, entry in commands.items():
            count = entry.get("count") if isinstance(entry, dict) else None
            if isinstance(count, int) and count > 0:
                result[str(command)] = count
        return result

    def increment(self, command: str) -> int:
        """Add one use of ``command``; returns the new count."""
        counts = self.counts()
        counts[command] = counts.get(command, 0) + 1
        write_yaml(
            self._path,
            {"commands": {cmd: {"count": n} for cmd, n in counts.items()}},
        )
        return counts[command]

    def top_commands(self, limit: int = 3) -> list[tuple[str, int]]:
        """Most used commands, highest count first (ties by name)."""
        ranked = sorted(self.counts().items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]
