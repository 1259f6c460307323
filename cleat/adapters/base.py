"""
Runner base — the contract between tasks and external processes.

Tasks never spawn processes themselves. They hand argv vectors to a
runner, which forwards stdio and raises ``CommandError`` on a non-zero
exit. Interactive questions go through ``prompt`` so tests can script
the answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class Runner(ABC):
    """Abstract base class for process runners.

    To create a new runner:
        1. Subclass Runner
        2. Implement run_with_dir and prompt
    """

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def run(self, command: str, *args: str) -> None:
        """Run ``command args…`` in the current directory."""
        self.run_with_dir(None, command, *args)

    @abstractmethod
    def run_with_dir(self, cwd: Path | str | None, command: str, *args: str) -> None:
        """Run ``command args…`` with ``cwd`` as working directory.

        Raises:
            CommandError: The process exited non-zero (or could not start).
        """

    @abstractmethod
    def prompt(self, message: str, default: str = "") -> str:
        """Ask the user for a value; an empty answer yields ``default``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
