"""
Mock runner — test double that records commands instead of running them.

Configurable to fail specific commands (matched by argv prefix) and to
answer prompts from a script.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cleat.adapters.base import Runner
from cleat.core.errors import CommandError


@dataclass
class RecordedCall:
    cwd: str | None
    argv: list[str]


class MockRunner(Runner):
    """Records every call; succeeds unless told otherwise."""

    def __init__(self, answers: dict[str, str] | None = None):
        self._answers: dict[str, str] = dict(answers or {})
        self._failures: list[tuple[list[str], int]] = []
        self._call_log: list[RecordedCall] = []
        self._prompts: list[str] = []

    @property
    def call_log(self) -> list[RecordedCall]:
        """All calls this mock has received, in order."""
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        return [call.argv for call in self._call_log]

    @property
    def prompts(self) -> list[str]:
        """Prompt messages shown so far."""
        return self._prompts

    def set_failure(self, argv_prefix: list[str], exit_status: int = 1) -> None:
        """Make any command starting with ``argv_prefix`` fail."""
        self._failures.append((list(argv_prefix), exit_status))

    def set_answer(self, message_fragment: str, answer: str) -> None:
        """Answer prompts whose message contains ``message_fragment``."""
        self._answers[message_fragment] = answer

    def run_with_dir(self, cwd: Path | str | None, command: str, *args: str) -> None:
        argv = [command, *args]
        self._call_log.append(RecordedCall(cwd=str(cwd) if cwd else None, argv=argv))
        for prefix, status in self._failures:
            if argv[: len(prefix)] == prefix:
                raise CommandError(argv, status)

    def prompt(self, message: str, default: str = "") -> str:
        self._prompts.append(message)
        for fragment, answer in self._answers.items():
            if fragment in message:
                return answer or default
        return default

    def reset(self) -> None:
        """Clear call log, prompts and failures."""
        self._call_log.clear()
        self._prompts.clear()
        self._failures.clear()
