"""
Task — the atomic unit of work.

A task knows its name, what must run before it, whether it applies to
the current project, which inputs it needs, and how to turn all of that
into concrete command lines. Tasks only differ in those functions, so a
single dataclass with callable fields covers every namespace:

    Task(
        name="docker:build",
        description="Build all Docker containers",
        materialize=lambda s: [Invocation(["docker", ...], s.root)],
        guard=lambda s: s.project.is_docker_effective(),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from cleat.core.engine.envelope import wrap
from cleat.core.errors import CommandError, SubprocessFailure
from cleat.core.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputRequirement:
    """A value the user is asked for before the tasks run."""

    key: str
    prompt: str
    default: str = ""
    optional: bool = False


@dataclass
class Invocation:
    """One materialized command line and the directory it runs in."""

    argv: list[str]
    cwd: Path | None = None
    # directory whose env file the envelope reads, when not cwd
    env_dir: Path | None = None

    def to_dict(self) -> dict:
        return {"argv": list(self.argv), "cwd": str(self.cwd) if self.cwd else None}


def _always(_session: Session) -> bool:
    return True


def _no_requirements(_session: Session) -> list[InputRequirement]:
    return []


@dataclass(eq=False)
class Task:
    name: str
    description: str
    materialize: Callable[[Session], list[Invocation]]
    dependencies: list[str] = field(default_factory=list)
    guard: Callable[[Session], bool] = _always
    needs: Callable[[Session], list[InputRequirement]] = _no_requirements

    def should_run(self, session: Session) -> bool:
        return self.guard(session)

    def requirements(self, session: Session) -> list[InputRequirement]:
        return self.needs(session)

    def invocations(self, session: Session) -> list[Invocation]:
        """Command lines with the secret-resolver envelope applied."""
        result = []
        for inv in self.materialize(session):
            cwd = inv.cwd or session.root
            result.append(Invocation(wrap(list(inv.argv), cwd, inv.env_dir), inv.cwd, inv.env_dir))
        return result

    def commands(self, session: Session) -> list[list[str]]:
        return [inv.argv for inv in self.invocations(session)]

    def depends_on(self, other: Task) -> bool:
        """True when ``other`` satisfies one of this task's dependencies.

        ``docker:build`` is satisfied by ``docker:build`` and by
        ``docker:build:<service>``.
        """
        return any(
            other.name == dep or other.name.startswith(dep + ":")
            for dep in self.dependencies
        )

    def run(self, session: Session) -> None:
        logger.info("Running task %s", self.name)
        for inv in self.invocations(session):
            try:
                session.runner.run_with_dir(inv.cwd, *inv.argv)
            except CommandError as e:
                raise SubprocessFailure(self.name, e.argv, e.exit_status) from e

    def __repr__(self) -> str:
        return f"<Task {self.name}>"
