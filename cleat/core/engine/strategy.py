"""
Strategy — an ordered bundle of tasks realizing one logical command.

Execution is planned in four steps before anything runs:

    1. Keep the tasks whose guard says they apply.
    2. Honour dependencies between selected tasks; ignore the rest.
    3. Order it topologically; ties keep the authored order.
    4. Ask for every input the selected tasks need, once per key.

Then tasks run one at a time and the first failure stops the strategy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cleat.core.engine.task import InputRequirement, Invocation, Task
from cleat.core.errors import CyclicDependencies, MissingRequirement
from cleat.core.session import Session

logger = logging.getLogger(__name__)


@dataclass
class PlannedTask:
    """A task in execution order with its command lines (for previews)."""

    task: Task
    invocations: list[Invocation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.task.name,
            "description": self.task.description,
            "commands": [inv.to_dict() for inv in self.invocations],
        }


def topological_order(tasks: list[Task]) -> list[Task]:
    """Kahn's algorithm over ``tasks``; ready tasks leave in authored order.

    Raises:
        CyclicDependencies: Some tasks depend on each other in a loop.
    """
    pending = list(tasks)
    indegree = {id(t): 0 for t in pending}
    dependents: dict[int, list[Task]] = {id(t): [] for t in pending}
    for task in pending:
        for other in pending:
            if other is not task and task.depends_on(other):
                indegree[id(task)] += 1
                dependents[id(other)].append(task)

    ordered: list[Task] = []
    while pending:
        ready = next((t for t in pending if indegree[id(t)] == 0), None)
        if ready is None:
            raise CyclicDependencies([t.name for t in pending])
        pending.remove(ready)
        ordered.append(ready)
        for dependent in dependents[id(ready)]:
            indegree[id(dependent)] -= 1
    return ordered


class Strategy:
    """A named list of tasks."""

    def __init__(self, name: str, tasks: list[Task] | None = None):
        self.name = name
        self._tasks: list[Task] = list(tasks or [])

    @property
    def tasks(self) -> list[Task]:
        return self._tasks

    def add(self, task: Task) -> None:
        self._tasks.append(task)

    # ── Planning ────────────────────────────────────────────────

    def select(self, session: Session) -> list[Task]:
        """Tasks whose guard passes, in authored order.

        A dependency is only honoured when a task of this strategy that
        applies itself satisfies it, and every such task is already part
        of this selection; dependencies on anything else are ignored.
        """
        return [t for t in self._tasks if t.should_run(session)]

    def plan(self, session: Session) -> list[Task]:
        return topological_order(self.select(session))

    def requirements(self, session: Session, tasks: list[Task] | None = None) -> list[InputRequirement]:
        """Union of input requirements, first declaration of each key wins."""
        seen: dict[str, InputRequirement] = {}
        for task in tasks if tasks is not None else self.plan(session):
            for req in task.requirements(session):
                seen.setdefault(req.key, req)
        return list(seen.values())

    def collect_inputs(self, session: Session, tasks: list[Task]) -> None:
        for req in self.requirements(session, tasks):
            if req.key in session.inputs:
                continue
            answer = session.runner.prompt(req.prompt, req.default)
            if not answer and not req.default and not req.optional:
                raise MissingRequirement(req.key, req.prompt)
            session.inputs[req.key] = answer or req.default
            logger.debug("Input %s collected", req.key)

    def preview(self, session: Session) -> list[PlannedTask]:
        """Planned tasks with their materialized commands, without running anything."""
        return [PlannedTask(t, t.invocations(session)) for t in self.plan(session)]

    # ── Execution ───────────────────────────────────────────────

    def execute(self, session: Session) -> None:
        tasks = self.plan(session)
        logger.info("Strategy %s: %s", self.name, [t.name for t in tasks])
        self.collect_inputs(session, tasks)
        for task in tasks:
            task.run(session)

    def __repr__(self) -> str:
        return f"<Strategy {self.name} tasks={[t.name for t in self._tasks]}>"
