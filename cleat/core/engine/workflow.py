"""
Workflow strategy — a named sequence of other commands.

Each step is resolved through the dispatcher like any command typed by
the user, so a workflow can contain builds, deploys, other workflows, or
raw ``sh:`` steps. Steps run in order; the first failure stops the
workflow and is reported with the step that caused it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from cleat.core.engine.strategy import PlannedTask, Strategy
from cleat.core.engine.task import Task
from cleat.core.errors import CleatError, WorkflowStepFailure
from cleat.core.models.project import Workflow
from cleat.core.session import Session

logger = logging.getLogger(__name__)

StepListener = Callable[[str, bool], None]


class WorkflowStrategy(Strategy):
    """Runs each step's own strategy in declaration order."""

    def __init__(self, workflow: Workflow, steps: list[tuple[str, Strategy]]):
        tasks: list[Task] = []
        for _, strategy in steps:
            tasks.extend(strategy.tasks)
        super().__init__(f"workflow:{workflow.id}", tasks)
        self.workflow = workflow
        self.steps = steps
        # called after every step with (command, success)
        self.step_listener: StepListener | None = None

    def preview(self, session: Session) -> list[PlannedTask]:
        planned: list[PlannedTask] = []
        for _, strategy in self.steps:
            planned.extend(strategy.preview(session))
        return planned

    def execute(self, session: Session) -> None:
        logger.info("Workflow %s: %d steps", self.workflow.name, len(self.steps))
        for index, (command, strategy) in enumerate(self.steps):
            try:
                strategy.execute(session)
            except CleatError as e:
                self._notify(command, False)
                raise WorkflowStepFailure(self.workflow.name, index, command, e) from e
            self._notify(command, True)

    def _notify(self, command: str, success: bool) -> None:
        if self.step_listener is not None:
            self.step_listener(command, success)
