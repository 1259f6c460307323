"""
Run use case — resolve a command, execute it, and remember it.

The full vertical slice shared by the CLI and the browser: load the
project, merge workflow files, dispatch the command, run the strategy,
then write history and usage stats.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from cleat.adapters.base import Runner
from cleat.core.config.loader import load_project, project_id
from cleat.core.engine.dispatcher import Dispatcher
from cleat.core.engine.strategy import PlannedTask
from cleat.core.engine.workflow import WorkflowStrategy
from cleat.core.errors import CleatError
from cleat.core.persistence.history import HistoryStore, new_workflow_run_id
from cleat.core.persistence.stats import StatsStore
from cleat.core.persistence.workflows import merge_workflows
from cleat.core.session import Session

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running one command."""

    command: str
    strategy: str = ""
    tasks: list[str] = field(default_factory=list)
    error: str | None = None
    exception: CleatError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"command": self.command, "ok": self.ok}
        if self.error:
            result["error"] = self.error
        if self.strategy:
            result["strategy"] = self.strategy
            result["tasks"] = self.tasks
        return result


@dataclass
class PlanResult:
    """What a command would do, without doing it."""

    command: str
    strategy: str = ""
    planned: list[PlannedTask] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"command": self.command, "error": self.error}
        return {
            "command": self.command,
            "strategy": self.strategy,
            "tasks": [p.to_dict() for p in self.planned],
        }


def open_session(config_path: Path | None = None, runner: Runner | None = None) -> Session:
    """Load the project (with file-based workflows) and bind a runner.

    Raises:
        ConfigError: The declaration or a workflow file is invalid.
    """
    if runner is None:
        from cleat.adapters.shell import ShellRunner

        runner = ShellRunner()
    project = load_project(config_path)
    merge_workflows(project, project_id(project.root))
    return Session(project=project, runner=runner)


def run_command(
    command: str,
    config_path: Path | None = None,
    runner: Runner | None = None,
    session: Session | None = None,
    record: bool = True,
) -> RunResult:
    """Execute ``command`` and record it in history and stats.

    Args:
        command: Command text as typed (``"npm run build"``).
        config_path: Optional explicit path to cleat.yaml.
        runner: Runner for subprocesses (default: ShellRunner).
        session: Reuse an existing session (the browser keeps one).
        record: Write history/stats.
    """
    result = RunResult(command=command)
    try:
        if session is None:
            session = open_session(config_path, runner)
    except CleatError as e:
        result.error, result.exception = str(e), e
        return result

    pid = project_id(session.root)
    history = HistoryStore(pid)

    try:
        strategy = Dispatcher().resolve_or_raise(command, session)
    except CleatError as e:
        logger.debug("Cannot resolve %r: %s", command, e)
        result.error, result.exception = str(e), e
        return result

    result.strategy = strategy.name
    result.tasks = [t.name for t in strategy.tasks]

    if record:
        StatsStore(pid).increment(command)
        if isinstance(strategy, WorkflowStrategy):
            run_id = new_workflow_run_id()
            strategy.step_listener = lambda step, ok: history.record(
                step, ok, session.inputs, workflow_run_id=run_id
            )

    try:
        strategy.execute(session)
    except CleatError as e:
        logger.info("Command %r failed: %s", command, e)
        result.error, result.exception = str(e), e
    except KeyboardInterrupt as e:
        result.error = "Interrupted"
        if record:
            history.record(command, False, session.inputs)
        raise e

    if record:
        history.record(command, result.ok, session.inputs)
    return result


def plan_command(
    command: str,
    config_path: Path | None = None,
    session: Session | None = None,
) -> PlanResult:
    """Resolve ``command`` and list its tasks and command lines, running nothing."""
    result = PlanResult(command=command)
    try:
        if session is None:
            session = open_session(config_path)
        strategy = Dispatcher().resolve_or_raise(command, session)
        result.strategy = strategy.name
        result.planned = strategy.preview(session)
    except CleatError as e:
        result.error = str(e)
    return result
