"""
Command dispatcher — maps a textual command to a strategy.

Providers are consulted in a fixed priority order. The first provider
that claims the command decides: if it cannot build a strategy the
command is unknown, even when a later provider might have matched.

    npm → docker → django → go → ruby → cloud → terraform → workflow → registry
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from cleat.core.engine.provider import Provider
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.workflow import WorkflowStrategy
from cleat.core.errors import UnknownCommand, WorkflowCycle
from cleat.core.models.project import Project
from cleat.core.session import MAX_WORKFLOW_DEPTH, Session
from cleat.core.tasks import cloud
from cleat.core.tasks.django import DjangoProvider
from cleat.core.tasks.docker import DockerProvider
from cleat.core.tasks.golang import GoProvider
from cleat.core.tasks.lifecycle import build_strategy, run_strategy
from cleat.core.tasks.npm import NpmProvider
from cleat.core.tasks.ruby import RubyProvider
from cleat.core.tasks.shell import is_shell_step, shell_task
from cleat.core.tasks.terraform import TerraformProvider

logger = logging.getLogger(__name__)

WORKFLOW_PREFIX = "workflow:"

StrategyFactory = Callable[[Project], Strategy]


def normalize(command: str) -> str:
    """Collapse runs of whitespace so ``"npm  run build "`` matches."""
    return " ".join(command.split())


class WorkflowProvider(Provider):
    """``workflow:<id or name>`` — each step is dispatched again."""

    def __init__(self, dispatcher: Dispatcher):
        self._dispatcher = dispatcher

    @property
    def name(self) -> str:
        return "workflow"

    def can_handle(self, command: str) -> bool:
        return command.startswith(WORKFLOW_PREFIX)

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        key = command[len(WORKFLOW_PREFIX):].strip()
        workflow = session.project.workflow_by_key(key)
        if workflow is None:
            return None

        if workflow.id in session.workflow_stack:
            raise WorkflowCycle([*session.workflow_stack, workflow.id])
        if len(session.workflow_stack) >= MAX_WORKFLOW_DEPTH:
            raise WorkflowCycle([*session.workflow_stack, workflow.id])

        session.workflow_stack.append(workflow.id)
        try:
            steps = [(step, self._dispatcher.resolve_step(step, session))
                     for step in workflow.ordered_commands]
        finally:
            session.workflow_stack.pop()
        return WorkflowStrategy(workflow, steps)


class RegistryProvider(Provider):
    """Fixed command names registered up front (``build``, ``run``, …)."""

    def __init__(self, entries: dict[str, StrategyFactory] | None = None):
        self._entries: dict[str, StrategyFactory] = dict(entries or {})

    @property
    def name(self) -> str:
        return "registry"

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def register(self, command: str, factory: StrategyFactory) -> None:
        self._entries[command] = factory

    def can_handle(self, command: str) -> bool:
        return command in self._entries

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        return self._entries[command](session.project)


def _single(command: str, make_task: Callable) -> StrategyFactory:
    return lambda _project: Strategy(command, [make_task()])


def default_registry() -> RegistryProvider:
    registry = RegistryProvider({"build": build_strategy, "run": run_strategy})
    for command, make_task in cloud.REGISTRY.items():
        registry.register(command, _single(command, make_task))
    return registry


class Dispatcher:
    """Resolve commands through an ordered list of providers."""

    def __init__(self, providers: list[Provider] | None = None):
        if providers is None:
            providers = [
                NpmProvider(),
                DockerProvider(),
                DjangoProvider(),
                GoProvider(),
                RubyProvider(),
                cloud.CloudProvider(),
                TerraformProvider(),
                WorkflowProvider(self),
                default_registry(),
            ]
        self.providers = providers

    def resolve(self, command: str, session: Session) -> Strategy | None:
        """Strategy for ``command``, or None when no provider builds one."""
        text = normalize(command)
        for provider in self.providers:
            if provider.can_handle(text):
                logger.debug("Command %r handled by %s provider", text, provider.name)
                return provider.get_strategy(text, session)
        logger.debug("No provider for command %r", text)
        return None

    def resolve_or_raise(self, command: str, session: Session) -> Strategy:
        """Like ``resolve`` but raises UnknownCommand instead of returning None."""
        strategy = self.resolve(command, session)
        if strategy is None:
            raise UnknownCommand(normalize(command))
        return strategy

    def resolve_step(self, command: str, session: Session) -> Strategy:
        """Resolve one workflow step; ``sh:`` steps become shell tasks."""
        if is_shell_step(command):
            return Strategy(command, [shell_task(command)])
        return self.resolve_or_raise(command, session)


def resolve(command: str, session: Session) -> Strategy | None:
    """Resolve with the default provider chain."""
    return Dispatcher().resolve(command, session)
