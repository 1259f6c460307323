"""
Provider base — one command family (``npm …``, ``terraform …``) each.

The dispatcher asks providers in priority order; the first whose
``can_handle`` accepts the text builds the strategy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cleat.core.engine.strategy import Strategy
from cleat.core.errors import MissingService
from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.session import Session


class Provider(ABC):
    """Abstract base class for command providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g. 'npm', 'docker')."""

    @abstractmethod
    def can_handle(self, command: str) -> bool:
        """Whether this provider owns ``command``."""

    @abstractmethod
    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        """Build the strategy for ``command``, or None when it makes no sense."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def split_action(text: str, actions: list[str] | tuple[str, ...]) -> tuple[str, str] | None:
    """Split ``<action>[:<target>]`` using the longest known action.

    >>> split_action("assets:precompile:web", ["assets:precompile", "migrate"])
    ('assets:precompile', 'web')
    """
    for action in sorted(actions, key=len, reverse=True):
        if text == action:
            return action, ""
        if text.startswith(action + ":"):
            return action, text[len(action) + 1:]
    return None


def find_service(project: Project, name: str, command: str = "") -> Service:
    """Look up a service named in a command suffix.

    Raises:
        MissingService: No service has that name.
    """
    svc = project.service_by_name(name)
    if svc is None:
        raise MissingService(name, command)
    return svc
