"""
Stack heuristics — decide which services in a directory get a module.

When a directory proves positive for a framework (it has ``manage.py``,
``Gemfile``, ``go.mod`` or ``package.json``) several services may share
it. Each service is classified as a *match* or *other* by looking at, in
order: its Dockerfile text, its compose command, its image, its name. The
first source that gives a positive or negative answer wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from cleat.core.models.service import Service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackSignals:
    """Tokens that vote for or against a framework."""

    positive: tuple[str, ...]
    negative: tuple[str, ...]
    image_positive: tuple[str, ...]
    name_positive: tuple[str, ...]
    name_negative: tuple[str, ...] = ()
    # whole-word name tokens that cancel name_negative
    name_exempt: tuple[str, ...] = ()


PYTHON = StackSignals(
    positive=("python", "requirements.txt", "manage.py", "pip ", "uv "),
    negative=("node", "package.json", "npm", "go.mod", "go build", "golang"),
    image_positive=("python",),
    name_positive=("python", "django", "api", "backend"),
    name_negative=("node", "npm", "js", "frontend", "ui"),
)

RUBY = StackSignals(
    positive=("ruby", "gemfile", "bundle ", "rails "),
    negative=("node", "python", "go.mod"),
    image_positive=("ruby",),
    name_positive=("ruby", "rails", "api", "backend"),
    name_negative=("node", "npm", "python", "frontend"),
)

GO = StackSignals(
    positive=("golang", "go.mod", "go build", "go run"),
    negative=("python", "node", "package.json"),
    image_positive=("golang", "go:"),
    name_positive=("go", "golang", "api", "server", "cli", "backend"),
    name_negative=("python", "django", "node", "npm", "js"),
    name_exempt=("go", "golang"),
)

NPM = StackSignals(
    positive=(),
    negative=(),
    image_positive=(),
    name_positive=("npm", "node", "frontend", "ui", "vite", "assets"),
)

SIGNALS: dict[str, StackSignals] = {
    "python": PYTHON,
    "ruby": RUBY,
    "go": GO,
    "npm": NPM,
}


def _vote(text: str, positive: tuple[str, ...], negative: tuple[str, ...]) -> bool | None:
    if any(token in text for token in positive):
        return True
    if any(token in text for token in negative):
        return False
    return None


def _name_vote(name: str, signals: StackSignals) -> bool:
    words = set(re.split(r"[^a-z0-9]+", name))
    exempt = any(word in words for word in signals.name_exempt)
    if not exempt and any(token in name for token in signals.name_negative):
        return False
    return any(token in name for token in signals.name_positive)


def read_dockerfile(service: Service, search_dir: Path) -> str:
    """Lower-cased text of the service's Dockerfile, or ``""``.

    Without a ``dockerfile`` hint the conventional ``Dockerfile`` in the
    build directory is read, as compose itself would.
    """
    path = search_dir / (service.dockerfile_hint or "Dockerfile")
    if not path.is_file():
        return ""
    try:
        return path.read_text(encoding="utf-8", errors="ignore").lower()
    except OSError:
        return ""


def matches_stack(tag: str, service: Service, search_dir: Path) -> bool:
    """True when ``service`` looks like it runs the ``tag`` stack."""
    signals = SIGNALS[tag]

    dockerfile = read_dockerfile(service, search_dir)
    if dockerfile:
        vote = _vote(dockerfile, signals.positive, signals.negative)
        if vote is not None:
            return vote

    if service.command_hint:
        vote = _vote(service.command_hint.lower(), signals.positive, signals.negative)
        if vote is not None:
            return vote

    if service.image_hint:
        vote = _vote(service.image_hint.lower(), signals.image_positive, signals.negative)
        if vote is not None:
            return vote

    return _name_vote(service.name.lower(), signals)


def select_services(tag: str, candidates: list[Service], search_dir: Path) -> list[Service]:
    """Pick the services that receive a ``tag`` module.

    Services that already declare a module of that tag are skipped.
    Matches win; when nothing matches, every remaining candidate is chosen.
    """
    matched: list[Service] = []
    others: list[Service] = []
    for svc in candidates:
        if svc.has_module(tag):
            continue
        if matches_stack(tag, svc, search_dir):
            matched.append(svc)
        else:
            others.append(svc)

    chosen = matched or others
    if chosen:
        logger.debug(
            "%s stack in %s → %s", tag, search_dir, [s.name for s in chosen]
        )
    return chosen
