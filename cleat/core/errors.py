"""
Error kinds — every failure the tool reports to the user.

All errors derive from ``CleatError`` so that entry points (CLI, browser)
can catch one type, print a single line, and exit non-zero. Each error
keeps its structured fields as attributes for tests and logging.
"""

from __future__ import annotations

from pathlib import Path


class CleatError(Exception):
    """Base class for every error surfaced to the top-level caller."""


# ── Loader ──────────────────────────────────────────────────────


class ConfigError(CleatError):
    """Raised when the project declaration cannot be loaded."""


class ConfigNotFound(ConfigError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Config file not found: {path}")


class ConfigParseError(ConfigError):
    def __init__(self, path: Path | str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid configuration in {path}: {detail}")


class UnsupportedVersion(ConfigError):
    def __init__(self, version: int, supported: tuple[int, ...]):
        self.version = version
        self.supported = supported
        super().__init__(
            f"unrecognized configuration version: {version} "
            f"(supported: {', '.join(str(v) for v in supported)})"
        )


# ── Dispatch ────────────────────────────────────────────────────


class UnknownCommand(CleatError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unknown command: {command!r}")


class MissingService(CleatError):
    def __init__(self, service: str, command: str = ""):
        self.service = service
        self.command = command
        super().__init__(f"Service '{service}' not found")


class InvalidEnvironment(CleatError):
    def __init__(self, environment: str, known: list[str]):
        self.environment = environment
        self.known = list(known)
        if environment:
            msg = f"Invalid environment '{environment}'"
        else:
            msg = "An environment is required"
        if known:
            msg += f" (available: {', '.join(known)})"
        super().__init__(msg)


# ── Planning & execution ────────────────────────────────────────


class MissingRequirement(CleatError):
    def __init__(self, key: str, prompt: str = ""):
        self.key = key
        self.prompt = prompt
        super().__init__(f"No value provided for required input '{key}'")


class CyclicDependencies(CleatError):
    def __init__(self, tasks: list[str]):
        self.tasks = list(tasks)
        super().__init__(f"Circular dependency between tasks: {', '.join(tasks)}")


class CommandError(CleatError):
    """Raised by a runner when an external command exits non-zero."""

    def __init__(self, argv: list[str], exit_status: int):
        self.argv = list(argv)
        self.exit_status = exit_status
        super().__init__(f"'{' '.join(argv)}' exited with status {exit_status}")


class SubprocessFailure(CleatError):
    def __init__(self, task_name: str, argv: list[str], exit_status: int):
        self.task_name = task_name
        self.argv = list(argv)
        self.exit_status = exit_status
        super().__init__(
            f"Task {task_name} failed: '{' '.join(argv)}' exited with status {exit_status}"
        )


class WorkflowStepFailure(CleatError):
    def __init__(self, workflow: str, step: int, command: str, cause: CleatError):
        self.workflow = workflow
        self.step = step
        self.command = command
        self.cause = cause
        super().__init__(
            f"Workflow '{workflow}' failed at step {step + 1} ({command}): {cause}"
        )


class WorkflowCycle(CleatError):
    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__(f"Workflow cycle detected: {' -> '.join(chain)}")
