"""Shell task — a raw ``sh -c`` step, only reachable from workflows."""

from __future__ import annotations

from cleat.core.engine.task import Invocation, Task

SHELL_PREFIX = "sh:"


def is_shell_step(command: str) -> bool:
    return command.startswith(SHELL_PREFIX)


def shell_task(command: str) -> Task:
    """Task running ``command`` (with or without the ``sh:`` prefix) through ``sh -c``."""
    script = command[len(SHELL_PREFIX):].strip() if is_shell_step(command) else command
    return Task(
        name="shell:run",
        description=f"Run shell command: {script}",
        materialize=lambda s: [Invocation(["sh", "-c", script], s.root)],
    )
