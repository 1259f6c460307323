"""
Shell runner — executes commands for real.

stdio is inherited so the user sees the tool's own output (and can
answer its questions). Ctrl-C is delivered to the child by the terminal;
we wait for it to exit and then report the interruption as a failure.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

import click

from cleat.adapters.base import Runner
from cleat.core.errors import CommandError

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130


class ShellRunner(Runner):
    """Run commands with inherited stdio, prompting through click."""

    def __init__(self, echo: bool = True):
        self._echo = echo

    def run_with_dir(self, cwd: Path | str | None, command: str, *args: str) -> None:
        argv = [command, *args]
        line = shlex.join(argv)
        if self._echo:
            if cwd:
                click.secho(f"Executing (in {cwd}): {line}", fg="cyan", err=True)
            else:
                click.secho(f"Executing: {line}", fg="cyan", err=True)
        logger.debug("Executing: %s (cwd=%s)", line, cwd)

        try:
            proc = subprocess.Popen(argv, cwd=str(cwd) if cwd else None)
        except FileNotFoundError as e:
            logger.debug("Command not found: %s", e)
            raise CommandError(argv, EXIT_NOT_FOUND) from e
        except OSError as e:
            logger.debug("Cannot start %s: %s", command, e)
            raise CommandError(argv, EXIT_NOT_FOUND) from e

        try:
            returncode = proc.wait()
        except KeyboardInterrupt:
            # the child got the same SIGINT; let it finish cleaning up
            proc.wait()
            raise CommandError(argv, EXIT_INTERRUPTED) from None

        if returncode != 0:
            logger.info("%s exited with %d", line, returncode)
            raise CommandError(argv, returncode)

    def prompt(self, message: str, default: str = "") -> str:
        answer = click.prompt(
            message, default=default, show_default=bool(default), err=True
        )
        return str(answer).strip() or default
