"""
Secret-resolver envelope — route docker commands through ``op run``.

If the env file of a docker invocation references a 1Password
secret (``op://``) and the ``op`` CLI is installed, the command becomes

    op run --env-file <file> -- docker …

so the secrets are resolved into the container's environment.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

RESOLVER = "op"
SECRET_MARKER = b"op://"
SERVICE_ENV_FILE = ".envs/dev.env"
IAC_ENV_FILE = ".env"
WRAPPED_TOOLS = frozenset({"docker"})


def env_file_for(cwd: Path) -> str:
    """Env file (relative to ``cwd``) consulted for a command run in ``cwd``."""
    if ".iac" in cwd.parts:
        return IAC_ENV_FILE
    return SERVICE_ENV_FILE


def needs_resolver(env_file: Path) -> bool:
    try:
        return SECRET_MARKER in env_file.read_bytes()
    except OSError:
        return False


def wrap(argv: list[str], cwd: Path, env_dir: Path | None = None) -> list[str]:
    """Return ``argv`` wrapped in ``op run`` when its env file needs it.

    The env file is looked up in ``env_dir`` (default: ``cwd``); a compose
    run started from the project root for one service passes that
    service's directory. The ``--env-file`` argument is relative to ``cwd``.
    """
    if not argv or argv[0] not in WRAPPED_TOOLS:
        return argv

    directory = env_dir or cwd
    path = directory / env_file_for(directory)
    if not needs_resolver(path):
        return argv
    try:
        env_file = str(path.relative_to(cwd))
    except ValueError:
        env_file = str(path)
    if shutil.which(RESOLVER) is None:
        logger.debug("%s references secrets but '%s' is not on PATH", env_file, RESOLVER)
        return argv

    logger.debug("Wrapping %s with %s run (--env-file %s)", argv[0], RESOLVER, env_file)
    return [RESOLVER, "run", "--env-file", env_file, "--", *argv]
