"""
Logging setup for the CLI and the browser.

``main.py`` calls ``configure_from_env`` once per process; modules just
use ``logging.getLogger(__name__)``.

    console level:  --debug / -v / -q  >  CLEAT_LOG_LEVEL  >  WARNING
    file output:    CLEAT_LOG_FILE at CLEAT_LOG_FILE_LEVEL (default: console level)

The console handler writes to stderr, so log lines never end up in
output meant for pipes (``cleat detect > project.yaml``).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ENV_LEVEL = "CLEAT_LOG_LEVEL"
ENV_FILE = "CLEAT_LOG_FILE"
ENV_FILE_LEVEL = "CLEAT_LOG_FILE_LEVEL"

# (format, datefmt) by the highest level they apply to
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
]
_CONSOLE_DEFAULT = "%(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(project)s] %(name)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ProjectStamp(logging.Filter):
    """Adds ``record.project`` so one log file can serve several projects."""

    def __init__(self, project: str):
        super().__init__()
        self.project = project

    def filter(self, record: logging.LogRecord) -> bool:
        record.project = self.project
        return True


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_DEFAULT, None
    for threshold, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate, candidate_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(log_file: str, level: int, project: str) -> logging.Handler:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    handler.addFilter(_ProjectStamp(project))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    project: str = "-",
) -> None:
    """Replace the root logger's handlers.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Optional log file (``~`` is expanded, parents created).
        log_file_level: Level for the file; defaults to ``level``.
        project: Project id written on every file record.
    """
    console_level = parse_level(level)
    handlers = [_console_handler(console_level)]
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level, project))
        root_level = min(root_level, file_level)

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(root_level)

    # a broken log file must not break a command
    logging.raiseExceptions = False


def configure_from_env(flag_level: str | None = None, project: str = "-") -> None:
    """``setup_logging`` with the ``CLEAT_LOG_*`` variables filled in.

    ``flag_level`` comes from the command-line flags and wins over
    ``CLEAT_LOG_LEVEL``.
    """
    setup_logging(
        level=flag_level or os.environ.get(ENV_LEVEL, "WARNING"),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        project=project,
    )


def parse_level(name: str | None) -> int:
    """Numeric level for ``name`` (case-insensitive), WARNING when unknown."""
    numeric = getattr(logging, name.upper(), None) if name else None
    return numeric if isinstance(numeric, int) else logging.WARNING
