"""
Process context — the project this invocation works on, and where
per-user state lives.

The root is registered once by ``main.py`` before any command runs.
Stores read ``state_dir()`` on every call, so tests that point HOME at
a temp directory get isolated history and stats for free.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

STATE_DIR_NAME = ".cleat"

_project_root: Optional[Path] = None


def set_project_root(root: Path) -> None:
    global _project_root
    _project_root = root


def get_project_root() -> Optional[Path]:
    """Root registered by the entry point; None outside the CLI."""
    return _project_root


def state_dir() -> Path:
    """``~/.cleat``: history, stats and personal workflows, one file set per project."""
    return Path.home() / STATE_DIR_NAME
