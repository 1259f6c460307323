"""
Runners — how commands reach the operating system.

    ShellRunner  real subprocesses, click prompts
    MockRunner   records calls, scripted answers (tests)
"""

from cleat.adapters.base import Runner
from cleat.adapters.mock import MockRunner, RecordedCall
from cleat.adapters.shell import ShellRunner

__all__ = ["MockRunner", "RecordedCall", "Runner", "ShellRunner"]
