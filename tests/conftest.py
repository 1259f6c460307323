"""
Shared test fixtures and configuration.
"""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from cleat.adapters.mock import MockRunner
from cleat.core.config.loader import load_project
from cleat.core.session import Session


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point HOME at a temp dir so history/stats never touch the real ~/.cleat."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_config(project_dir: Path) -> Callable[[str], Path]:
    """Write a dedented cleat.yaml into ``project_dir`` and return its path."""

    def _write(content: str) -> Path:
        path = project_dir / "cleat.yaml"
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def make_session(write_config, mock_runner) -> Callable[[str], Session]:
    """Load a project from YAML text and bind it to the mock runner."""

    def _make(content: str) -> Session:
        project = load_project(write_config(content))
        return Session(project=project, runner=mock_runner)

    return _make
