"""
Tests for persistence — history, stats, workflow files, atomic writes.
"""

import textwrap
from pathlib import Path

import pytest
import yaml

from cleat.core.errors import ConfigParseError
from cleat.core.models import Project, Workflow
from cleat.core.persistence.files import read_yaml, write_yaml
from cleat.core.persistence.history import MAX_ENTRIES, HistoryStore
from cleat.core.persistence.stats import StatsStore
from cleat.core.persistence.workflows import (
    delete_workflow,
    load_workflows,
    merge_workflows,
    project_workflows_path,
    save_workflow,
    user_workflows_path,
)


class TestFiles:
    def test_missing_reads_none(self, tmp_path: Path):
        assert read_yaml(tmp_path / "nope.yaml") is None

    def test_write_creates_parents(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / "data.yaml"
        write_yaml(path, {"a": [1, 2]})
        assert read_yaml(path) == {"a": [1, 2]}

    def test_no_temp_files_left(self, tmp_path: Path):
        target = tmp_path / "state" / "data.yaml"
        write_yaml(target, {"a": 1})
        write_yaml(target, {"a": 2})
        assert [p.name for p in target.parent.iterdir()] == ["data.yaml"]


class TestHistory:
    def test_default_location(self, isolated_home: Path):
        store = HistoryStore("proj-1")
        assert store.path == isolated_home / ".cleat" / "proj-1.history.yaml"

    def test_newest_first(self, tmp_path: Path):
        store = HistoryStore("p", base_dir=tmp_path)
        store.record("build", True)
        store.record("run", False, inputs={"k": "v"})
        entries = store.load()
        assert [e.command for e in entries] == ["run", "build"]
        assert entries[0].success is False
        assert entries[0].inputs == {"k": "v"}
        assert entries[1].inputs is None

    def test_capped(self, tmp_path: Path):
        store = HistoryStore("p", base_dir=tmp_path)
        for i in range(MAX_ENTRIES + 5):
            store.record(f"cmd-{i}", True)
        entries = store.load()
        assert len(entries) == MAX_ENTRIES
        assert entries[0].command == f"cmd-{MAX_ENTRIES + 4}"

    def test_workflow_run_id_persisted(self, tmp_path: Path):
        store = HistoryStore("p", base_dir=tmp_path)
        store.record("sh: ls", True, workflow_run_id="abc123")
        raw = yaml.safe_load(store.path.read_text())
        assert raw[0]["workflow_run_id"] == "abc123"
        assert "inputs" not in raw[0]
        assert raw[0]["timestamp"].endswith("+00:00")

    def test_corrupt_file_reads_empty(self, tmp_path: Path):
        store = HistoryStore("p", base_dir=tmp_path)
        store.path.write_text("{{{ not yaml")
        assert store.load() == []
        store.record("build", True)
        assert len(store.load()) == 1


class TestStats:
    def test_increment(self, tmp_path: Path):
        store = StatsStore("p", base_dir=tmp_path)
        assert store.increment("build") == 1
        assert store.increment("build") == 2
        assert StatsStore("p", base_dir=tmp_path).counts() == {"build": 2}

    def test_file_shape(self, tmp_path: Path):
        store = StatsStore("p", base_dir=tmp_path)
        store.increment("npm run dev")
        assert yaml.safe_load(store.path.read_text()) == {
            "commands": {"npm run dev": {"count": 1}}
        }

    def test_top_commands(self, tmp_path: Path):
        store = StatsStore("p", base_dir=tmp_path)
        for command, times in (("run", 2), ("build", 5), ("deploy", 2), ("lint", 1)):
            for _ in range(times):
                store.increment(command)
        assert store.top_commands() == [("build", 5), ("deploy", 2), ("run", 2)]
        assert store.top_commands(limit=1) == [("build", 5)]

    def test_corrupt_file_reads_empty(self, tmp_path: Path):
        store = StatsStore("p", base_dir=tmp_path)
        store.path.write_text("commands: [unclosed")
        assert store.counts() == {}


class TestWorkflowFiles:
    def test_load_list_and_mapping(self, tmp_path: Path):
        listed = tmp_path / "a.yaml"
        listed.write_text("- {name: one, commands: [build]}\n")
        mapped = tmp_path / "b.yaml"
        mapped.write_text("workflows:\n  - {name: two, commands: [run]}\n")
        assert [w.id for w in load_workflows(listed)] == ["one"]
        assert [w.id for w in load_workflows(mapped)] == ["two"]

    def test_missing_file(self, tmp_path: Path):
        assert load_workflows(tmp_path / "nope.yaml") == []

    def test_empty_commands_rejected(self, tmp_path: Path):
        path = tmp_path / "w.yaml"
        path.write_text("- {name: empty, commands: []}\n")
        with pytest.raises(ConfigParseError):
            load_workflows(path)

    def test_save_replaces_same_id(self, tmp_path: Path):
        path = tmp_path / "w.yaml"
        save_workflow(Workflow(name="ship", ordered_commands=["build"]), path)
        save_workflow(Workflow(name="other", ordered_commands=["run"]), path)
        save_workflow(Workflow(name="ship", ordered_commands=["build", "run"]), path)
        loaded = load_workflows(path)
        assert [w.id for w in loaded] == ["ship", "other"]
        assert loaded[0].ordered_commands == ["build", "run"]

    def test_delete(self, tmp_path: Path):
        path = tmp_path / "w.yaml"
        save_workflow(Workflow(name="ship", ordered_commands=["build"]), path)
        assert delete_workflow("ship", path) is True
        assert delete_workflow("ship", path) is False
        assert load_workflows(path) == []

    def test_project_path_prefers_existing_yml(self, tmp_path: Path):
        assert project_workflows_path(tmp_path).name == "cleat.workflows.yaml"
        (tmp_path / "cleat.workflows.yml").write_text("[]\n")
        assert project_workflows_path(tmp_path).name == "cleat.workflows.yml"

    def test_merge_order(self, tmp_path: Path):
        root = tmp_path / "proj"
        root.mkdir()
        state = tmp_path / "state"
        (root / "cleat.workflows.yaml").write_text(textwrap.dedent("""\
            - {id: ship, name: ship, commands: [project-ship]}
            - {id: shared, name: shared, commands: [project-shared]}
        """))
        user = user_workflows_path("pid", base_dir=state)
        state.mkdir()
        user.write_text("- {id: shared, name: mine, commands: [user-shared]}\n")

        project = Project(
            source_path=str(root / "cleat.yaml"),
            workflows=[Workflow(id="ship", name="declared", ordered_commands=["declared"])],
        )
        merge_workflows(project, "pid", base_dir=state)
        by_id = {w.id: w for w in project.workflows}
        assert [w.id for w in project.workflows] == ["ship", "shared"]
        assert by_id["ship"].ordered_commands == ["project-ship"]
        assert by_id["shared"].name == "mine"
