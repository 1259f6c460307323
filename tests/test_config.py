"""
Tests for the configuration loader — lookup, parsing, upgrade, invariants.
"""

import textwrap
from pathlib import Path

import pytest

from cleat.core.config.loader import (
    find_project_file,
    find_project_root,
    load_project,
    project_id,
    upgrade,
)
from cleat.core.errors import ConfigNotFound, ConfigParseError, UnsupportedVersion


class TestFindProjectFile:
    def test_finds_in_current_dir(self, tmp_path: Path):
        (tmp_path / "cleat.yaml").write_text("version: 1\n")
        assert find_project_file(tmp_path) == (tmp_path / "cleat.yaml").resolve()

    def test_finds_yml_variant(self, tmp_path: Path):
        (tmp_path / "cleat.yml").write_text("version: 1\n")
        assert find_project_file(tmp_path).name == "cleat.yml"

    def test_walks_up(self, tmp_path: Path):
        (tmp_path / "cleat.yaml").write_text("version: 1\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_file(nested) == (tmp_path / "cleat.yaml").resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_project_file(tmp_path) is None

    def test_root_falls_back_to_git(self, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        nested = tmp_path / "src"
        nested.mkdir()
        assert find_project_root(nested) == tmp_path.resolve()


class TestLoadProject:
    def test_minimal(self, write_config):
        project = load_project(write_config("version: 1\n"))
        assert project.version == 1
        assert project.services == []
        assert project.source_path.endswith("cleat.yaml")

    def test_absent_version_is_current(self, write_config):
        assert load_project(write_config("docker: false\n")).version == 1

    def test_version_zero_is_current(self, write_config):
        assert load_project(write_config("version: 0\n")).version == 1

    def test_unknown_version(self, write_config):
        with pytest.raises(UnsupportedVersion) as exc:
            load_project(write_config("version: 7\n"))
        assert exc.value.version == 7
        assert "unrecognized configuration version" in str(exc.value)

    def test_explicit_missing_path(self, tmp_path: Path):
        with pytest.raises(ConfigNotFound):
            load_project(tmp_path / "nope.yaml")

    def test_missing_file_soft_recovers(self, project_dir: Path, monkeypatch):
        (project_dir / "manage.py").write_text("")
        monkeypatch.chdir(project_dir)
        project = load_project()
        assert project.root == project_dir.resolve()
        assert [s.name for s in project.services] == ["default"]

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ConfigParseError):
            load_project(write_config("services: [unclosed\n"))

    def test_not_a_mapping(self, write_config):
        with pytest.raises(ConfigParseError):
            load_project(write_config("- a\n- b\n"))

    def test_validation_error_is_parse_error(self, write_config):
        with pytest.raises(ConfigParseError) as exc:
            load_project(write_config("services:\n  - dir: web\n"))
        assert "services" in exc.value.detail

    def test_empty_envs_rejected(self, write_config):
        with pytest.raises(ConfigParseError):
            load_project(write_config("envs: []\n"))

    def test_duplicate_service_names(self, write_config):
        with pytest.raises(ConfigParseError) as exc:
            load_project(write_config("""\
                services:
                  - name: api
                  - name: api
            """))
        assert "duplicate" in str(exc.value)

    def test_two_modules_of_same_tag(self, write_config):
        with pytest.raises(ConfigParseError):
            load_project(write_config("""\
                services:
                  - name: web
                    modules:
                      - npm: {}
                      - npm: {}
            """))

    def test_python_gets_django_service(self, write_config):
        project = load_project(write_config("""\
            services:
              - name: api
                dir: api
                modules:
                  - python: {django: true}
        """))
        assert project.services[0].python.django_service_name == "api"

    def test_terraform_envs_join_project_envs(self, write_config):
        project = load_project(write_config("""\
            envs: [dev]
            terraform:
              envs: [dev, prod]
        """))
        assert project.environment_names == ["dev", "prod"]

    def test_detection_can_be_skipped(self, write_config, project_dir: Path):
        (project_dir / "go.mod").write_text("module x\n")
        project = load_project(write_config("version: 1\n"), detect=False)
        assert project.services == []


class TestUpgrade:
    def test_lifts_legacy_modules(self):
        data = upgrade({"python": {"django": True}, "npm": None})
        assert "python" not in data
        (svc,) = data["services"]
        assert svc["name"] == "default"
        assert svc["dir"] == "."
        assert svc["modules"] == [{"python": {"django": True}}, {"npm": {}}]

    def test_merges_into_existing_default(self):
        data = upgrade({
            "go": {"service": "api"},
            "services": [{"name": "default", "modules": [{"npm": {}}]}],
        })
        assert data["services"][0]["modules"] == [{"npm": {}}, {"go": {"service": "api"}}]

    def test_legacy_file_loads(self, write_config):
        project = load_project(write_config("""\
            ruby:
              rails: true
        """))
        svc = project.service_by_name("default")
        assert svc.ruby.is_rails is True

    def test_rejects_non_integer_version(self):
        with pytest.raises(UnsupportedVersion):
            upgrade({"version": "one"})


class TestProjectId:
    def test_stable(self, tmp_path: Path):
        assert project_id(tmp_path) == project_id(tmp_path)

    def test_shape(self, tmp_path: Path):
        pid = project_id(tmp_path / "myapp")
        name, digest = pid.rsplit("-", 1)
        assert name == "myapp"
        assert len(digest) == 16

    def test_differs_by_path(self, tmp_path: Path):
        assert project_id(tmp_path / "a" / "app") != project_id(tmp_path / "b" / "app")

    def test_root_dir(self):
        assert project_id(Path("/")).startswith("root-")
