"""
Tests for auto-detection — the detector chain and the stack heuristics.
"""

import json
import textwrap
from pathlib import Path

import pytest

from cleat.core.config.loader import load_project
from cleat.core.detection import compose, detect_all, environments, iac
from cleat.core.detection.heuristics import matches_stack, select_services
from cleat.core.detection.npm import package_dir, read_scripts
from cleat.core.errors import ConfigParseError
from cleat.core.models import Project, Service


def _package_json(directory: Path, scripts: dict[str, str]) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps({"name": "x", "scripts": scripts}))


# ── Environments ────────────────────────────────────────────────


class TestEnvironments:
    def test_env_files_become_environments(self, tmp_path: Path):
        envs = tmp_path / ".envs"
        envs.mkdir()
        (envs / "prod.env").write_text("")
        (envs / "dev.env").write_text("")
        (envs / "notes.txt").write_text("")
        project = Project()
        environments.detect(tmp_path, project)
        assert project.environment_names == ["dev", "prod"]

    def test_declared_envs_win(self, tmp_path: Path):
        (tmp_path / ".envs").mkdir()
        (tmp_path / ".envs" / "dev.env").write_text("")
        project = Project(environment_names=["staging"])
        environments.detect(tmp_path, project)
        assert project.environment_names == ["staging"]


# ── Compose ─────────────────────────────────────────────────────


class TestCompose:
    def _write(self, root: Path, content: str) -> None:
        (root / "docker-compose.yaml").write_text(textwrap.dedent(content))

    def test_enables_docker_and_adds_services(self, tmp_path: Path):
        self._write(tmp_path, """\
            services:
              api:
                build: ./backend/
                command: ["uv", "run", "manage.py", "runserver"]
              web:
                build:
                  context: frontend
                  dockerfile: Dockerfile.dev
              db:
                image: postgres:16
        """)
        project = Project()
        compose.detect(tmp_path, project)

        assert project.docker_enabled is True
        api, web, db = project.services
        assert (api.name, api.dir, api.docker_explicit) == ("api", "backend", True)
        assert api.command_hint == "uv run manage.py runserver"
        assert (web.dir, web.dockerfile_hint) == ("frontend", "Dockerfile.dev")
        assert (db.dir, db.image_hint) == ("", "postgres:16")

    def test_reconciles_declared_service(self, tmp_path: Path):
        self._write(tmp_path, """\
            services:
              api:
                build: backend
        """)
        project = Project(services=[Service(name="api", docker_explicit=False)])
        compose.detect(tmp_path, project)
        (api,) = project.services
        assert api.dir == "backend"
        assert api.docker_explicit is False

    def test_yml_variant(self, tmp_path: Path):
        (tmp_path / "docker-compose.yml").write_text("services: {}\n")
        project = Project()
        compose.detect(tmp_path, project)
        assert project.docker_enabled is True

    def test_invalid_yaml(self, tmp_path: Path):
        self._write(tmp_path, "services: [oops\n")
        with pytest.raises(ConfigParseError):
            compose.detect(tmp_path, Project())

    def test_no_compose_file(self, tmp_path: Path):
        project = Project()
        compose.detect(tmp_path, project)
        assert project.docker_enabled is False


# ── Framework detectors ─────────────────────────────────────────


class TestDjango:
    def test_root_manage_py_synthesizes_default(self, write_config, project_dir: Path):
        (project_dir / "manage.py").write_text("")
        (project_dir / "requirements.txt").write_text("django\n")
        project = load_project(write_config("version: 1\n"))
        (svc,) = project.services
        assert svc.name == "default"
        assert svc.python.is_django_app is True
        assert svc.python.django_service_name == "backend"
        assert svc.python.package_manager == "pip"

    def test_backend_manage_py(self, write_config, project_dir: Path):
        (project_dir / "backend").mkdir()
        (project_dir / "backend" / "manage.py").write_text("")
        project = load_project(write_config("""\
            services:
              - name: default
        """))
        assert project.services[0].python is not None

    def test_service_dir_and_package_manager(self, write_config, project_dir: Path):
        api = project_dir / "api"
        api.mkdir()
        (api / "manage.py").write_text("")
        (api / "uv.lock").write_text("")
        (project_dir / "requirements.txt").write_text("")
        project = load_project(write_config("""\
            services:
              - name: api
                dir: api
        """))
        python = project.service_by_name("api").python
        assert python.package_manager == "uv"
        assert python.django_service_name == "api"

    def test_declared_module_untouched(self, write_config, project_dir: Path):
        (project_dir / "manage.py").write_text("")
        project = load_project(write_config("""\
            services:
              - name: api
                dir: .
                modules:
                  - python: {django: false, django_service: web, package_manager: poetry}
        """))
        python = project.service_by_name("api").python
        assert python.is_django_app is False
        assert python.django_service_name == "web"
        assert python.package_manager == "poetry"


class TestRuby:
    def test_rails_detected(self, write_config, project_dir: Path):
        app = project_dir / "shop"
        (app / "bin").mkdir(parents=True)
        (app / "Gemfile").write_text("")
        (app / "bin" / "rails").write_text("")
        project = load_project(write_config("""\
            services:
              - name: shop
                dir: shop
        """))
        ruby = project.service_by_name("shop").ruby
        assert ruby.is_rails is True
        assert ruby.rails_service_name == "shop"

    def test_plain_ruby(self, write_config, project_dir: Path):
        (project_dir / "Gemfile").write_text("")
        project = load_project(write_config("version: 1\n"))
        assert project.services[0].ruby.is_rails is False


class TestNpm:
    def test_scripts_read_sorted(self, tmp_path: Path):
        _package_json(tmp_path, {"start": "vite", "build": "vite build"})
        assert read_scripts(tmp_path / "package.json") == ["build", "start"]

    def test_bad_package_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{not json")
        with pytest.raises(ConfigParseError):
            read_scripts(tmp_path / "package.json")

    def test_service_gets_module_and_scripts(self, write_config, project_dir: Path):
        _package_json(project_dir / "web", {"build": "x", "dev": "y"})
        project = load_project(write_config("""\
            services:
              - name: web
                dir: web
        """))
        npm = project.service_by_name("web").npm
        assert npm.declared_scripts == ["build", "dev"]
        assert npm.container_service_name == "web"

    def test_root_default_uses_node_service(self, write_config, project_dir: Path):
        _package_json(project_dir, {"build": "x"})
        project = load_project(write_config("version: 1\n"))
        (svc,) = project.services
        assert svc.npm.container_service_name == "backend-node"

    def test_root_service_named_after_subdir(self, write_config, project_dir: Path):
        _package_json(project_dir / "frontend", {"build": "x"})
        project = load_project(write_config("""\
            services:
              - name: frontend
        """))
        svc = project.service_by_name("frontend")
        assert svc.npm is not None
        assert package_dir(project.root, svc) == project.root / "frontend"

    def test_declared_scripts_kept(self, write_config, project_dir: Path):
        _package_json(project_dir / "web", {"build": "x", "lint": "y"})
        project = load_project(write_config("""\
            services:
              - name: web
                dir: web
                modules:
                  - npm: {scripts: [build]}
        """))
        assert project.service_by_name("web").npm.declared_scripts == ["build"]


class TestGo:
    def test_root_default(self, write_config, project_dir: Path):
        (project_dir / "go.mod").write_text("module example.com/x\n")
        project = load_project(write_config("version: 1\n"))
        (svc,) = project.services
        assert svc.go.container_service_name == "backend-go"

    def test_shared_dir_picks_matching_service(self, write_config, project_dir: Path):
        (project_dir / "go.mod").write_text("module x\n")
        project = load_project(write_config("""\
            services:
              - name: web-ui
                dir: .
              - name: api-server
                dir: .
        """))
        assert project.service_by_name("api-server").go is not None
        assert project.service_by_name("web-ui").go is None


# ── Cloud & IaC ─────────────────────────────────────────────────


class TestCloud:
    def test_descriptors(self, write_config, project_dir: Path):
        (project_dir / "app.yaml").write_text("runtime: python312\n")
        (project_dir / "worker").mkdir()
        (project_dir / "worker" / "app.yaml").write_text("")
        (project_dir / ".iac").mkdir()
        (project_dir / ".iac" / "app.yaml").write_text("")
        project = load_project(write_config("""\
            google_cloud_platform:
              project_name: p
        """))
        assert project.app_descriptor_path == "app.yaml"
        worker = project.service_by_name("worker")
        assert worker.app_descriptor_path == "worker/app.yaml"
        assert project.service_by_name(".iac") is None

    def test_skipped_without_cloud(self, write_config, project_dir: Path):
        (project_dir / "app.yaml").write_text("")
        project = load_project(write_config("version: 1\n"))
        assert project.app_descriptor_path == ""


class TestIac:
    def test_single_environment(self, tmp_path: Path):
        (tmp_path / ".iac").mkdir()
        (tmp_path / ".iac" / "main.tf").write_text("")
        project = Project()
        iac.detect(tmp_path, project)
        assert project.iac.directory == ".iac"
        assert project.iac.uses_env_folders is False

    def test_env_folders(self, tmp_path: Path):
        for env in ("prod", "staging"):
            (tmp_path / ".iac" / env / "modules").mkdir(parents=True)
            (tmp_path / ".iac" / env / "modules" / "x.tf").write_text("")
        (tmp_path / ".iac" / ".terraform").mkdir()
        (tmp_path / ".iac" / "empty").mkdir()
        project = Project()
        iac.detect(tmp_path, project)
        assert project.iac.uses_env_folders is True
        assert project.iac.env_names == ["prod", "staging"]
        assert project.environment_names == ["prod", "staging"]

    def test_nested_iac_dir(self, tmp_path: Path):
        (tmp_path / "infra" / ".iac").mkdir(parents=True)
        project = Project()
        iac.detect(tmp_path, project)
        assert project.iac.directory == "infra/.iac"

    def test_no_iac(self, tmp_path: Path):
        project = Project()
        iac.detect(tmp_path, project)
        assert project.iac is None


class TestChain:
    def test_idempotent(self, write_config, project_dir: Path):
        (project_dir / "docker-compose.yaml").write_text(textwrap.dedent("""\
            services:
              api:
                build: api
              web:
                build: web
        """))
        (project_dir / "api").mkdir()
        (project_dir / "api" / "manage.py").write_text("")
        _package_json(project_dir / "web", {"build": "x"})
        (project_dir / ".iac" / "dev").mkdir(parents=True)
        (project_dir / ".iac" / "dev" / "main.tf").write_text("")

        project = load_project(write_config("version: 1\n"))
        first = project.to_yaml_dict()
        detect_all(project.root, project)
        assert project.to_yaml_dict() == first

    def test_app_descriptor_services_get_modules(self, write_config, project_dir: Path):
        (project_dir / "web").mkdir()
        (project_dir / "web" / "app.yaml").write_text("runtime: nodejs20\n")
        _package_json(project_dir / "web", {"build": "vite build"})

        project = load_project(write_config("""\
            google_cloud_platform:
              project_name: p
        """))
        web = project.service_by_name("web")
        assert web.app_descriptor_path == "web/app.yaml"
        assert web.npm is not None
        assert web.npm.declared_scripts == ["build"]

        first = project.to_yaml_dict()
        detect_all(project.root, project)
        assert project.to_yaml_dict() == first


# ── Heuristics ──────────────────────────────────────────────────


class TestHeuristics:
    def test_dockerfile_wins(self, tmp_path: Path):
        (tmp_path / "Dockerfile").write_text("FROM node:20\nRUN npm ci\n")
        svc = Service(name="backend", dockerfile_hint="Dockerfile")
        assert matches_stack("python", svc, tmp_path) is False

    def test_default_dockerfile_read_without_hint(self, tmp_path: Path):
        (tmp_path / "Dockerfile").write_text("FROM python:3.12-slim\n")
        assert matches_stack("python", Service(name="frontend"), tmp_path) is True

    def test_build_dir_dockerfile_decides_shared_dir(self, write_config, project_dir: Path):
        app = project_dir / "app"
        app.mkdir()
        (app / "manage.py").write_text("")
        (app / "Dockerfile").write_text("FROM python:3.12\n")
        (app / "Dockerfile.node").write_text("FROM node:20\n")
        (project_dir / "docker-compose.yaml").write_text(textwrap.dedent("""\
            services:
              server:
                build: ./app
              bundler:
                build:
                  context: ./app
                  dockerfile: Dockerfile.node
        """))

        project = load_project(write_config("version: 1\n"))
        assert [s.name for s in project.services if s.python] == ["server"]

    def test_command_vote(self, tmp_path: Path):
        svc = Service(name="thing", command_hint="go run ./cmd/server")
        assert matches_stack("go", svc, tmp_path) is True

    def test_image_vote(self, tmp_path: Path):
        svc = Service(name="thing", image_hint="ruby:3.3")
        assert matches_stack("ruby", svc, tmp_path) is True

    def test_name_vote(self, tmp_path: Path):
        assert matches_stack("python", Service(name="django-api"), tmp_path)
        assert not matches_stack("python", Service(name="frontend"), tmp_path)

    def test_go_name_exemption(self, tmp_path: Path):
        assert matches_stack("go", Service(name="golang-node-bridge"), tmp_path)
        assert not matches_stack("go", Service(name="django"), tmp_path)

    def test_select_falls_back_to_all(self, tmp_path: Path):
        a, b = Service(name="alpha"), Service(name="beta")
        assert select_services("ruby", [a, b], tmp_path) == [a, b]

    def test_select_skips_declared(self, tmp_path: Path):
        declared = Service.model_validate({"name": "api", "modules": [{"python": {}}]})
        other = Service(name="worker")
        assert select_services("python", [declared, other], tmp_path) == [other]
