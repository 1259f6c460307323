"""
Tests for the project model — aliases, derivations, workflows.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cleat.core.models import ModuleConfig, Project, Service, Workflow
from cleat.core.models.module import NpmModule, PythonModule
from cleat.core.models.project import slugify


class TestService:
    def test_aliases(self):
        svc = Service.model_validate({
            "name": "api",
            "dir": "backend",
            "docker": True,
            "dockerfile": "Dockerfile.dev",
            "image": "python:3.12",
            "command": "uv run manage.py runserver",
            "app_yaml": "backend/app.yaml",
        })
        assert svc.docker_explicit is True
        assert svc.dockerfile_hint == "Dockerfile.dev"
        assert svc.image_hint == "python:3.12"
        assert svc.command_hint.startswith("uv run")
        assert svc.app_descriptor_path == "backend/app.yaml"

    def test_root_and_default(self):
        assert Service(name="default").is_root
        assert Service(name="x", dir=".").is_root
        assert not Service(name="x", dir="web").is_root
        assert Service(name="default").is_default
        assert not Service(name="api").is_default

    def test_task_suffix(self):
        assert Service(name="default").task_suffix() == ""
        assert Service(name="api").task_suffix() == ":api"

    def test_module_lookup(self):
        svc = Service.model_validate({
            "name": "web",
            "modules": [{"npm": {"scripts": ["build"]}}, {"python": {"django": True}}],
        })
        assert svc.has_module("npm")
        assert svc.npm.declared_scripts == ["build"]
        assert svc.python.is_django_app is True
        assert svc.go is None
        assert not svc.has_module("ruby")

    def test_disabled_module(self):
        svc = Service(name="web", modules=[ModuleConfig(npm=NpmModule(enabled=False))])
        assert svc.module("npm") is not None
        assert svc.enabled_module("npm") is None

    def test_unknown_package_manager_rejected(self):
        with pytest.raises(ValidationError):
            PythonModule.model_validate({"package_manager": "conda"})


class TestWorkflow:
    def test_id_defaults_to_slug(self):
        wf = Workflow(name="Deploy All!", ordered_commands=["build"])
        assert wf.id == "deploy-all"

    def test_explicit_id_kept(self):
        wf = Workflow.model_validate({"id": "ship", "name": "Ship it", "commands": ["run"]})
        assert wf.id == "ship"
        assert wf.ordered_commands == ["run"]

    def test_empty_commands_rejected(self):
        with pytest.raises(ValidationError):
            Workflow(name="nothing", ordered_commands=[])

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Workflow(name="  ", ordered_commands=["build"])

    def test_slugify(self):
        assert slugify("  Build & Deploy  ") == "build-deploy"


class TestProject:
    def test_aliases(self):
        project = Project.model_validate({
            "docker": True,
            "envs": ["dev"],
            "google_cloud_platform": {"project_name": "p", "account": "me@example.com"},
            "terraform": {"dir": "infra"},
            "app_yaml": "app.yaml",
        })
        assert project.docker_enabled is True
        assert project.environment_names == ["dev"]
        assert project.cloud.project_id == "p"
        assert project.iac.effective_directory == "infra"
        assert project.app_descriptor_path == "app.yaml"

    def test_root_from_source_path(self, tmp_path: Path):
        project = Project(source_path=str(tmp_path / "cleat.yaml"))
        assert project.root == tmp_path

    def test_docker_effective(self):
        explicit = Service(name="db", docker_explicit=True)
        plain = Service(name="api")
        project = Project(services=[explicit, plain])
        assert not project.is_docker_effective()
        assert project.is_docker_effective(explicit)
        assert not project.is_docker_effective(plain)

    def test_uses_container_prefers_service_flag(self):
        local = Service(name="api", docker_explicit=False)
        inherited = Service(name="web")
        project = Project(docker_enabled=True, services=[local, inherited])
        assert not project.uses_container(local)
        assert project.uses_container(inherited)

    def test_workflow_by_id_or_name(self):
        wf = Workflow(id="ship", name="Ship it", ordered_commands=["build"])
        project = Project(workflows=[wf])
        assert project.workflow_by_key("ship") is wf
        assert project.workflow_by_key("Ship it") is wf
        assert project.workflow_by_key("nope") is None

    def test_first_service_with_module(self):
        project = Project(services=[
            Service(name="api"),
            Service(name="web", modules=[ModuleConfig(npm=NpmModule())]),
        ])
        assert project.first_service_with_module("npm").name == "web"
        assert project.any_service_has_module("npm")
        assert not project.any_service_has_module("go")

    def test_yaml_dict_uses_aliases_and_skips_runtime(self):
        project = Project(docker_enabled=True, inputs={"k": "v"}, source_path="/x/cleat.yaml")
        data = project.to_yaml_dict()
        assert data["docker"] is True
        assert "inputs" not in data
        assert "source_path" not in data
        assert "google_cloud_platform" not in data
