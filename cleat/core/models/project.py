"""
Project model — the canonical description of a cleat project.

Built once by the loader (authored cleat.yaml + auto-detection) and then
treated as read-only, except for ``inputs`` which collects interactive
answers while a strategy runs.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cleat.core.models.service import Service

LATEST_VERSION = 1
SUPPORTED_VERSIONS: tuple[int, ...] = (1,)

DEFAULT_IAC_DIR = ".iac"


def slugify(text: str) -> str:
    """Lower-case ``text`` and collapse non-alphanumerics into dashes."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class CloudConfig(BaseModel):
    """Google Cloud settings (``google_cloud_platform:`` in YAML)."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(alias="project_name")
    account: str = ""
    impersonated_service_account: str = Field(default="", alias="impersonate_service_account")


class IacConfig(BaseModel):
    """Terraform settings (``terraform:`` in YAML)."""

    model_config = ConfigDict(populate_by_name=True)

    directory: str = Field(default="", alias="dir")
    uses_env_folders: bool = False
    env_names: list[str] = Field(default_factory=list, alias="envs")

    @property
    def effective_directory(self) -> str:
        return self.directory or DEFAULT_IAC_DIR


class Workflow(BaseModel):
    """A named, ordered list of other cleat commands."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    ordered_commands: list[str] = Field(alias="commands")

    @model_validator(mode="after")
    def _check(self) -> Workflow:
        if not self.name.strip():
            raise ValueError("workflow name must not be empty")
        if not self.ordered_commands:
            raise ValueError(f"workflow '{self.name}' has no commands")
        if not self.id:
            self.id = slugify(self.name)
        return self


class Project(BaseModel):
    """Root of the canonical model."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = LATEST_VERSION
    docker_enabled: bool = Field(default=False, alias="docker")
    cloud: CloudConfig | None = Field(default=None, alias="google_cloud_platform")
    iac: IacConfig | None = Field(default=None, alias="terraform")
    environment_names: list[str] = Field(default_factory=list, alias="envs")
    services: list[Service] = Field(default_factory=list)
    app_descriptor_path: str = Field(default="", alias="app_yaml")
    workflows: list[Workflow] = Field(default_factory=list)

    # Runtime only, never serialized
    inputs: dict[str, str] = Field(default_factory=dict, exclude=True)
    source_path: str = Field(default="", exclude=True)

    # ── Derivations ─────────────────────────────────────────────

    @property
    def root(self) -> Path:
        """Project root directory (parent of the declaration file)."""
        if self.source_path:
            return Path(self.source_path).parent
        return Path.cwd()

    def service_by_name(self, name: str) -> Service | None:
        for svc in self.services:
            if svc.name == name:
                return svc
        return None

    def first_service_with_module(self, tag: str) -> Service | None:
        for svc in self.services:
            if svc.enabled_module(tag) is not None:
                return svc
        return None

    def any_service_has_module(self, tag: str) -> bool:
        return self.first_service_with_module(tag) is not None

    def is_docker_effective(self, service: Service | None = None) -> bool:
        """True when the project, or the given service explicitly, uses containers."""
        if self.docker_enabled:
            return True
        return service is not None and service.docker_explicit is True

    def uses_container(self, service: Service) -> bool:
        """Whether commands for ``service`` are wrapped in ``docker compose run``."""
        if service.docker_explicit is not None:
            return service.docker_explicit
        return self.docker_enabled

    def service_path(self, service: Service) -> Path:
        """Absolute directory of a service."""
        if service.is_root:
            return self.root
        return self.root / service.dir

    def workflow_by_key(self, key: str) -> Workflow | None:
        """Find a workflow by id, then by exact name."""
        for wf in self.workflows:
            if wf.id == key:
                return wf
        for wf in self.workflows:
            if wf.name == key:
                return wf
        return None

    def to_yaml_dict(self) -> dict:
        """Serializable form using the YAML key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
