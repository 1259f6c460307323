"""
Module models — the framework slices attached to a service.

A module says "this service is a Django app" or "this service has a
package.json". Each variant carries the settings its tasks need; the
``ModuleConfig`` wrapper is the tagged union as it appears in YAML:

    modules:
      - python: { django: true, package_manager: uv }
      - npm: { scripts: [build, start] }
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ModuleTag = Literal["python", "npm", "go", "ruby"]

MODULE_TAGS: tuple[str, ...] = ("python", "npm", "go", "ruby")

PACKAGE_MANAGERS: tuple[str, ...] = ("uv", "pip", "poetry")


class _Module(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # unset (None) counts as enabled
    enabled: bool | None = None

    def is_enabled(self) -> bool:
        return self.enabled is not False


class PythonModule(_Module):
    """Python / Django settings for a service."""

    is_django_app: bool = Field(default=False, alias="django")
    django_service_name: str = Field(default="", alias="django_service")
    package_manager: Literal["", "uv", "pip", "poetry"] = ""


class NpmModule(_Module):
    """Node package settings. ``declared_scripts`` mirrors package.json."""

    container_service_name: str = Field(default="", alias="service")
    declared_scripts: list[str] = Field(default_factory=list, alias="scripts")


class GoModule(_Module):
    container_service_name: str = Field(default="", alias="service")


class RubyModule(_Module):
    is_rails: bool = Field(default=False, alias="rails")
    rails_service_name: str = Field(default="", alias="rails_service")


class ModuleConfig(BaseModel):
    """One entry of a service's ``modules`` list.

    Exactly one member is expected to be set; ``tags`` reports which.
    """

    model_config = ConfigDict(populate_by_name=True)

    python: PythonModule | None = None
    npm: NpmModule | None = None
    go: GoModule | None = None
    ruby: RubyModule | None = None

    @property
    def tags(self) -> list[str]:
        return [tag for tag in MODULE_TAGS if getattr(self, tag) is not None]

    def get(self, tag: str) -> _Module | None:
        return getattr(self, tag, None)
