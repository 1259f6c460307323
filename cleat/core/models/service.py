"""
Service model — a named runnable unit of the project (usually a directory).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cleat.core.models.module import (
    GoModule,
    ModuleConfig,
    NpmModule,
    PythonModule,
    RubyModule,
    _Module,
)

DEFAULT_SERVICE = "default"


class Service(BaseModel):
    """A service declared in cleat.yaml or synthesized by a detector.

    ``dir`` is relative to the project root; ``""`` and ``"."`` both mean
    the root. The ``*_hint`` fields are only read by auto-detection.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    dir: str = ""
    docker_explicit: bool | None = Field(default=None, alias="docker")
    dockerfile_hint: str = Field(default="", alias="dockerfile")
    image_hint: str = Field(default="", alias="image")
    command_hint: str = Field(default="", alias="command")
    modules: list[ModuleConfig] = Field(default_factory=list)
    app_descriptor_path: str = Field(default="", alias="app_yaml")

    @property
    def is_root(self) -> bool:
        return self.dir in ("", ".")

    @property
    def is_default(self) -> bool:
        return self.name in (DEFAULT_SERVICE, "")

    def module(self, tag: str) -> _Module | None:
        """Return the first module of the given tag, or None."""
        for mod in self.modules:
            found = mod.get(tag)
            if found is not None:
                return found
        return None

    def has_module(self, tag: str) -> bool:
        return self.module(tag) is not None

    def enabled_module(self, tag: str) -> _Module | None:
        """Like ``module`` but ignores modules switched off with ``enabled: false``."""
        mod = self.module(tag)
        if mod is not None and mod.is_enabled():
            return mod
        return None

    @property
    def python(self) -> PythonModule | None:
        return self.module("python")  # type: ignore[return-value]

    @property
    def npm(self) -> NpmModule | None:
        return self.module("npm")  # type: ignore[return-value]

    @property
    def go(self) -> GoModule | None:
        return self.module("go")  # type: ignore[return-value]

    @property
    def ruby(self) -> RubyModule | None:
        return self.module("ruby")  # type: ignore[return-value]

    def task_suffix(self) -> str:
        """Suffix appended to task names (``""`` for the default service)."""
        return "" if self.is_default else f":{self.name}"
