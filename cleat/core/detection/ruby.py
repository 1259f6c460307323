"""Ruby detector — ``Gemfile`` marks a Ruby service; Rails is spotted by its layout."""

from __future__ import annotations

from pathlib import Path

from cleat.core.detection.base import attach_modules, ensure_root_service
from cleat.core.models.module import ModuleConfig, RubyModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service

MARKERS = ("Gemfile",)
RAILS_MARKERS = ("bin/rails", "config/application.rb")


def is_rails_app(directory: Path) -> bool:
    return any((directory / marker).exists() for marker in RAILS_MARKERS)


def detect(base_dir: Path, project: Project, services: list[Service] | None = None) -> None:
    if services is None:
        ensure_root_service(base_dir, project, MARKERS)
    attach_modules(
        base_dir,
        project,
        "ruby",
        MARKERS,
        lambda directory: ModuleConfig(ruby=RubyModule(is_rails=is_rails_app(directory))),
        services,
    )

    for svc in project.services if services is None else services:
        ruby = svc.ruby
        if ruby is not None and ruby.is_enabled() and not ruby.rails_service_name:
            ruby.rails_service_name = svc.name
