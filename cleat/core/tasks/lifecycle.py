"""
Lifecycle strategies — ``build`` and ``run`` across every service.

``build`` chains whatever each stack needs to produce artifacts;
``run`` starts the project, through compose when it is container-based.
"""

from __future__ import annotations

from cleat.core.engine.strategy import Strategy
from cleat.core.models.project import Project
from cleat.core.tasks.django import django_task, is_django_service
from cleat.core.tasks.docker import docker_task
from cleat.core.tasks.golang import go_task
from cleat.core.tasks.npm import npm_run_task
from cleat.core.tasks.ruby import is_rails_service, ruby_task


def build_strategy(project: Project) -> Strategy:
    strategy = Strategy("build", [docker_task("build")])

    for svc in project.services:
        npm = svc.enabled_module("npm")
        if npm is not None and "build" in svc.npm.declared_scripts:
            strategy.add(npm_run_task(svc, "build"))
    for svc in project.services:
        if svc.enabled_module("go") is not None:
            strategy.add(go_task("build", svc))
    for svc in project.services:
        if is_django_service(svc):
            strategy.add(django_task("collectstatic", svc))
    for svc in project.services:
        if is_rails_service(svc):
            strategy.add(ruby_task("assets:precompile", svc))
    return strategy


def is_containerful(project: Project) -> bool:
    return project.docker_enabled or any(
        svc.docker_explicit is True for svc in project.services
    )


def run_strategy(project: Project) -> Strategy:
    if is_containerful(project):
        return Strategy("run", [docker_task("up")])

    strategy = Strategy("run")
    for svc in project.services:
        if is_django_service(svc):
            strategy.add(django_task("runserver", svc))
    for svc in project.services:
        if svc.enabled_module("npm") is not None and "start" in svc.npm.declared_scripts:
            strategy.add(npm_run_task(svc, "start"))
    return strategy
