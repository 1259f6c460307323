"""Ruby tasks — Rails commands (via ``bundle exec``) and ``bundle install``."""

from __future__ import annotations

from pathlib import Path

from cleat.core.engine.provider import Provider, find_service, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import Invocation, Task
from cleat.core.errors import ConfigError
from cleat.core.models.module import RubyModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.session import Session
from cleat.core.tasks.common import compose_run, scoped_name

RAILS_ACTIONS: dict[str, tuple[list[str], str]] = {
    "migrate": (["rails", "db:migrate"], "Run Rails migrations"),
    "console": (["rails", "console"], "Open a Rails console"),
    "server": (["rails", "server", "-b", "0.0.0.0"], "Start the Rails server"),
    "assets:precompile": (["rails", "assets:precompile"], "Precompile Rails assets"),
}
INSTALL = "install"
ACTIONS = (*RAILS_ACTIONS, INSTALL)


def _ruby(service: Service) -> RubyModule | None:
    module = service.enabled_module("ruby")
    return module if isinstance(module, RubyModule) else None


def is_rails_service(service: Service) -> bool:
    module = _ruby(service)
    return module is not None and module.is_rails


def ruby_argv(project: Project, service: Service, action: str) -> tuple[list[str], Path]:
    module = service.ruby
    if module is None:
        raise ConfigError(f"Service '{service.name}' has no ruby module")
    if action == INSTALL:
        args = ["bundle", "install"]
    else:
        args = list(RAILS_ACTIONS[action][0])
        if module.is_rails:
            args = ["bundle", "exec", *args]

    if module.rails_service_name and project.uses_container(service):
        return [*compose_run(module.rails_service_name), *args], project.root
    return args, project.service_path(service)


def ruby_task(action: str, service: Service) -> Task:
    description = "Run bundle install" if action == INSTALL else RAILS_ACTIONS[action][1]

    def materialize(s: Session) -> list[Invocation]:
        argv, cwd = ruby_argv(s.project, service, action)
        return [Invocation(argv, cwd, s.project.service_path(service))]

    deps = ["docker:build"] if action == "assets:precompile" else []
    return Task(
        name=scoped_name("ruby", action, service),
        description=f"{description} ({service.name})",
        materialize=materialize,
        dependencies=deps,
        guard=lambda _s: _ruby(service) is not None,
    )


def ruby_strategy(action: str, project: Project, service: Service | None = None) -> Strategy:
    targets = [service] if service is not None else [
        svc for svc in project.services if _ruby(svc) is not None
    ]
    name = f"ruby {action}" + (f":{service.name}" if service is not None else "")
    return Strategy(name, [ruby_task(action, svc) for svc in targets])


class RubyProvider(Provider):
    """``ruby <action>[:<service>]``."""

    @property
    def name(self) -> str:
        return "ruby"

    def can_handle(self, command: str) -> bool:
        return command.startswith("ruby ")

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len("ruby "):].strip(), ACTIONS)
        if parsed is None:
            return None
        action, target = parsed
        service = find_service(session.project, target, command) if target else None
        return ruby_strategy(action, session.project, service)
