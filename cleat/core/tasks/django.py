"""
Django tasks — manage.py commands for services with a Django module.

Commands run through the service's package manager (``uv run python``,
``poetry run python`` or plain ``python``). In a container project the
same command runs inside the Django compose service instead.
"""

from __future__ import annotations

from pathlib import Path

from cleat.core.engine.provider import Provider, find_service, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import Invocation, Task
from cleat.core.errors import ConfigError
from cleat.core.models.module import PythonModule
from cleat.core.models.project import Project
from cleat.core.models.service import Service
from cleat.core.session import Session
from cleat.core.tasks.common import compose_run, scoped_name

PYTHON_COMMANDS: dict[str, list[str]] = {
    "uv": ["uv", "run", "python"],
    "poetry": ["poetry", "run", "python"],
    "pip": ["python"],
}

DEV_USER = "dev"
CREATE_DEV_USER_SCRIPT = (
    "from django.contrib.auth import get_user_model; "
    "User = get_user_model(); "
    f"User.objects.filter(username='{DEV_USER}').exists() or "
    f"User.objects.create_superuser('{DEV_USER}', '{DEV_USER}@example.com', '{DEV_USER}')"
)
SECRET_KEY_SCRIPT = (
    "from django.core.management.utils import get_random_secret_key; "
    "print(get_random_secret_key())"
)

# action -> (arguments after `python`, description, dependencies)
ACTIONS: dict[str, tuple[list[str], str, list[str]]] = {
    "runserver": (["manage.py", "runserver"], "Run the Django development server", []),
    "migrate": (["manage.py", "migrate"], "Apply Django migrations", ["docker:build"]),
    "makemigrations": (
        ["manage.py", "makemigrations"], "Create Django migrations", ["docker:build"],
    ),
    "collectstatic": (
        ["manage.py", "collectstatic", "--noinput"],
        "Collect Django static files",
        ["docker:build", "npm:run:build"],
    ),
    "create-user-dev": (
        ["manage.py", "shell", "-c", CREATE_DEV_USER_SCRIPT],
        "Create a Django superuser (dev/dev) if missing",
        [],
    ),
    "gen-random-secret-key": (
        ["-c", SECRET_KEY_SCRIPT], "Print a random Django SECRET_KEY", [],
    ),
}


def python_command(module: PythonModule) -> list[str]:
    return list(PYTHON_COMMANDS.get(module.package_manager or "uv", PYTHON_COMMANDS["uv"]))


def manage_py(project: Project, service: Service) -> str:
    """Path of manage.py relative to the service directory."""
    directory = project.service_path(service)
    if not (directory / "manage.py").is_file() and (directory / "backend" / "manage.py").is_file():
        return "backend/manage.py"
    return "manage.py"


def django_argv(project: Project, service: Service, action: str) -> tuple[list[str], Path]:
    module = service.python
    if module is None:
        raise ConfigError(f"Service '{service.name}' has no python module")
    args, _, _ = ACTIONS[action]
    if args and args[0] == "manage.py":
        args = [manage_py(project, service), *args[1:]]

    if project.uses_container(service):
        return [*compose_run(module.django_service_name), *python_command(module), *args], project.root
    return [*python_command(module), *args], project.service_path(service)


def is_django_service(service: Service) -> bool:
    module = service.enabled_module("python")
    return isinstance(module, PythonModule) and module.is_django_app


def django_task(action: str, service: Service) -> Task:
    _, description, deps = ACTIONS[action]

    def materialize(s: Session) -> list[Invocation]:
        argv, cwd = django_argv(s.project, service, action)
        return [Invocation(argv, cwd, s.project.service_path(service))]

    return Task(
        name=scoped_name("django", action, service),
        description=f"{description} ({service.name})",
        materialize=materialize,
        dependencies=list(deps),
        guard=lambda _s: is_django_service(service),
    )


def django_strategy(action: str, project: Project, service: Service | None = None) -> Strategy:
    """One task for ``service``, or one per Django service of the project."""
    targets = [service] if service is not None else [
        svc for svc in project.services if is_django_service(svc)
    ]
    name = f"django {action}" + (f":{service.name}" if service is not None else "")
    return Strategy(name, [django_task(action, svc) for svc in targets])


class DjangoProvider(Provider):
    """``django <action>[:<service>]``."""

    @property
    def name(self) -> str:
        return "django"

    def can_handle(self, command: str) -> bool:
        return command.startswith("django ")

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len("django "):].strip(), tuple(ACTIONS))
        if parsed is None:
            return None
        action, target = parsed
        service = find_service(session.project, target, command) if target else None
        return django_strategy(action, session.project, service)
