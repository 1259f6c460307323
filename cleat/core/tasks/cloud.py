"""
Cloud tasks — gcloud configuration, login and App Engine deploys.

Every task targets the gcloud *configuration* named after the project id,
so switching between projects is ``cleat cloud activate`` away.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from cleat.core.engine.provider import Provider, find_service, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import InputRequirement, Invocation, Task
from cleat.core.errors import ConfigError
from cleat.core.models.project import CloudConfig, Project
from cleat.core.models.service import Service
from cleat.core.session import Session

GCLOUD = "gcloud"
CONSOLE_URL = "https://console.cloud.google.com/home/dashboard?project={project}"

ACCOUNT_KEY = "cloud:account"
IMPERSONATE_KEY = "cloud:impersonate-service-account"
VERSION_KEY = "cloud:version"
PROMOTE_VERSION_KEY = "cloud:promote_version"


def _cloud(session: Session) -> CloudConfig:
    cloud = session.project.cloud
    if cloud is None:
        raise ConfigError("google_cloud_platform is not configured")
    return cloud


def has_cloud(session: Session) -> bool:
    cloud = session.project.cloud
    return cloud is not None and bool(cloud.project_id)


def url_opener() -> str:
    return "open" if sys.platform == "darwin" else "xdg-open"


# ── Configuration & login ───────────────────────────────────────


def _activate_argv(project_id: str) -> list[str]:
    return [GCLOUD, "config", "configurations", "activate", project_id]


def activate_task() -> Task:
    def materialize(s: Session) -> list[Invocation]:
        cloud = _cloud(s)
        invs = [
            Invocation(_activate_argv(cloud.project_id), s.root),
            Invocation([GCLOUD, "config", "set", "project", cloud.project_id], s.root),
        ]
        if cloud.account:
            invs.append(Invocation([GCLOUD, "config", "set", "account", cloud.account], s.root))
        return invs

    return Task(
        name="cloud:activate",
        description="Activate the gcloud configuration for this project",
        materialize=materialize,
        guard=has_cloud,
    )


def init_task() -> Task:
    return Task(
        name="cloud:init",
        description="Create a gcloud configuration for this project",
        materialize=lambda s: [
            Invocation([GCLOUD, "config", "configurations", "create", _cloud(s).project_id], s.root)
        ],
        guard=has_cloud,
    )


def set_config_task() -> Task:
    def materialize(s: Session) -> list[Invocation]:
        cloud = _cloud(s)
        account = cloud.account or s.inputs.get(ACCOUNT_KEY, "")
        settings = [
            ("account", account),
            ("project", cloud.project_id),
            ("app/promote_by_default", "false"),
            ("billing/quota_project", cloud.project_id),
        ]
        return [
            Invocation([GCLOUD, "config", "set", key, value], s.root)
            for key, value in settings
        ]

    def needs(s: Session) -> list[InputRequirement]:
        if _cloud(s).account:
            return []
        return [InputRequirement(ACCOUNT_KEY, "Enter the Google account to use")]

    return Task(
        name="cloud:set-config",
        description="Set account, project and quota project in the gcloud configuration",
        materialize=materialize,
        guard=has_cloud,
        needs=needs,
    )


def adc_login_task() -> Task:
    def materialize(s: Session) -> list[Invocation]:
        project_id = _cloud(s).project_id
        steps = [
            _activate_argv(project_id),
            [GCLOUD, "auth", "application-default", "login", "--project", project_id],
            [GCLOUD, "auth", "login", "--project", project_id],
            [GCLOUD, "auth", "application-default", "set-quota-project", project_id],
        ]
        return [Invocation(argv, s.root) for argv in steps]

    return Task(
        name="cloud:adc-login",
        description="Log in and create application default credentials",
        materialize=materialize,
        guard=has_cloud,
    )


def adc_impersonate_login_task() -> Task:
    def materialize(s: Session) -> list[Invocation]:
        cloud = _cloud(s)
        account = cloud.impersonated_service_account or s.inputs.get(IMPERSONATE_KEY, "")
        impersonate = ["--impersonate-service-account", account, "--project", cloud.project_id]
        steps = [
            _activate_argv(cloud.project_id),
            [GCLOUD, "auth", "application-default", "login", *impersonate],
            [GCLOUD, "auth", "login", *impersonate],
        ]
        return [Invocation(argv, s.root) for argv in steps]

    def needs(s: Session) -> list[InputRequirement]:
        if _cloud(s).impersonated_service_account:
            return []
        return [InputRequirement(IMPERSONATE_KEY, "Enter the service account to impersonate")]

    return Task(
        name="cloud:adc-impersonate-login",
        description="Log in with application default credentials impersonating a service account",
        materialize=materialize,
        guard=has_cloud,
        needs=needs,
    )


def console_task() -> Task:
    return Task(
        name="cloud:console",
        description="Open the Google Cloud console for this project",
        materialize=lambda s: [
            Invocation([url_opener(), CONSOLE_URL.format(project=_cloud(s).project_id)], s.root)
        ],
        guard=has_cloud,
    )


# ── App Engine ──────────────────────────────────────────────────


def descriptor_for(project: Project, service: Service | None) -> str:
    if service is not None:
        return service.app_descriptor_path
    return project.app_descriptor_path


def deploy_task(service: Service | None = None) -> Task:
    suffix = f":{service.name}" if service is not None else ""

    def materialize(s: Session) -> list[Invocation]:
        argv = [GCLOUD, "app", "deploy", descriptor_for(s.project, service)]
        version = s.inputs.get(VERSION_KEY, "")
        if version:
            argv += ["--version", version]
        return [Invocation(argv, s.root)]

    return Task(
        name=f"cloud:app-engine-deploy{suffix}",
        description="Deploy to App Engine" + (f" ({service.name})" if service else ""),
        materialize=materialize,
        dependencies=["cloud:activate"],
        guard=lambda s: has_cloud(s) and bool(descriptor_for(s.project, service)),
        needs=lambda _s: [
            InputRequirement(VERSION_KEY, "Enter version name, or return to skip", optional=True)
        ],
    )


def promote_task(service: Service | None = None) -> Task:
    suffix = f":{service.name}" if service is not None else ""

    def materialize(s: Session) -> list[Invocation]:
        argv = [GCLOUD, "app", "versions", "migrate", s.inputs.get(PROMOTE_VERSION_KEY, "")]
        if service is not None:
            argv += ["--service", service.name]
        return [Invocation(argv, s.root)]

    return Task(
        name=f"cloud:app-engine-promote{suffix}",
        description="Promote an App Engine version" + (f" ({service.name})" if service else ""),
        materialize=materialize,
        dependencies=["cloud:activate"],
        guard=has_cloud,
        needs=lambda _s: [InputRequirement(PROMOTE_VERSION_KEY, "Enter the version to promote")],
    )


def app_engine_strategy(action: str, project: Project, service: Service | None = None) -> Strategy:
    make = deploy_task if action == "deploy" else promote_task
    name = f"cloud app-engine {action}" + (f":{service.name}" if service else "")
    if service is not None or action == "promote" or project.app_descriptor_path:
        return Strategy(name, [make(service)])
    # no root descriptor: one deploy per service that has its own
    return Strategy(name, [make(svc) for svc in project.services if svc.app_descriptor_path])


# Fixed-name cloud commands kept in the dispatcher registry
REGISTRY: dict[str, Callable[[], Task]] = {
    "cloud activate": activate_task,
    "cloud init": init_task,
    "cloud set-config": set_config_task,
    "cloud adc-login": adc_login_task,
    "cloud adc-impersonate-login": adc_impersonate_login_task,
    "cloud console": console_task,
}


class CloudProvider(Provider):
    """``cloud app-engine deploy[:<service>]`` and ``cloud app-engine promote[:<service>]``."""

    PREFIX = "cloud app-engine "

    @property
    def name(self) -> str:
        return "cloud"

    def can_handle(self, command: str) -> bool:
        return command.startswith(self.PREFIX)

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len(self.PREFIX):].strip(), ("deploy", "promote"))
        if parsed is None:
            return None
        action, target = parsed
        service = find_service(session.project, target, command) if target else None
        return app_engine_strategy(action, session.project, service)
