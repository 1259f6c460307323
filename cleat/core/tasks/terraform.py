"""
Terraform tasks — init / plan / apply in the IaC directory.

With environment folders (``.iac/<env>/``) every command needs an
environment and runs inside that folder.
"""

from __future__ import annotations

from pathlib import Path

from cleat.core.engine.provider import Provider, split_action
from cleat.core.engine.strategy import Strategy
from cleat.core.engine.task import Invocation, Task
from cleat.core.errors import ConfigError, InvalidEnvironment
from cleat.core.models.project import Project
from cleat.core.session import Session

TERRAFORM = "terraform"

# command word -> (terraform subcommand, extra flags)
ACTIONS: dict[str, tuple[str, list[str]]] = {
    "init": ("init", []),
    "init-upgrade": ("init", ["-upgrade"]),
    "plan": ("plan", []),
    "apply": ("apply", []),
    "apply-refresh": ("apply", ["-refresh-only"]),
}


def working_dir(project: Project, env: str) -> Path:
    if project.iac is None:
        raise ConfigError("iac is not configured")
    base = project.root / project.iac.effective_directory
    if project.iac.uses_env_folders and env:
        return base / env
    return base


def terraform_task(action: str, env: str = "") -> Task:
    subcommand, flags = ACTIONS[action]

    def materialize(s: Session) -> list[Invocation]:
        return [Invocation([TERRAFORM, subcommand, *flags], working_dir(s.project, env))]

    description = f"Terraform {subcommand}" + (f" {' '.join(flags)}" if flags else "")
    if env:
        description += f" for {env}"

    return Task(
        name=f"terraform:{action}" + (f":{env}" if env else ""),
        description=description,
        materialize=materialize,
        dependencies=["cloud:activate"],
        guard=lambda s: s.project.iac is not None,
    )


def check_environment(project: Project, env: str) -> None:
    """Reject unknown environments, and a missing one when folders are per env.

    Raises:
        InvalidEnvironment
    """
    if env and env not in project.environment_names:
        raise InvalidEnvironment(env, project.environment_names)
    if not env and project.iac is not None and project.iac.uses_env_folders:
        raise InvalidEnvironment("", project.iac.env_names)


class TerraformProvider(Provider):
    """``terraform <action>[:<env>]``."""

    @property
    def name(self) -> str:
        return "terraform"

    def can_handle(self, command: str) -> bool:
        return command.startswith("terraform ")

    def get_strategy(self, command: str, session: Session) -> Strategy | None:
        parsed = split_action(command[len("terraform "):].strip(), tuple(ACTIONS))
        if parsed is None or session.project.iac is None:
            return None
        action, env = parsed
        check_environment(session.project, env)
        return Strategy(command, [terraform_task(action, env)])
