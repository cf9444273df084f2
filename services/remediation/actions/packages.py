"""Install/upgrade remediations backed by the OS package managers."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any

from contracts.outcomes import OsFamily
from contracts.steps import STEP_CLOUD_CLI, STEP_CLOUD_CLI_VERSION, STEP_CONTAINER_RUNTIME
from services.remediation.actions._common import CommandAction
from services.remediation.base import ActionContext
from services.remediation.preconditions import OsFamilyPrecondition
from services.remediation.registry import register_action

_DARWIN = (OsFamily.DARWIN,)
_LINUX = (OsFamily.LINUX,)

# Resolve pip via the current interpreter so a venv without `pip` on PATH works.
_PIP = (sys.executable, "-m", "pip")


@register_action("install_docker")
class InstallDockerAction(CommandAction):
    """Install Docker Desktop through Homebrew."""

    action_type = "install_docker"
    step_ids = (STEP_CONTAINER_RUNTIME,)
    os_families = _DARWIN
    preconditions = (OsFamilyPrecondition(allowed_families=_DARWIN),)

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return ("brew", "install", "--cask", "docker")


@register_action("install_awscli")
class InstallAwsCliBrewAction(CommandAction):
    """Install the AWS CLI through Homebrew."""

    action_type = "install_awscli"
    step_ids = (STEP_CLOUD_CLI,)
    os_families = _DARWIN
    preconditions = (OsFamilyPrecondition(allowed_families=_DARWIN),)

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return ("brew", "install", "awscli")


@register_action("install_awscli_pip")
class InstallAwsCliPipAction(CommandAction):
    """Install the AWS CLI for the current user through pip."""

    action_type = "install_awscli_pip"
    step_ids = (STEP_CLOUD_CLI,)
    os_families = _LINUX
    preconditions = (OsFamilyPrecondition(allowed_families=_LINUX),)

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return (*_PIP, "install", "--user", "awscli")


@register_action("upgrade_awscli")
class UpgradeAwsCliBrewAction(CommandAction):
    """Upgrade the Homebrew-installed AWS CLI."""

    action_type = "upgrade_awscli"
    step_ids = (STEP_CLOUD_CLI_VERSION,)
    os_families = _DARWIN
    preconditions = (OsFamilyPrecondition(allowed_families=_DARWIN),)

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return ("brew", "upgrade", "awscli")


@register_action("upgrade_awscli_pip")
class UpgradeAwsCliPipAction(CommandAction):
    """Upgrade the pip-installed AWS CLI."""

    action_type = "upgrade_awscli_pip"
    step_ids = (STEP_CLOUD_CLI_VERSION,)
    os_families = _LINUX
    preconditions = (OsFamilyPrecondition(allowed_families=_LINUX),)

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return (*_PIP, "install", "--user", "--upgrade", "awscli")
