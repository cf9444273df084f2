"""Interactive cloud CLI configuration remediation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.outcomes import OsFamily
from contracts.steps import STEP_AUTH_CONFIGURED
from services.remediation.actions._common import CommandAction
from services.remediation.base import ActionContext
from services.remediation.preconditions import (
    InteractiveTerminalPrecondition,
    OsFamilyPrecondition,
)
from services.remediation.registry import register_action

_FAMILIES = (OsFamily.DARWIN, OsFamily.LINUX)


def _cli(payload: Mapping[str, Any]) -> str:
    return str(payload.get("cli") or "aws").strip()


@register_action("configure_awscli")
class ConfigureAwsCliAction(CommandAction):
    """Run ``aws configure`` attached to the user's terminal."""

    action_type = "configure_awscli"
    step_ids = (STEP_AUTH_CONFIGURED,)
    os_families = _FAMILIES
    interactive = True
    preconditions = (
        OsFamilyPrecondition(allowed_families=_FAMILIES),
        InteractiveTerminalPrecondition(),
    )

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        return (_cli(payload), "configure")
