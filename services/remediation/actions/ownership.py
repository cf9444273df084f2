"""Credential file ownership remediation.

Reassigning ownership needs root, so the action declares the ``sudo``
capability; it only runs when the operator granted it in configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.outcomes import OsFamily
from contracts.steps import STEP_CREDENTIAL_OWNERSHIP
from services.remediation.actions._common import CommandAction
from services.remediation.base import ActionContext
from services.remediation.preconditions import (
    CapabilityPrecondition,
    OsFamilyPrecondition,
    RequiredPayloadKeysPrecondition,
)
from services.remediation.registry import register_action

_FAMILIES = (OsFamily.DARWIN, OsFamily.LINUX)


@register_action("reclaim_credential_file")
class ReclaimCredentialFileAction(CommandAction):
    """``sudo chown <user> <path>`` on the credential file."""

    action_type = "reclaim_credential_file"
    step_ids = (STEP_CREDENTIAL_OWNERSHIP,)
    os_families = _FAMILIES
    preconditions = (
        OsFamilyPrecondition(allowed_families=_FAMILIES),
        RequiredPayloadKeysPrecondition(required_keys=("path", "user")),
        CapabilityPrecondition(capability="sudo"),
    )

    def validate_payload(self, payload: Mapping[str, Any]) -> None:
        path = str(payload.get("path") or "").strip()
        if path and not path.startswith("/"):
            raise ValueError("path must be absolute")

    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        user = str(payload.get("user") or "").strip()
        path = str(payload.get("path") or "").strip()
        return ("sudo", "chown", user, path)
