"""Cloud credentials configured check."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from checks.base import PreflightStep, StepContext
from contracts.errors import NotAuthenticated
from contracts.outcomes import Outcome
from contracts.steps import STEP_AUTH_CONFIGURED

ACCESS_KEY_ENV = "AWS_ACCESS_KEY_ID"
ACCESS_KEY_CONFIG = "aws_access_key_id"


class AuthConfiguredStep(PreflightStep):
    """Credentials come from the environment first, else the CLI's stored config.

    The environment path skips the interactive ``aws configure`` flow
    entirely, which is what CI runners rely on.
    """

    step_id = STEP_AUTH_CONFIGURED
    title = "cloud credentials configured"

    def check(self, ctx: StepContext) -> Outcome:
        if str(ctx.env.get(ACCESS_KEY_ENV, "")).strip():
            return Outcome.passed(f"{ACCESS_KEY_ENV} set in environment")
        cli = ctx.services.cloud_cli
        if cli.configure_get(ACCESS_KEY_CONFIG):
            return Outcome.passed(f"{ACCESS_KEY_CONFIG} found in {cli.name} configuration")
        return Outcome.failed(
            f"no {ACCESS_KEY_ENV} in environment and no {ACCESS_KEY_CONFIG} in {cli.name} configuration",
            error=NotAuthenticated.code,
        )

    def remediation_payload(self, ctx: StepContext) -> Mapping[str, Any]:
        return {"cli": ctx.services.cloud_cli.name}
