"""Terminal login action."""

from __future__ import annotations

import logging

from checks.base import StepContext
from contracts.errors import RemoteCommandFailure
from contracts.outcomes import Outcome, StepResult
from contracts.steps import STEP_LOGIN

logger = logging.getLogger(__name__)


class LoginAction:
    """Request a login command from the cloud CLI and run it.

    Either failure is fatal; the captured output is returned verbatim in the
    result's ``detail`` and persisted to the log directory.
    """

    step_id = STEP_LOGIN
    title = "registry login"

    def run(self, ctx: StepContext) -> StepResult:
        services = ctx.services
        region = ctx.settings.registry.region
        try:
            command = services.cloud_cli.get_login_command(region)
        except RemoteCommandFailure as exc:
            return StepResult(
                step_id=self.step_id,
                outcome=Outcome.failed(exc.message, error=exc.code),
                detail=exc.output,
            )

        logger.info("logging in to %s", command.registry or ctx.settings.registry.host)
        result = services.runtime.login(command)
        if result.ok:
            return StepResult(
                step_id=self.step_id,
                outcome=Outcome.passed(f"logged in to {command.registry or ctx.settings.registry.host}"),
                detail=result.output.strip(),
            )

        services.runner.persist(result, self.step_id)
        return StepResult(
            step_id=self.step_id,
            outcome=Outcome.failed(
                f"{services.runtime.name} login exited with {result.exit_code}",
                error=RemoteCommandFailure.code,
            ),
            detail=result.output,
        )
