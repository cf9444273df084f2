"""Preflight pipeline: ordered steps, one remediation per failing step, login.

State machine::

    Start -> steps in order -> (EarlyValidExit | LoginAttempt) -> (Success | FatalAbort)

Every step is visited at most twice (initial check plus one re-check after a
successful remediation). No stage terminates the process; the caller maps
the returned :class:`PipelineResult` to an exit code.
"""

from __future__ import annotations

from collections.abc import Sequence

from checks.base import PreflightStep, StepContext
from contracts.errors import (
    ConfigurationError,
    CredentialFilePermission,
    PreflightError,
    PrivilegedExecutionError,
)
from contracts.outcomes import Outcome, PipelineResult, StageDecision, StepResult
from contracts.steps import STEP_PRIVILEGES
from infra.logging_config import StructuredLogger
from pipeline.login import LoginAction

logger = StructuredLogger(__name__)

# Failure classes no remediation can fix.
NON_REMEDIABLE_ERRORS = frozenset({ConfigurationError.code, CredentialFilePermission.code})


class Pipeline:
    """Run a fixed sequence of preflight steps followed by the login action."""

    def __init__(
        self,
        *,
        steps: Sequence[PreflightStep],
        ctx: StepContext,
        login: LoginAction | None = None,
    ) -> None:
        self._steps = tuple(steps)
        self._ctx = ctx
        self._login = login or LoginAction()

    def run(self, *, login: bool = True) -> PipelineResult:
        """Run every step; attempt login unless ``login`` is False."""
        ctx = self._ctx
        results: list[StepResult] = []

        if ctx.privileged:
            message = "refusing to run with elevated privileges; re-run as a regular user"
            results.append(StepResult(STEP_PRIVILEGES, Outcome.failed(message, error=PrivilegedExecutionError.code)))
            return self._finish(StageDecision.FATAL_ABORT, results, message)

        for step in self._steps:
            decision, message = self._run_step(step, results)
            if decision in (StageDecision.FATAL_ABORT, StageDecision.EARLY_SUCCESS):
                return self._finish(decision, results, message)

        if not login:
            return self._finish(StageDecision.SUCCESS, results, "preflight checks passed; login skipped")

        logger.info("step_started", step_id=self._login.step_id)
        login_result = self._login.run(ctx)
        results.append(login_result)
        self._log_result(login_result)
        if login_result.outcome.is_pass:
            return self._finish(StageDecision.SUCCESS, results, login_result.outcome.reason, login_attempted=True)
        message = _fatal_message(self._login.title, login_result.outcome, login_result.detail)
        return self._finish(StageDecision.FATAL_ABORT, results, message, login_attempted=True)

    def _run_step(self, step: PreflightStep, results: list[StepResult]) -> tuple[StageDecision, str]:
        logger.info("step_started", step_id=step.step_id)
        outcome, raised = self._check(step)

        if not outcome.is_fail:
            result = StepResult(step.step_id, outcome, detail=outcome.reason)
            results.append(result)
            self._log_result(result)
            if outcome.is_pass:
                return step.decision_on_pass, _pass_message(step, outcome)
            return StageDecision.CONTINUE, outcome.reason

        if raised or not step.remediable or outcome.error in NON_REMEDIABLE_ERRORS:
            result = StepResult(step.step_id, outcome, detail="no remediation possible")
            results.append(result)
            self._log_result(result)
            return StageDecision.FATAL_ABORT, _fatal_message(step.title, outcome)

        remediation = self._ctx.executor.apply(
            self._ctx.action_context(step.step_id),
            step.remediation_payload(self._ctx),
            dry_run=not self._ctx.remediate,
        )
        logger.info(
            "remediation_applied",
            step_id=step.step_id,
            outcome=remediation.kind.value,
            reason=remediation.reason,
        )
        if not remediation.is_remediated:
            result = StepResult(step.step_id, outcome, detail=remediation.reason)
            results.append(result)
            self._log_result(result)
            return StageDecision.FATAL_ABORT, _fatal_message(step.title, outcome, remediation.reason)

        recheck, _ = self._check(step)
        result = StepResult(step.step_id, recheck, detail=recheck.reason, attempts=2)
        results.append(result)
        self._log_result(result)
        if recheck.is_pass:
            return step.decision_on_pass, _pass_message(step, recheck)
        failure = recheck if recheck.is_fail else Outcome.failed(recheck.reason or "re-check did not pass")
        return StageDecision.FATAL_ABORT, _fatal_message(step.title, failure, "still failing after remediation")

    def _check(self, step: PreflightStep) -> tuple[Outcome, bool]:
        """Return the step outcome and whether the check raised a fatal error."""
        try:
            return step.check(self._ctx), False
        except PreflightError as exc:
            if not exc.fatal:
                return Outcome.unknown(str(exc), error=exc.code), False
            return Outcome.failed(str(exc), error=exc.code), True

    def _finish(
        self,
        decision: StageDecision,
        results: list[StepResult],
        message: str,
        *,
        login_attempted: bool = False,
    ) -> PipelineResult:
        result = PipelineResult(
            decision=decision,
            results=tuple(results),
            message=message,
            login_attempted=login_attempted,
        )
        logger.info(
            "pipeline_finished",
            decision=decision.value,
            steps=len(results),
            login_attempted=login_attempted,
        )
        return result

    @staticmethod
    def _log_result(result: StepResult) -> None:
        log = logger.warning if result.outcome.is_fail else logger.info
        log(
            "step_result",
            step_id=result.step_id,
            outcome=result.outcome.kind.value,
            attempts=result.attempts,
            reason=result.outcome.reason,
        )


def _pass_message(step: PreflightStep, outcome: Outcome) -> str:
    if step.decision_on_pass is StageDecision.EARLY_SUCCESS:
        return f"{step.title}: {outcome.reason}; login not needed"
    return outcome.reason


def _fatal_message(title: str, outcome: Outcome, detail: str = "") -> str:
    message = f"{title} failed: {outcome.reason}"
    if detail:
        message = f"{message}\n{detail.rstrip()}"
    return message
