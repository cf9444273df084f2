"""Credential freshness and connectivity check (the idempotence fast path)."""

from __future__ import annotations

from checks.base import PreflightStep, StepContext
from contracts.outcomes import Outcome, StageDecision
from contracts.steps import STEP_CREDENTIAL_OWNERSHIP, STEP_CREDENTIALS
from services.credentials.freshness import CredentialFreshnessOracle
from services.probes.connectivity import ConnectivityProbe


def build_oracle(ctx: StepContext) -> CredentialFreshnessOracle:
    """Wire the oracle from settings, services and the remediation executor."""
    settings = ctx.settings
    store = ctx.services.credential_store

    def _reclaim() -> Outcome:
        return ctx.executor.apply(
            ctx.action_context(STEP_CREDENTIAL_OWNERSHIP),
            {"path": str(store.path), "user": ctx.user},
            dry_run=not ctx.remediate,
        )

    return CredentialFreshnessOracle(
        store=store,
        registry_host=settings.registry.host,
        max_age_seconds=settings.credentials.max_age_seconds,
        connectivity=ConnectivityProbe(runtime=ctx.services.runtime, runner=ctx.services.runner),
        test_image=settings.registry.probe_image(),
        do_pull=settings.registry.pull_enabled,
        do_push=settings.registry.push_enabled,
        current_uid=ctx.current_uid,
        reclaim=_reclaim,
        clock=ctx.clock,
    )


class CredentialFreshnessStep(PreflightStep):
    """PASS means cached credentials provably work and login is skipped.

    UNKNOWN sends the pipeline on to login; FAIL (ownership/permissions) is
    fatal because the login step could not update the file anyway.
    """

    step_id = STEP_CREDENTIALS
    title = "cached registry credentials"
    decision_on_pass = StageDecision.EARLY_SUCCESS
    remediable = False

    def check(self, ctx: StepContext) -> Outcome:
        return build_oracle(ctx).evaluate()
