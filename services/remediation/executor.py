"""Remediation executor orchestration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.outcomes import Outcome
from services.remediation.audit import (
    NoopRemediationAuditSink,
    RemediationAuditEvent,
    RemediationAuditSink,
)
from services.remediation.base import ActionContext, ActionResult
from services.remediation.preconditions import evaluate_preconditions
from services.remediation.registry import ActionRegistry

NOT_ATTEMPTED = "not attempted"


class RemediationExecutor:
    """Resolve, validate, run and audit one remediation per call.

    The executor never loops: every ``apply`` runs at most one command.
    """

    def __init__(
        self,
        *,
        registry: ActionRegistry | None = None,
        audit_sink: RemediationAuditSink | None = None,
        auto_discover: bool = True,
    ) -> None:
        if registry is None:
            registry = ActionRegistry()
        if auto_discover:
            registry.discover()
        self._registry = registry
        self._audit_sink = audit_sink or NoopRemediationAuditSink()

    def apply(
        self,
        ctx: ActionContext,
        payload: Mapping[str, Any] | None = None,
        *,
        dry_run: bool = False,
    ) -> Outcome:
        """Apply the remediation registered for ``ctx.step_id`` on ``ctx.os_family``.

        Returns REMEDIATED on success, FAIL when the command failed, and
        UNKNOWN when nothing was attempted (no action, failed precondition,
        or dry-run).
        """
        data = dict(payload or {})
        action_type = self._registry.lookup(ctx.step_id, ctx.os_family)
        if action_type is None:
            outcome = Outcome.unknown(
                f"{NOT_ATTEMPTED}: no remediation for {ctx.step_id} on {ctx.os_family.value}"
            )
            return self._finalize(ctx, "", dry_run, outcome, {})

        action = self._registry.create(action_type)
        try:
            action.validate_payload(data)
        except ValueError as exc:
            outcome = Outcome.unknown(f"{NOT_ATTEMPTED}: {exc}")
            return self._finalize(ctx, action_type, dry_run, outcome, {})

        precondition = evaluate_preconditions(preconditions=action.preconditions, ctx=ctx, payload=data)
        if not precondition.ok:
            outcome = Outcome.unknown(f"{NOT_ATTEMPTED}: {precondition.message or precondition.code}")
            return self._finalize(ctx, action_type, dry_run, outcome, {"code": precondition.code})

        result: ActionResult
        try:
            if dry_run:
                result = action.dry_run(ctx, data)
            else:
                result = action.execute(ctx, data)
        except (ValueError, TypeError, KeyError, RuntimeError, OSError) as exc:
            result = ActionResult(ok=False, message=str(exc))

        if dry_run:
            outcome = Outcome.unknown(result.message)
        elif result.ok:
            outcome = Outcome.remediated(result.message)
        else:
            outcome = Outcome.failed(result.message)
        return self._finalize(ctx, action_type, dry_run, outcome, dict(result.details))

    def _finalize(
        self,
        ctx: ActionContext,
        action_type: str,
        dry_run: bool,
        outcome: Outcome,
        details: dict[str, str],
    ) -> Outcome:
        """Emit one deterministic audit event and return the outcome."""
        self._audit_sink.record_event(
            RemediationAuditEvent(
                step_id=ctx.step_id,
                action_type=action_type,
                os_family=ctx.os_family.value,
                dry_run=dry_run,
                outcome=outcome.kind.value,
                message=outcome.reason,
                details=details,
            )
        )
        return outcome
