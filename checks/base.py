"""Preflight step contract and the context every step receives."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from contracts.outcomes import OsFamily, Outcome, StageDecision
from contracts.services import Services
from infra.config import Settings
from services.remediation.base import ActionContext
from services.remediation.executor import RemediationExecutor


@dataclass(frozen=True)
class StepContext:
    """Immutable run-wide inputs shared by all steps."""

    settings: Settings
    services: Services
    executor: RemediationExecutor
    os_family: OsFamily
    current_uid: int
    user: str
    interactive: bool = False
    privileged: bool = False
    remediate: bool = True
    env: Mapping[str, str] = field(default_factory=dict)
    clock: Callable[[], float] = time.time

    def action_context(self, step_id: str) -> ActionContext:
        """Context handed to the remediation executor for ``step_id``."""
        return ActionContext(
            step_id=step_id,
            os_family=self.os_family,
            runner=self.services.runner,
            interactive=self.interactive,
            capabilities=self.settings.remediation.capabilities(),
        )


class PreflightStep(ABC):
    """One named environment check.

    ``check`` may raise :class:`contracts.errors.PreflightError`; the pipeline
    turns that into a fatal result without trying remediation.
    """

    step_id: str = ""
    title: str = ""
    decision_on_pass: StageDecision = StageDecision.CONTINUE
    remediable: bool = True

    def remediation_payload(self, ctx: StepContext) -> Mapping[str, Any]:
        """Payload passed to the remediation action for this step."""
        _ = ctx
        return {}

    @abstractmethod
    def check(self, ctx: StepContext) -> Outcome:
        """Inspect the host and return PASS, FAIL or UNKNOWN."""
        raise NotImplementedError
