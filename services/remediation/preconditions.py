"""Precondition primitives for remediation actions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from contracts.outcomes import OsFamily
from services.remediation.base import ActionContext


@dataclass(frozen=True)
class PreconditionResult:
    """Deterministic precondition evaluation result."""

    ok: bool
    code: str = ""
    message: str = ""


class ActionPrecondition(ABC):
    """Contract for reusable remediation action preconditions."""

    code: str = "precondition_failed"

    def describe(self) -> str:
        """Return deterministic precondition description."""
        return self.__class__.__name__

    @abstractmethod
    def evaluate(self, ctx: ActionContext, payload: Mapping[str, Any]) -> PreconditionResult:
        """Evaluate one precondition for an action payload."""
        raise NotImplementedError


@dataclass(frozen=True)
class RequiredPayloadKeysPrecondition(ActionPrecondition):
    """Ensure required payload keys are present and non-empty."""

    required_keys: tuple[str, ...]
    code: str = "missing_payload_keys"

    def evaluate(self, ctx: ActionContext, payload: Mapping[str, Any]) -> PreconditionResult:
        """Validate payload contains all required keys."""
        _ = ctx
        missing: list[str] = []
        for key in self.required_keys:
            value = payload.get(key)
            if value is None:
                missing.append(key)
                continue
            if isinstance(value, str) and not value.strip():
                missing.append(key)
        if missing:
            return PreconditionResult(
                ok=False,
                code=self.code,
                message=f"missing required payload keys: {', '.join(sorted(missing))}",
            )
        return PreconditionResult(ok=True)


@dataclass(frozen=True)
class OsFamilyPrecondition(ActionPrecondition):
    """Ensure the action runs only on the OS families it supports."""

    allowed_families: tuple[OsFamily, ...]
    code: str = "os_family_not_supported"

    def evaluate(self, ctx: ActionContext, payload: Mapping[str, Any]) -> PreconditionResult:
        _ = payload
        if ctx.os_family in self.allowed_families:
            return PreconditionResult(ok=True)
        allowed = ", ".join(sorted(f.value for f in self.allowed_families))
        return PreconditionResult(
            ok=False,
            code=self.code,
            message=f"os family '{ctx.os_family.value}' is not supported; expected one of: {allowed}",
        )


@dataclass(frozen=True)
class InteractiveTerminalPrecondition(ActionPrecondition):
    """Ensure a terminal is attached before running an interactive flow."""

    code: str = "no_terminal"

    def evaluate(self, ctx: ActionContext, payload: Mapping[str, Any]) -> PreconditionResult:
        _ = payload
        if ctx.interactive:
            return PreconditionResult(ok=True)
        return PreconditionResult(
            ok=False,
            code=self.code,
            message="interactive remediation requires a terminal",
        )


@dataclass(frozen=True)
class CapabilityPrecondition(ActionPrecondition):
    """Ensure a declared capability (for example ``sudo``) was granted."""

    capability: str
    code: str = "capability_not_granted"

    def evaluate(self, ctx: ActionContext, payload: Mapping[str, Any]) -> PreconditionResult:
        _ = payload
        if self.capability in ctx.capabilities:
            return PreconditionResult(ok=True)
        return PreconditionResult(
            ok=False,
            code=self.code,
            message=f"capability '{self.capability}' is required but not granted",
        )


def evaluate_preconditions(
    *,
    preconditions: Sequence[ActionPrecondition],
    ctx: ActionContext,
    payload: Mapping[str, Any],
) -> PreconditionResult:
    """Evaluate preconditions deterministically and return first failure."""
    for precondition in preconditions:
        result = precondition.evaluate(ctx, payload)
        if not result.ok:
            return result
    return PreconditionResult(ok=True)
