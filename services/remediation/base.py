"""Base contracts for remediation actions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from contracts.interfaces import CommandRunnerProtocol
from contracts.outcomes import OsFamily

if TYPE_CHECKING:
    from services.remediation.preconditions import ActionPrecondition


@dataclass(frozen=True)
class ActionContext:
    """Immutable runtime context for one remediation attempt."""

    step_id: str
    os_family: OsFamily
    runner: CommandRunnerProtocol
    interactive: bool = False
    capabilities: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ActionResult:
    """Normalized remediation action result."""

    ok: bool
    message: str = ""
    details: dict[str, str] = field(default_factory=dict)


class RemediationAction(ABC):
    """Abstract remediation action contract.

    ``step_ids`` and ``os_families`` place the action in the remediation
    table; one ``(step_id, os_family)`` cell holds at most one action.
    """

    action_type: str = ""
    step_ids: tuple[str, ...] = ()
    os_families: tuple[OsFamily, ...] = ()
    interactive: bool = False
    preconditions: tuple[ActionPrecondition, ...] = ()

    def validate_payload(self, payload: Mapping[str, Any]) -> None:
        """Validate action payload before dry-run/execute."""
        _ = payload

    @abstractmethod
    def dry_run(self, ctx: ActionContext, payload: Mapping[str, Any]) -> ActionResult:
        """Describe the intended action without running it."""
        raise NotImplementedError

    @abstractmethod
    def execute(self, ctx: ActionContext, payload: Mapping[str, Any]) -> ActionResult:
        """Run the action on the host."""
        raise NotImplementedError
