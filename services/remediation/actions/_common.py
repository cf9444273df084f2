"""Shared helpers for remediation action implementations."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any

from services.remediation.base import ActionContext, ActionResult, RemediationAction

_TAIL_LINES = 20


def output_tail(output: str, lines: int = _TAIL_LINES) -> str:
    """Return the last ``lines`` lines of command output."""
    return "\n".join(str(output or "").strip().splitlines()[-lines:])


class CommandAction(RemediationAction):
    """Remediation that runs one fixed external command."""

    @abstractmethod
    def command(self, ctx: ActionContext, payload: Mapping[str, Any]) -> tuple[str, ...]:
        """Return the argv to run."""
        raise NotImplementedError

    def dry_run(self, ctx: ActionContext, payload: Mapping[str, Any]) -> ActionResult:
        """Return deterministic preview of the command."""
        argv = self.command(ctx, payload)
        return ActionResult(
            ok=True,
            message=f"dry-run: would run {' '.join(argv)}",
            details={"command": " ".join(argv)},
        )

    def execute(self, ctx: ActionContext, payload: Mapping[str, Any]) -> ActionResult:
        """Run the command once; zero exit is success."""
        argv = self.command(ctx, payload)
        result = ctx.runner.run(argv, interactive=self.interactive)
        details = {"command": result.display(), "exit_code": str(result.exit_code)}
        if result.ok:
            return ActionResult(ok=True, message=f"ran {result.display()}", details=details)
        log_path = ctx.runner.persist(result, f"remediation.{self.action_type}")
        if log_path is not None:
            details["log"] = str(log_path)
        message = f"{result.display()} exited with {result.exit_code}"
        tail = output_tail(result.output)
        if tail:
            message = f"{message}: {tail}"
        return ActionResult(ok=False, message=message, details=details)
