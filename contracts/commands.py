"""Value types for external command invocations."""

from __future__ import annotations

from dataclasses import dataclass, field

# Shell convention for "command not found".
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Exit status and merged stdout/stderr of one external command."""

    argv: tuple[str, ...]
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def display(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class LoginCommand:
    """Command produced by the cloud CLI to authenticate the container runtime.

    ``secret`` is fed on stdin and must never be logged.
    """

    argv: tuple[str, ...]
    secret: str = field(default="", repr=False)
    registry: str = ""
