"""
Protocol definitions for dependency injection.

This module defines explicit interfaces (Protocols) for every external
collaborator of the preflight pipeline, enabling:
- Easy fakes in tests (see ``tests/fakes.py``)
- Clear contracts between checks and the tools they probe
- No ambient global lookups inside checks

Usage:
    from contracts.interfaces import CloudCliProtocol, ContainerRuntimeProtocol

    # In production, use services.adapters.AwsCli / DockerRuntime
    # In tests, use the fakes in tests/fakes.py
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from contracts.commands import CommandResult, LoginCommand

# -----------------------------------------------------------------------------
# Process execution
# -----------------------------------------------------------------------------

@runtime_checkable
class CommandRunnerProtocol(Protocol):
    """Protocol for running external commands."""

    def run(self, argv: Sequence[str], *, stdin: str | None = None,
            interactive: bool = False) -> CommandResult:
        """Run one command; never raises on non-zero exit."""
        ...

    def which(self, name: str) -> str | None:
        """Resolve an executable on PATH."""
        ...

    def persist(self, result: CommandResult, name: str) -> Path | None:
        """Write a failing command's output to the log artifact directory."""
        ...


# -----------------------------------------------------------------------------
# Tools
# -----------------------------------------------------------------------------

@runtime_checkable
class ContainerRuntimeProtocol(Protocol):
    """Protocol for container runtime interactions (docker)."""

    name: str

    def is_available(self) -> bool:
        """Return True when the runtime executable is installed."""
        ...

    def pull(self, reference: str) -> CommandResult:
        """Pull an image reference."""
        ...

    def push(self, reference: str) -> CommandResult:
        """Push an image reference."""
        ...

    def login(self, command: LoginCommand) -> CommandResult:
        """Execute a login command produced by the cloud CLI."""
        ...


@runtime_checkable
class CloudCliProtocol(Protocol):
    """Protocol for cloud CLI interactions (aws)."""

    name: str

    def is_available(self) -> bool:
        """Return True when the CLI executable is installed."""
        ...

    def version(self) -> str:
        """Return the raw version banner of the CLI."""
        ...

    def configure_get(self, key: str) -> str | None:
        """Return a stored configuration value, or None when unset."""
        ...

    def get_login_command(self, region: str) -> LoginCommand:
        """Request a registry login command for ``region``."""
        ...


# -----------------------------------------------------------------------------
# Credential store
# -----------------------------------------------------------------------------

@runtime_checkable
class CredentialStoreProtocol(Protocol):
    """Protocol for the container runtime's credential file."""

    path: Path

    def exists(self) -> bool:
        ...

    def owner_uid(self) -> int:
        ...

    def is_writable(self) -> bool:
        ...

    def read_text(self) -> str:
        ...

    def mtime(self) -> float:
        """Modification time in seconds since the epoch."""
        ...

    def ensure_parent(self) -> None:
        """Create the parent directory when missing."""
        ...


__all__ = [
    "CloudCliProtocol",
    "CommandRunnerProtocol",
    "ContainerRuntimeProtocol",
    "CredentialStoreProtocol",
]
