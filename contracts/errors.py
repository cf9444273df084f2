"""Error taxonomy for preflight failures.

Checks and adapters raise these; the pipeline converts them into fatal step
results. ``code`` values double as ``Outcome.error`` tags.
"""

from __future__ import annotations


class PreflightError(Exception):
    """Base error for preflight failures."""

    code: str = "preflight_error"
    fatal: bool = True

    def __init__(self, message: str = "", *, output: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.output = output

    def __str__(self) -> str:
        if self.output:
            return f"{self.message}\n{self.output}"
        return self.message


class MissingDependency(PreflightError):
    """A required executable is not installed."""

    code = "missing_dependency"


class VersionTooOld(PreflightError):
    """An installed tool is below the configured minimum version."""

    code = "version_too_old"


class NotAuthenticated(PreflightError):
    """No cloud credentials are configured."""

    code = "not_authenticated"


class CredentialFilePermission(PreflightError):
    """The credential file cannot be owned or written by the current user."""

    code = "credential_file_permission"


class StaleCredentials(PreflightError):
    """Cached credentials are too old or unproven; a login is required."""

    code = "stale_credentials"
    fatal = False


class RemoteCommandFailure(PreflightError):
    """A remote/external command failed; ``output`` is surfaced verbatim."""

    code = "remote_command_failure"


class ConfigurationError(PreflightError):
    """Malformed configuration or environment values."""

    code = "configuration_error"


class PrivilegedExecutionError(PreflightError):
    """Refusal to run with elevated privileges."""

    code = "privileged_execution"


__all__ = [
    "ConfigurationError",
    "CredentialFilePermission",
    "MissingDependency",
    "NotAuthenticated",
    "PreflightError",
    "PrivilegedExecutionError",
    "RemoteCommandFailure",
    "StaleCredentials",
    "VersionTooOld",
]
