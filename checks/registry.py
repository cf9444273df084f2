# checks/registry.py
"""
Fixed preflight step order.

Steps are not user-configurable; the order encodes dependencies (the version
check needs the CLI, the login needs credentials, the freshness check must
run last so a valid cache can end the run early).
"""

from __future__ import annotations

from checks.authentication import AuthConfiguredStep
from checks.base import PreflightStep
from checks.credentials import CredentialFreshnessStep
from checks.tools import CloudCliPresentStep, CloudCliVersionStep, ContainerRuntimePresentStep

_STEP_CLASSES: tuple[type[PreflightStep], ...] = (
    ContainerRuntimePresentStep,
    CloudCliPresentStep,
    CloudCliVersionStep,
    AuthConfiguredStep,
    CredentialFreshnessStep,
)


def build_steps() -> list[PreflightStep]:
    """Instantiate the steps in execution order."""
    return [klass() for klass in _STEP_CLASSES]


def list_step_ids() -> list[str]:
    """Step ids in execution order."""
    return [klass.step_id for klass in _STEP_CLASSES]
