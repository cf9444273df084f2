"""Tool presence and version checks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from checks.base import PreflightStep, StepContext
from contracts.errors import MissingDependency, VersionTooOld
from contracts.outcomes import Outcome
from contracts.steps import STEP_CLOUD_CLI, STEP_CLOUD_CLI_VERSION, STEP_CONTAINER_RUNTIME
from services.versioning import extract_version, is_at_least, parse_version


class ContainerRuntimePresentStep(PreflightStep):
    step_id = STEP_CONTAINER_RUNTIME
    title = "container runtime installed"

    def check(self, ctx: StepContext) -> Outcome:
        runtime = ctx.services.runtime
        if runtime.is_available():
            return Outcome.passed(f"{runtime.name} found")
        return Outcome.failed(f"{runtime.name} not found on PATH", error=MissingDependency.code)


class CloudCliPresentStep(PreflightStep):
    step_id = STEP_CLOUD_CLI
    title = "cloud CLI installed"

    def check(self, ctx: StepContext) -> Outcome:
        cli = ctx.services.cloud_cli
        if cli.is_available():
            return Outcome.passed(f"{cli.name} found")
        return Outcome.failed(f"{cli.name} not found on PATH", error=MissingDependency.code)


class CloudCliVersionStep(PreflightStep):
    """Installed CLI must be at least ``tools.min_cli_version``."""

    step_id = STEP_CLOUD_CLI_VERSION
    title = "cloud CLI version"

    def check(self, ctx: StepContext) -> Outcome:
        required = parse_version(ctx.settings.tools.min_cli_version)
        installed = extract_version(ctx.services.cloud_cli.version())
        if is_at_least(installed, required):
            return Outcome.passed(f"{installed} >= {ctx.settings.tools.min_cli_version}")
        return Outcome.failed(
            f"{ctx.services.cloud_cli.name} {installed} is older than {ctx.settings.tools.min_cli_version}",
            error=VersionTooOld.code,
        )

    def remediation_payload(self, ctx: StepContext) -> Mapping[str, Any]:
        return {"cli": ctx.services.cloud_cli.name}
