"""Tests for remediation executor, preconditions, and built-in actions."""

from __future__ import annotations

import sys

from contracts.outcomes import OsFamily
from contracts.steps import (
    STEP_AUTH_CONFIGURED,
    STEP_CLOUD_CLI,
    STEP_CLOUD_CLI_VERSION,
    STEP_CONTAINER_RUNTIME,
    STEP_CREDENTIAL_OWNERSHIP,
)
from services.remediation.audit import InMemoryRemediationAuditSink
from services.remediation.base import ActionContext
from services.remediation.executor import NOT_ATTEMPTED, RemediationExecutor
from tests.fakes import FakeRunner

_OWNERSHIP_PAYLOAD = {"path": "/home/dev/.docker/config.json", "user": "dev"}


def _ctx(
    step_id: str,
    *,
    runner: FakeRunner,
    os_family: OsFamily = OsFamily.DARWIN,
    interactive: bool = False,
    capabilities: frozenset[str] = frozenset(),
) -> ActionContext:
    return ActionContext(
        step_id=step_id,
        os_family=os_family,
        runner=runner,
        interactive=interactive,
        capabilities=capabilities,
    )


def _executor(sink: InMemoryRemediationAuditSink | None = None) -> RemediationExecutor:
    return RemediationExecutor(audit_sink=sink or InMemoryRemediationAuditSink())


def test_unsupported_step_is_not_attempted() -> None:
    runner = FakeRunner(executables=("brew",))
    sink = InMemoryRemediationAuditSink()

    outcome = _executor(sink).apply(_ctx(STEP_CONTAINER_RUNTIME, runner=runner, os_family=OsFamily.LINUX))

    assert outcome.is_unknown
    assert outcome.reason.startswith(NOT_ATTEMPTED)
    assert runner.calls == []
    [event] = sink.events()
    assert event.action_type == ""
    assert event.outcome == "unknown"


def test_install_docker_success_is_remediated() -> None:
    runner = FakeRunner(executables=("brew",))
    sink = InMemoryRemediationAuditSink()

    outcome = _executor(sink).apply(_ctx(STEP_CONTAINER_RUNTIME, runner=runner))

    assert outcome.is_remediated
    assert runner.calls == [("brew", "install", "--cask", "docker")]
    [event] = sink.events()
    assert event.action_type == "install_docker"
    assert event.outcome == "remediated"
    assert event.dry_run is False


def test_failed_command_is_fail_with_output_tail_and_log() -> None:
    runner = FakeRunner(executables=("brew",))
    runner.set_result(("brew", "install", "awscli"), 1, "Error: No available formula\n")

    outcome = _executor().apply(_ctx(STEP_CLOUD_CLI, runner=runner))

    assert outcome.is_fail
    assert "exited with 1" in outcome.reason
    assert "No available formula" in outcome.reason
    assert [name for name, _ in runner.persisted] == ["remediation.install_awscli"]


def test_linux_uses_pip_through_current_interpreter() -> None:
    runner = FakeRunner()

    outcome = _executor().apply(_ctx(STEP_CLOUD_CLI_VERSION, runner=runner, os_family=OsFamily.LINUX))

    assert outcome.is_remediated
    assert runner.calls == [(sys.executable, "-m", "pip", "install", "--user", "--upgrade", "awscli")]


def test_dry_run_previews_without_running() -> None:
    runner = FakeRunner(executables=("brew",))
    sink = InMemoryRemediationAuditSink()

    outcome = _executor(sink).apply(_ctx(STEP_CLOUD_CLI_VERSION, runner=runner), dry_run=True)

    assert outcome.is_unknown
    assert outcome.reason == "dry-run: would run brew upgrade awscli"
    assert runner.calls == []
    assert sink.events()[0].dry_run is True


def test_interactive_configure_requires_terminal() -> None:
    runner = FakeRunner(executables=("aws",))
    sink = InMemoryRemediationAuditSink()

    outcome = _executor(sink).apply(_ctx(STEP_AUTH_CONFIGURED, runner=runner), {"cli": "aws"})

    assert outcome.is_unknown
    assert "requires a terminal" in outcome.reason
    assert runner.calls == []
    assert sink.events()[0].details == {"code": "no_terminal"}


def test_interactive_configure_runs_attached_to_terminal() -> None:
    runner = FakeRunner(executables=("aws",))

    outcome = _executor().apply(_ctx(STEP_AUTH_CONFIGURED, runner=runner, interactive=True), {"cli": "aws"})

    assert outcome.is_remediated
    assert runner.interactive_calls == [("aws", "configure")]


def test_ownership_requires_sudo_capability() -> None:
    runner = FakeRunner(executables=("sudo",))

    outcome = _executor().apply(_ctx(STEP_CREDENTIAL_OWNERSHIP, runner=runner), _OWNERSHIP_PAYLOAD)

    assert outcome.is_unknown
    assert "capability 'sudo'" in outcome.reason
    assert runner.calls == []


def test_ownership_runs_chown_when_sudo_granted() -> None:
    runner = FakeRunner(executables=("sudo",))
    ctx = _ctx(STEP_CREDENTIAL_OWNERSHIP, runner=runner, capabilities=frozenset({"sudo"}))

    outcome = _executor().apply(ctx, _OWNERSHIP_PAYLOAD)

    assert outcome.is_remediated
    assert runner.calls == [("sudo", "chown", "dev", "/home/dev/.docker/config.json")]


def test_ownership_rejects_relative_path() -> None:
    runner = FakeRunner(executables=("sudo",))
    ctx = _ctx(STEP_CREDENTIAL_OWNERSHIP, runner=runner, capabilities=frozenset({"sudo"}))

    outcome = _executor().apply(ctx, {"path": "config.json", "user": "dev"})

    assert outcome.is_unknown
    assert "path must be absolute" in outcome.reason
    assert runner.calls == []


def test_ownership_missing_payload_keys() -> None:
    runner = FakeRunner(executables=("sudo",))
    ctx = _ctx(STEP_CREDENTIAL_OWNERSHIP, runner=runner, capabilities=frozenset({"sudo"}))

    outcome = _executor().apply(ctx, {"path": "/home/dev/.docker/config.json"})

    assert outcome.is_unknown
    assert "missing required payload keys: user" in outcome.reason


def test_one_command_and_one_audit_event_per_apply() -> None:
    runner = FakeRunner(executables=("brew",))
    runner.set_result(("brew", "install", "--cask", "docker"), 1, "")
    sink = InMemoryRemediationAuditSink()
    executor = _executor(sink)

    executor.apply(_ctx(STEP_CONTAINER_RUNTIME, runner=runner))

    assert len(runner.calls) == 1
    assert len(sink.events()) == 1
