"""Tests for the credential freshness decision tree and the local store."""

from __future__ import annotations

import itertools
import os
from pathlib import Path

import pytest

from contracts.errors import ConfigurationError, CredentialFilePermission
from contracts.outcomes import Outcome
from services.adapters import DockerRuntime
from services.credentials.freshness import (
    BRANCH_ABSENT,
    BRANCH_CONNECTIVITY,
    BRANCH_NO_ENTRY,
    BRANCH_NOT_OWNED,
    BRANCH_NOT_WRITABLE,
    BRANCH_STALE,
    CredentialFreshnessOracle,
)
from services.credentials.store import LocalCredentialStore
from services.probes.connectivity import ConnectivityProbe
from tests.factories import MAX_AGE, NOW, REGISTRY, UID, docker_config, fresh_store
from tests.fakes import FakeCredentialStore, FakeRunner

IMAGE = f"{REGISTRY}/preflight:latest"


def _oracle(store: FakeCredentialStore, runner: FakeRunner | None = None, **kwargs) -> CredentialFreshnessOracle:
    runner = runner or FakeRunner(executables=("docker",))
    defaults = {
        "store": store,
        "registry_host": REGISTRY,
        "max_age_seconds": MAX_AGE,
        "connectivity": ConnectivityProbe(runtime=DockerRuntime(runner=runner), runner=runner),
        "test_image": IMAGE,
        "current_uid": UID,
        "clock": lambda: NOW,
    }
    defaults.update(kwargs)
    return CredentialFreshnessOracle(**defaults)


def test_absent_file_creates_parent_and_needs_login() -> None:
    store = fresh_store(present=False)
    oracle = _oracle(store)

    outcome = oracle.evaluate()

    assert outcome.is_unknown
    assert "first login needed" in outcome.reason
    assert oracle.last_branch == BRANCH_ABSENT
    assert store.parent_created == 1


def test_fresh_file_with_working_pull_passes() -> None:
    oracle = _oracle(fresh_store())
    assert oracle.evaluate().is_pass
    assert oracle.last_branch == BRANCH_CONNECTIVITY


def test_age_exactly_max_is_fresh() -> None:
    oracle = _oracle(fresh_store(mtime=NOW - MAX_AGE))
    assert oracle.is_fresh()
    assert oracle.evaluate().is_pass


def test_age_one_second_under_max_probes_with_pull() -> None:
    runner = FakeRunner(executables=("docker",))
    oracle = _oracle(fresh_store(mtime=NOW - MAX_AGE + 1), runner)

    assert oracle.evaluate().is_pass
    assert oracle.last_branch == BRANCH_CONNECTIVITY
    assert runner.calls == [("docker", "pull", IMAGE)]


def test_age_is_read_once_per_evaluation() -> None:
    ticks = itertools.count(NOW, 10.0)
    oracle = _oracle(fresh_store(mtime=NOW - MAX_AGE), clock=lambda: next(ticks))

    assert oracle.evaluate().is_pass
    assert next(ticks) == NOW + 10.0


def test_age_one_second_over_max_is_stale() -> None:
    runner = FakeRunner(executables=("docker",))
    oracle = _oracle(fresh_store(mtime=NOW - MAX_AGE - 1), runner)

    outcome = oracle.evaluate()

    assert outcome.is_unknown
    assert outcome.reason.startswith("stale")
    assert oracle.last_branch == BRANCH_STALE
    assert runner.calls == []


def test_missing_registry_entry_needs_auth() -> None:
    oracle = _oracle(fresh_store(content=docker_config("999999999999.dkr.ecr.us-east-1.amazonaws.com")))

    outcome = oracle.evaluate()

    assert outcome.is_unknown
    assert "needs auth entry" in outcome.reason
    assert oracle.last_branch == BRANCH_NO_ENTRY


def test_not_writable_fails_with_permission_error() -> None:
    oracle = _oracle(fresh_store(writable=False))

    outcome = oracle.evaluate()

    assert outcome.is_fail
    assert outcome.error == CredentialFilePermission.code
    assert oracle.last_branch == BRANCH_NOT_WRITABLE


def test_not_writable_wins_over_fresh_timestamp() -> None:
    runner = FakeRunner(executables=("docker",))
    oracle = _oracle(fresh_store(writable=False, mtime=NOW), runner)

    assert oracle.evaluate().is_fail
    assert runner.calls == []


def test_foreign_owner_without_remediation_fails() -> None:
    oracle = _oracle(fresh_store(owner_uid=0))

    outcome = oracle.evaluate()

    assert outcome.is_fail
    assert outcome.error == CredentialFilePermission.code
    assert oracle.last_branch == BRANCH_NOT_OWNED


def test_foreign_owner_reclaimed_once_then_continues() -> None:
    store = fresh_store(owner_uid=0)
    attempts: list[int] = []

    def _reclaim() -> Outcome:
        attempts.append(1)
        store.uid = UID
        return Outcome.remediated("ran sudo chown")

    outcome = _oracle(store, reclaim=_reclaim).evaluate()

    assert outcome.is_pass
    assert attempts == [1]


def test_foreign_owner_reclaim_failure_is_fatal_after_one_attempt() -> None:
    attempts: list[int] = []

    def _reclaim() -> Outcome:
        attempts.append(1)
        return Outcome.failed("sudo chown exited with 1")

    outcome = _oracle(fresh_store(owner_uid=0), reclaim=_reclaim).evaluate()

    assert outcome.is_fail
    assert outcome.error == CredentialFilePermission.code
    assert "sudo chown exited with 1" in outcome.reason
    assert attempts == [1]


def test_fresh_file_with_failed_pull_is_unknown() -> None:
    runner = FakeRunner(executables=("docker",))
    runner.set_result(("docker", "pull", IMAGE), 1, "no basic auth credentials")

    outcome = _oracle(fresh_store(), runner).evaluate()

    assert outcome.is_unknown
    assert "stale despite fresh timestamp" in outcome.reason


def test_local_store_reports_real_file(tmp_path: Path) -> None:
    path = tmp_path / "docker" / "config.json"
    store = LocalCredentialStore(path)
    assert not store.exists()

    store.ensure_parent()
    assert path.parent.is_dir()

    path.write_text(docker_config(REGISTRY), encoding="utf-8")
    assert store.exists()
    assert REGISTRY in store.read_text()
    assert store.mtime() == pytest.approx(path.stat().st_mtime)
    assert store.is_writable()
    if hasattr(os, "getuid"):
        assert store.owner_uid() == os.getuid()


def test_parent_that_is_a_file_is_configuration_error(tmp_path: Path) -> None:
    (tmp_path / "docker").write_text("not a directory", encoding="utf-8")
    oracle = _oracle(LocalCredentialStore(tmp_path / "docker" / "config.json"))

    with pytest.raises(ConfigurationError, match="cannot read credential file"):
        oracle.evaluate()


def test_unreadable_file_is_configuration_error() -> None:
    class _UnreadableStore(FakeCredentialStore):
        def read_text(self) -> str:
            raise PermissionError(13, "Permission denied")

    with pytest.raises(ConfigurationError, match="Permission denied"):
        _oracle(_UnreadableStore(content=docker_config(REGISTRY), mtime=NOW)).evaluate()
