"""Tests for the production services wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from contracts.interfaces import (
    CloudCliProtocol,
    CommandRunnerProtocol,
    ContainerRuntimeProtocol,
    CredentialStoreProtocol,
)
from contracts.services import ServicesFactory
from infra.aws_config import build_sdk_config
from infra.config import AWSConfig
from services.credentials.store import LocalCredentialStore
from tests.factories import make_settings


class _FakeSession:
    def __init__(self) -> None:
        self.clients: list[tuple[str, dict[str, Any]]] = []

    def client(self, service: str, **kwargs: Any) -> object:
        self.clients.append((service, kwargs))
        return object()


def test_build_returns_protocol_conforming_services(tmp_path: Path) -> None:
    settings = make_settings({"DOCKER_CONFIG_FILE": str(tmp_path / "config.json"), "PREFLIGHT_LOG_DIR": str(tmp_path)})

    services = ServicesFactory(settings=settings, session=_FakeSession()).build()

    assert isinstance(services.runner, CommandRunnerProtocol)
    assert isinstance(services.runtime, ContainerRuntimeProtocol)
    assert isinstance(services.cloud_cli, CloudCliProtocol)
    assert isinstance(services.credential_store, CredentialStoreProtocol)
    assert isinstance(services.credential_store, LocalCredentialStore)
    assert services.credential_store.path == tmp_path / "config.json"
    assert services.runtime.name == "docker"
    assert services.cloud_cli.name == "aws"


def test_build_does_not_create_aws_clients() -> None:
    session = _FakeSession()
    ServicesFactory(settings=make_settings(), session=session).build()
    assert session.clients == []


def test_ecr_client_is_cached_per_region() -> None:
    session = _FakeSession()
    factory = ServicesFactory(settings=make_settings(), session=session)

    first = factory.ecr_client("eu-west-1")
    assert factory.ecr_client("eu-west-1") is first
    factory.ecr_client("us-east-1")

    assert [(service, kwargs["region_name"]) for service, kwargs in session.clients] == [
        ("ecr", "eu-west-1"),
        ("ecr", "us-east-1"),
    ]
    assert "config" in session.clients[0][1]


def test_ecr_client_requires_region() -> None:
    with pytest.raises(ValueError):
        ServicesFactory(settings=make_settings(), session=_FakeSession()).ecr_client("  ")


def test_sdk_config_carries_retries_and_user_agent() -> None:
    config = build_sdk_config(AWSConfig(max_retries=4, timeout=30, connect_timeout=3))

    assert config.retries == {"max_attempts": 4, "mode": "adaptive"}
    assert config.connect_timeout == 3
    assert config.read_timeout == 30
    assert config.user_agent_extra.startswith("ecrpreflight/")
