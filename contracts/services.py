"""
contracts/services.py

Services container + factory (DI-friendly).

Goals:
- Checks receive every external collaborator through one immutable bag:
    Services(runner=..., runtime=..., cloud_cli=..., credential_store=...)
- Tests build the bag from fakes; production builds it from settings:
    ServicesFactory(settings=settings).build()
- ECR clients are created lazily (only the login step needs one) and cached
  per region.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config

from contracts.interfaces import (
    CloudCliProtocol,
    CommandRunnerProtocol,
    ContainerRuntimeProtocol,
    CredentialStoreProtocol,
)
from infra.aws_config import build_sdk_config
from infra.config import Settings
from infra.pipeline_paths import PreflightPaths
from services.adapters import AwsCli, DockerRuntime
from services.credentials.store import LocalCredentialStore
from services.probes.subprocess_probe import SubprocessProbe


@dataclass(frozen=True)
class Services:
    """Bag of external collaborators injected into checks."""

    runner: CommandRunnerProtocol
    runtime: ContainerRuntimeProtocol
    cloud_cli: CloudCliProtocol
    credential_store: CredentialStoreProtocol


class ServicesFactory:
    """
    Creates the production Services bag.

    Usage:
      factory = ServicesFactory(settings=settings)
      services = factory.build()

    The boto3 session is created on first ECR use so that checks which never
    reach the login step do not touch the AWS credential chain.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        session: boto3.Session | None = None,
        sdk_config: Config | None = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._sdk_config = sdk_config or build_sdk_config(settings.aws)
        self._ecr_by_region: dict[str, Any] = {}

    def _client(self, service: str, *, region: str | None) -> Any:
        if self._session is None:
            self._session = boto3.Session()
        kwargs: dict[str, Any] = {}
        if region:
            kwargs["region_name"] = region
        if self._sdk_config is not None:
            kwargs["config"] = self._sdk_config
        return self._session.client(service, **kwargs)

    def ecr_client(self, region: str) -> Any:
        """Return a cached ECR client for ``region``."""
        reg = str(region or "").strip()
        if not reg:
            raise ValueError("region must be a non-empty string")
        cached = self._ecr_by_region.get(reg)
        if cached is None:
            cached = self._client("ecr", region=reg)
            self._ecr_by_region[reg] = cached
        return cached

    def build(self) -> Services:
        settings = self._settings
        runner = SubprocessProbe(paths=PreflightPaths.with_overrides(log_dir=settings.paths.log_dir))
        return Services(
            runner=runner,
            runtime=DockerRuntime(runner=runner, name=settings.tools.container_runtime),
            cloud_cli=AwsCli(
                runner=runner,
                ecr_client=self.ecr_client,
                name=settings.tools.cloud_cli,
                runtime_name=settings.tools.container_runtime,
            ),
            credential_store=LocalCredentialStore(settings.credentials.path),
        )
