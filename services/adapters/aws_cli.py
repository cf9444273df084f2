"""Cloud CLI adapter: the ``aws`` executable plus the ECR token API."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError  # type: ignore[import-untyped]

from contracts.commands import LoginCommand
from contracts.errors import MissingDependency, RemoteCommandFailure
from contracts.interfaces import CommandRunnerProtocol

logger = logging.getLogger(__name__)

EcrClientFactory = Callable[[str], Any]


def _client_error_text(exc: ClientError) -> str:
    error = exc.response.get("Error") or {}
    code = str(error.get("Code") or "unknown_error")
    message = str(error.get("Message") or "").strip()
    return f"{code}: {message}" if message else code


class AwsCli:
    """Presence, version and stored-config queries go through the CLI;
    login tokens come from ECR ``GetAuthorizationToken``.
    """

    def __init__(
        self,
        *,
        runner: CommandRunnerProtocol,
        ecr_client: EcrClientFactory,
        name: str = "aws",
        runtime_name: str = "docker",
    ) -> None:
        self.name = name
        self._runner = runner
        self._ecr_client = ecr_client
        self._runtime_name = runtime_name

    def is_available(self) -> bool:
        return self._runner.which(self.name) is not None

    def version(self) -> str:
        """Return the raw ``aws --version`` banner (v1 prints it on stderr)."""
        result = self._runner.run((self.name, "--version"))
        if not result.ok:
            raise MissingDependency(f"`{result.display()}` exited with {result.exit_code}", output=result.output)
        return result.output.strip()

    def configure_get(self, key: str) -> str | None:
        result = self._runner.run((self.name, "configure", "get", key))
        value = result.output.strip()
        if not result.ok or not value:
            return None
        return value

    def get_login_command(self, region: str) -> LoginCommand:
        """Build ``docker login`` from a fresh ECR authorization token."""
        try:
            response = self._ecr_client(region).get_authorization_token()
        except ClientError as exc:
            raise RemoteCommandFailure(
                f"ecr get-authorization-token failed in {region}",
                output=_client_error_text(exc),
            ) from exc
        except BotoCoreError as exc:
            raise RemoteCommandFailure(
                f"ecr get-authorization-token failed in {region}",
                output=str(exc),
            ) from exc

        try:
            data = response["authorizationData"][0]
            decoded = base64.b64decode(data["authorizationToken"]).decode("utf-8")
            username, password = decoded.split(":", 1)
            endpoint = str(data["proxyEndpoint"])
        except (KeyError, IndexError, TypeError, ValueError, binascii.Error) as exc:
            raise RemoteCommandFailure(
                f"ecr returned malformed authorization data in {region}",
                output=str(exc),
            ) from exc

        logger.debug("received ECR token for %s", endpoint)
        return LoginCommand(
            argv=(self._runtime_name, "login", "--username", username, "--password-stdin", endpoint),
            secret=password,
            registry=endpoint,
        )
