"""Adapters for the external tools the preflight drives."""

from services.adapters.aws_cli import AwsCli
from services.adapters.docker_runtime import DockerRuntime

__all__ = ["AwsCli", "DockerRuntime"]
