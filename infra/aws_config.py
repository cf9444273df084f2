"""AWS SDK configuration for the registry login adapter.

The ECR adapter builds its client through :func:`build_sdk_config` to keep
retry and timeout tuning in one place.
"""

from botocore.config import Config

from infra.config import AWSConfig
from version import ENGINE_NAME, ENGINE_VERSION


def build_sdk_config(aws_cfg: AWSConfig) -> Config:
    """Return botocore client config for the given AWS settings."""
    return Config(
        retries={"max_attempts": int(aws_cfg.max_retries), "mode": "adaptive"},
        user_agent_extra=f"{ENGINE_NAME}/{ENGINE_VERSION}",
        connect_timeout=int(aws_cfg.connect_timeout),
        read_timeout=int(aws_cfg.timeout),
    )
