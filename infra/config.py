"""Centralized application configuration with schema validation.

This module is intentionally compatibility-first:
- Supports legacy flat environment names (for example ``ECR_REGISTRY``).
- Supports nested names (for example ``REGISTRY__HOST``) for consistency.
- Optionally reads a local ``.env`` file before process env values.

Settings are built once per run and passed explicitly to every component.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_flag(value: object, default: bool) -> bool:
    if value is None or isinstance(value, bool):
        return default if value is None else value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return default


class RegistryConfig(BaseModel):
    """Target registry and connectivity probe settings."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="", description="Registry host, e.g. 123456789012.dkr.ecr.us-east-1.amazonaws.com")
    test_image: str = Field(default="", description="Image reference used for pull/push probes")
    region: str = Field(default="us-east-1")
    pull_enabled: bool = Field(default=True)
    push_enabled: bool = Field(default=False)

    @field_validator("host", "test_image", "region", mode="before")
    @classmethod
    def _normalize_text(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("pull_enabled", mode="before")
    @classmethod
    def _normalize_pull(cls, value: object) -> bool:
        return _parse_flag(value, True)

    @field_validator("push_enabled", mode="before")
    @classmethod
    def _normalize_push(cls, value: object) -> bool:
        return _parse_flag(value, False)

    def probe_image(self) -> str:
        """Return the configured test image, defaulting to ``<host>/preflight:latest``."""
        if self.test_image:
            return self.test_image
        if not self.host:
            return ""
        return f"{self.host}/preflight:latest"


class ToolsConfig(BaseModel):
    """Required external tools."""

    model_config = ConfigDict(frozen=True)

    container_runtime: str = Field(default="docker")
    cloud_cli: str = Field(default="aws")
    min_cli_version: str = Field(default="1.16.28")

    @field_validator("container_runtime", "cloud_cli", "min_cli_version", mode="before")
    @classmethod
    def _normalize_required_text(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("tool settings must be non-empty")
        return text


class CredentialConfig(BaseModel):
    """Credential file location and freshness threshold."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(default_factory=lambda: Path("~/.docker/config.json"))
    max_age_seconds: int = Field(default=43_200, ge=0)

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: object) -> Path:
        text = str(value or "").strip() or "~/.docker/config.json"
        return Path(os.path.expanduser(text))


class RemediationConfig(BaseModel):
    """Capabilities granted to remediation actions."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True)
    allow_sudo: bool = Field(default=False)

    @field_validator("enabled", mode="before")
    @classmethod
    def _normalize_enabled(cls, value: object) -> bool:
        return _parse_flag(value, True)

    @field_validator("allow_sudo", mode="before")
    @classmethod
    def _normalize_allow_sudo(cls, value: object) -> bool:
        return _parse_flag(value, False)

    def capabilities(self) -> frozenset[str]:
        """Return the declared capability names remediation may use."""
        granted: set[str] = set()
        if self.allow_sudo:
            granted.add("sudo")
        return frozenset(granted)


class AWSConfig(BaseModel):
    """AWS client defaults used by the SDK config factory."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=10, ge=1, le=25)
    timeout: int = Field(default=60, ge=1, le=300)
    connect_timeout: int = Field(default=5, ge=1, le=60)


class LoggingSettings(BaseModel):
    """Repository-wide logging settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    override_root_handlers: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        text = str(value or "").strip().upper()
        if text in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return text
        return "INFO"

    @field_validator("json_logs", "override_root_handlers", mode="before")
    @classmethod
    def _normalize_flags(cls, value: object) -> bool:
        return _parse_flag(value, False)


class PathsConfig(BaseModel):
    """Where failing command output is persisted."""

    model_config = ConfigDict(frozen=True)

    log_dir: Path = Field(default_factory=lambda: Path("~/.ecr-preflight/logs"))

    @field_validator("log_dir", mode="before")
    @classmethod
    def _expand_log_dir(cls, value: object) -> Path:
        text = str(value or "").strip() or "~/.ecr-preflight/logs"
        return Path(os.path.expanduser(text))


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    credentials: CredentialConfig = Field(default_factory=CredentialConfig)
    remediation: RemediationConfig = Field(default_factory=RemediationConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    @classmethod
    def from_env(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        env_file: str = ".env",
    ) -> Settings:
        """Build settings from `.env` then environment variables."""
        runtime_env = os.environ if env is None else env
        merged_env = _merge_env(_load_dotenv(Path(env_file)), runtime_env)
        payload = _build_payload(merged_env)
        return cls.model_validate(payload)

    def with_overrides(self, **sections: Mapping[str, Any]) -> Settings:
        """Return a validated copy with per-section field overrides.

        ``None`` values are ignored so CLI flags that were not given keep the
        env-derived value.
        """
        payload = self.model_dump()
        for section, values in sections.items():
            if section not in payload:
                raise KeyError(f"Unknown settings section: {section!r}")
            for key, value in values.items():
                if value is not None:
                    payload[section][key] = value
        return type(self).model_validate(payload)


def _load_dotenv(path: Path) -> dict[str, str]:
    """Parse a minimal `.env` file format."""
    if not path.exists() or not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        key_clean = key.strip()
        value = raw_value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key_clean:
            values[key_clean] = value
    return values


def _merge_env(dotenv_values: Mapping[str, str], runtime_env: Mapping[str, str]) -> dict[str, str]:
    """Return env map where process env overrides `.env` values."""
    merged = {str(k): str(v) for k, v in dotenv_values.items()}
    for key, value in runtime_env.items():
        merged[str(key)] = str(value)
    return merged


def _first_non_empty(env: Mapping[str, str], *keys: str) -> str | None:
    """Return the first non-empty value for the provided keys."""
    for key in keys:
        value = str(env.get(key, "")).strip()
        if value:
            return value
    return None


def _build_payload(env: Mapping[str, str]) -> dict[str, object]:
    """Build nested settings payload from env values."""
    registry = {
        "host": _first_non_empty(env, "REGISTRY__HOST", "ECR_REGISTRY"),
        "test_image": _first_non_empty(env, "REGISTRY__TEST_IMAGE", "ECR_TEST_IMAGE"),
        "region": _first_non_empty(env, "REGISTRY__REGION", "AWS_DEFAULT_REGION", "AWS_REGION"),
        "pull_enabled": _first_non_empty(env, "REGISTRY__PULL_ENABLED", "ECR_TEST_PULL"),
        "push_enabled": _first_non_empty(env, "REGISTRY__PUSH_ENABLED", "ECR_TEST_PUSH"),
    }
    tools = {
        "container_runtime": _first_non_empty(env, "TOOLS__CONTAINER_RUNTIME"),
        "cloud_cli": _first_non_empty(env, "TOOLS__CLOUD_CLI"),
        "min_cli_version": _first_non_empty(env, "TOOLS__MIN_CLI_VERSION", "AWS_CLI_MIN_VERSION"),
    }
    credentials = {
        "path": _first_non_empty(env, "CREDENTIALS__PATH", "DOCKER_CONFIG_FILE"),
        "max_age_seconds": _first_non_empty(env, "CREDENTIALS__MAX_AGE_SECONDS", "ECR_MAX_AUTH_AGE"),
    }
    remediation = {
        "enabled": _first_non_empty(env, "REMEDIATION__ENABLED", "PREFLIGHT_REMEDIATE"),
        "allow_sudo": _first_non_empty(env, "REMEDIATION__ALLOW_SUDO", "PREFLIGHT_ALLOW_SUDO"),
    }
    aws = {
        "max_retries": _first_non_empty(env, "AWS__MAX_RETRIES", "AWS_MAX_RETRIES"),
        "timeout": _first_non_empty(env, "AWS__TIMEOUT", "AWS_TIMEOUT"),
        "connect_timeout": _first_non_empty(env, "AWS__CONNECT_TIMEOUT", "AWS_CONNECT_TIMEOUT"),
    }
    logging_settings = {
        "level": _first_non_empty(env, "LOGGING__LEVEL", "PREFLIGHT_LOG_LEVEL"),
        "json_logs": _first_non_empty(env, "LOGGING__JSON_LOGS", "PREFLIGHT_LOG_JSON"),
        "override_root_handlers": _first_non_empty(
            env, "LOGGING__OVERRIDE_ROOT_HANDLERS", "PREFLIGHT_LOG_OVERRIDE"
        ),
    }
    paths = {
        "log_dir": _first_non_empty(env, "PATHS__LOG_DIR", "PREFLIGHT_LOG_DIR"),
    }
    return {
        "registry": {k: v for k, v in registry.items() if v is not None},
        "tools": {k: v for k, v in tools.items() if v is not None},
        "credentials": {k: v for k, v in credentials.items() if v is not None},
        "remediation": {k: v for k, v in remediation.items() if v is not None},
        "aws": {k: v for k, v in aws.items() if v is not None},
        "logging": {k: v for k, v in logging_settings.items() if v is not None},
        "paths": {k: v for k, v in paths.items() if v is not None},
    }


__all__ = [
    "AWSConfig",
    "CredentialConfig",
    "LoggingSettings",
    "PathsConfig",
    "RegistryConfig",
    "RemediationConfig",
    "Settings",
    "ToolsConfig",
    "ValidationError",
]
