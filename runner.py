"""
runner.py

Registry login preflight runner (checks -> one remediation each -> login).

Pipeline:
  docker present -> aws present -> aws version -> aws credentials
    -> cached docker credentials (fresh + pull/push probe)
      -> early exit (already valid) | docker login via ECR token

Configuration comes from the environment (see infra/config.py); flags below
override it for one run.

Log in (default):
python runner.py --registry 123456789012.dkr.ecr.eu-west-1.amazonaws.com --region eu-west-1

Only verify, never remediate or log in:
python runner.py --check --no-remediate
"""

from __future__ import annotations

import argparse
import os
import sys
import uuid
from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from checks.base import StepContext
from checks.registry import build_steps
from contracts.errors import ConfigurationError
from contracts.outcomes import EXIT_CONFIG, PipelineResult
from contracts.services import Services, ServicesFactory
from infra import host
from infra.config import Settings
from infra.logging_config import clear_run_context, set_run_context, setup_logging
from pipeline.engine import Pipeline
from services.remediation.audit import LoggingRemediationAuditSink
from services.remediation.executor import RemediationExecutor
from version import ENGINE_NAME, ENGINE_VERSION


def build_context(
    settings: Settings,
    *,
    services: Services | None = None,
    executor: RemediationExecutor | None = None,
    remediate: bool = True,
    env: Mapping[str, str] | None = None,
) -> StepContext:
    """Gather host facts once and freeze them with settings and services."""
    return StepContext(
        settings=settings,
        services=services or ServicesFactory(settings=settings).build(),
        executor=executor or RemediationExecutor(audit_sink=LoggingRemediationAuditSink()),
        os_family=host.detect_os_family(),
        current_uid=host.current_uid(),
        user=host.current_user(),
        interactive=host.is_interactive(),
        privileged=host.is_privileged(),
        remediate=remediate and settings.remediation.enabled,
        env=dict(os.environ if env is None else env),
    )


def run(
    settings: Settings,
    *,
    login: bool = True,
    ctx: StepContext | None = None,
    remediate: bool = True,
) -> PipelineResult:
    """Run the preflight pipeline once.

    Raises ConfigurationError when a login is requested without a registry.
    """
    if login and not settings.registry.host:
        raise ConfigurationError("registry host is not configured (set ECR_REGISTRY or --registry)")
    context = ctx or build_context(settings, remediate=remediate)
    return Pipeline(steps=build_steps(), ctx=context).run(login=login)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--registry", default=None, help="Registry host (or ECR_REGISTRY env var).")
    parser.add_argument("--region", default=None, help="Registry region (or AWS_DEFAULT_REGION env var).")
    parser.add_argument("--test-image", default=None, help="Image used for the pull/push probe.")
    parser.add_argument("--max-age", type=int, default=None, help="Max credential age in seconds.")
    parser.add_argument("--push", action="store_true", default=None, help="Also probe with a push.")
    parser.add_argument("--no-pull", action="store_true", help="Skip the pull probe.")
    parser.add_argument("--no-remediate", action="store_true", help="Report what would be remediated; change nothing.")
    parser.add_argument("--log-json", action="store_true", default=None, help="Emit JSON logs.")
    parser.add_argument("--log-level", default=None, help="DEBUG|INFO|WARNING|ERROR")


def settings_from_args(args: argparse.Namespace, *, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from env and apply flag overrides."""
    base = Settings.from_env(env=env)
    return base.with_overrides(
        registry={
            "host": args.registry,
            "region": args.region,
            "test_image": args.test_image,
            "push_enabled": True if args.push else None,
            "pull_enabled": False if args.no_pull else None,
        },
        credentials={"max_age_seconds": args.max_age},
        remediation={"enabled": False if args.no_remediate else None},
        logging={"level": args.log_level, "json_logs": args.log_json},
    )


def execute(args: argparse.Namespace, *, login: bool) -> int:
    """Shared body of the CLI commands: settings, logging, run, report."""
    try:
        settings = settings_from_args(args)
    except ValidationError as exc:
        print(f"ERROR: invalid configuration:\n{exc}", file=sys.stderr)
        return EXIT_CONFIG

    setup_logging(settings.logging)
    set_run_context(
        run_id=uuid.uuid4().hex[:12],
        engine=f"{ENGINE_NAME}/{ENGINE_VERSION}",
        registry=settings.registry.host,
    )
    try:
        result = run(settings, login=login)
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    finally:
        clear_run_context()

    if result.ok:
        print(f"OK: {result.message}")
    else:
        print(f"ERROR: {result.message}", file=sys.stderr)
    return result.exit_code


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Registry login preflight")
    add_common_arguments(parser)
    parser.add_argument("--check", action="store_true", help="Run the checks only; do not log in.")
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    return execute(args, login=not args.check)


if __name__ == "__main__":
    raise SystemExit(main())
