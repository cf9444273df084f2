"""Centralized logging configuration.

The CLI supports both human-friendly text logs and structured JSON logs (for
CI runners that ship logs somewhere). Setup does not replace root handlers
that a host application already configured unless asked to.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Mapping
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from infra.config import LoggingSettings

# Context that follows one preflight run through the system.
run_ctx: ContextVar[dict[str, Any] | None] = ContextVar("run_ctx", default=None)

_STANDARD_ATTRS = frozenset(
    {
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
        "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
        "relativeCreated", "thread", "threadName", "processName", "process", "taskName",
    }
)


def set_run_context(**kwargs: Any) -> None:
    """Set values included in all subsequent JSON log entries."""
    current = dict(run_ctx.get() or {})
    current.update(kwargs)
    run_ctx.set(current)


def clear_run_context() -> None:
    """Clear the run context (at the end of a run)."""
    run_ctx.set({})


def get_run_context() -> dict[str, Any]:
    """Get a copy of the current run context."""
    ctx = run_ctx.get()
    return dict(ctx) if ctx else {}


def _utc_iso8601() -> str:
    # Example: 2026-01-24T18:03:12.123Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """
    Safe JSON formatter:
      - Always outputs valid JSON (message escaped via json.dumps)
      - Merges ``extra={...}`` fields and the run context
      - Includes exception info when present
    """

    def __init__(self, *, extra_fields: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._extra_fields = dict(extra_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": _utc_iso8601(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in base:
                base[key] = value

        for key, value in self._extra_fields.items():
            base.setdefault(key, value)

        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)

        for key, value in get_run_context().items():
            base.setdefault(key, value)

        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """
    Human-friendly logs, but UTC timestamps.
    """
    converter = time.gmtime  # UTC

    def __init__(self) -> None:
        super().__init__("%(asctime)sZ | %(levelname)s | %(name)s | %(message)s")


class StructuredLogger:
    """
    Event-style logger; keyword fields travel as ``extra``.

    Usage:
        from infra.logging_config import StructuredLogger, set_run_context

        logger = StructuredLogger(__name__)
        set_run_context(run_id="...", registry="123.dkr.ecr.eu-west-1.amazonaws.com")
        logger.info("step_result", step_id="tools.cloud_cli", outcome="pass")

    Text logs render as ``step_result step_id=tools.cloud_cli outcome=pass``.
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        rendered = " ".join(f"{k}={v}" for k, v in kwargs.items())
        message = f"{event} {rendered}" if rendered else event
        self._logger.log(level, message, extra={"event": event, **kwargs})

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log(logging.INFO, event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, event, **kwargs)


def setup_logging(
    settings: LoggingSettings,
    *,
    level: str | None = None,
    json_logs: bool | None = None,
    extra_fields: Mapping[str, Any] | None = None,
) -> None:
    """
    Central logging setup for the CLI.

    Env vars (through :class:`infra.config.LoggingSettings`):
      - PREFLIGHT_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default INFO)
      - PREFLIGHT_LOG_JSON:  1/0 (default 0)
      - PREFLIGHT_LOG_OVERRIDE: 1/0 (default 0)
         If 1, replaces any pre-configured root handlers.
         If 0, only configures logging if root has no handlers.

    Logs go to stderr so stdout stays free for the final status line.
    """
    resolved_level = (level or settings.level).upper()
    use_json = settings.json_logs if json_logs is None else json_logs

    root = logging.getLogger()
    root.setLevel(getattr(logging, resolved_level, logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if use_json:
        handler.setFormatter(JsonFormatter(extra_fields=extra_fields))
    else:
        handler.setFormatter(TextFormatter())

    if settings.override_root_handlers:
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.addHandler(handler)
    elif not root.handlers:
        root.addHandler(handler)

    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
