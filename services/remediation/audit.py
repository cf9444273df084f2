"""Audit sink primitives for remediation attempts."""

from __future__ import annotations

import logging
from typing import NamedTuple, Protocol


class RemediationAuditEvent(NamedTuple):
    """Immutable remediation attempt audit event."""

    step_id: str
    action_type: str
    os_family: str
    dry_run: bool
    outcome: str
    message: str
    details: dict[str, str]


class RemediationAuditSink(Protocol):
    """Protocol for remediation audit event sinks."""

    def sink_name(self) -> str:
        """Return deterministic sink name for diagnostics."""

    def record_event(self, event: RemediationAuditEvent) -> None:
        """Record one remediation attempt."""


class NoopRemediationAuditSink:
    """No-op sink used when no audit destination is configured."""

    def sink_name(self) -> str:
        return "noop"

    def record_event(self, event: RemediationAuditEvent) -> None:
        _ = event


class LoggingRemediationAuditSink:
    """Sink that writes each attempt to the application log."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("remediation.audit")

    def sink_name(self) -> str:
        return "logging"

    def record_event(self, event: RemediationAuditEvent) -> None:
        self._logger.info(
            "remediation step=%s action=%s os=%s dry_run=%s outcome=%s: %s",
            event.step_id,
            event.action_type or "-",
            event.os_family,
            event.dry_run,
            event.outcome,
            event.message,
        )


class InMemoryRemediationAuditSink:
    """In-memory audit sink for deterministic unit tests."""

    def __init__(self) -> None:
        self._events: list[RemediationAuditEvent] = []

    def record_event(self, event: RemediationAuditEvent) -> None:
        """Store audit event in insertion order."""
        self._events.append(event)

    def sink_name(self) -> str:
        return "in_memory"

    def events(self) -> list[RemediationAuditEvent]:
        """Return a copy of recorded events."""
        return list(self._events)
