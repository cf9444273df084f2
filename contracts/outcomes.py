"""Outcome primitives shared by checks, remediation and the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from contracts.errors import ConfigurationError


class OutcomeKind(str, Enum):
    """Tag of one check or remediation outcome."""

    PASS = "pass"
    FAIL = "fail"
    REMEDIATED = "remediated"
    UNKNOWN = "unknown"


class StageDecision(str, Enum):
    """What the pipeline does after one stage.

    ``SUCCESS`` is only produced by the terminal login stage (or when the
    run stops before login on request).
    """

    EARLY_SUCCESS = "early_success"
    CONTINUE = "continue"
    FATAL_ABORT = "fatal_abort"
    SUCCESS = "success"


class OsFamily(str, Enum):
    """Operating system families remediation actions are scoped to."""

    DARWIN = "darwin"
    LINUX = "linux"
    OTHER = "other"

    @classmethod
    def from_platform(cls, system: str) -> OsFamily:
        """Map a ``platform.system()`` value to a family."""
        text = str(system or "").strip().lower()
        if text == "darwin":
            return cls.DARWIN
        if text == "linux":
            return cls.LINUX
        return cls.OTHER


@dataclass(frozen=True)
class Outcome:
    """Tagged check result.

    ``error`` carries the error taxonomy code (see :mod:`contracts.errors`)
    when the outcome maps to a known failure class.
    """

    kind: OutcomeKind
    reason: str = ""
    error: str = ""

    @classmethod
    def passed(cls, reason: str = "") -> Outcome:
        return cls(OutcomeKind.PASS, reason)

    @classmethod
    def failed(cls, reason: str, *, error: str = "") -> Outcome:
        return cls(OutcomeKind.FAIL, reason, error)

    @classmethod
    def remediated(cls, reason: str = "") -> Outcome:
        return cls(OutcomeKind.REMEDIATED, reason)

    @classmethod
    def unknown(cls, reason: str = "", *, error: str = "") -> Outcome:
        return cls(OutcomeKind.UNKNOWN, reason, error)

    @property
    def is_pass(self) -> bool:
        return self.kind is OutcomeKind.PASS

    @property
    def is_fail(self) -> bool:
        return self.kind is OutcomeKind.FAIL

    @property
    def is_remediated(self) -> bool:
        return self.kind is OutcomeKind.REMEDIATED

    @property
    def is_unknown(self) -> bool:
        return self.kind is OutcomeKind.UNKNOWN


@dataclass(frozen=True)
class StepResult:
    """Immutable record of one visited pipeline step."""

    step_id: str
    outcome: Outcome
    detail: str = ""
    attempts: int = 1


EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


@dataclass(frozen=True)
class PipelineResult:
    """Final result of one pipeline run."""

    decision: StageDecision
    results: tuple[StepResult, ...] = ()
    message: str = ""
    login_attempted: bool = False

    @property
    def ok(self) -> bool:
        return self.decision is not StageDecision.FATAL_ABORT

    @property
    def exit_code(self) -> int:
        """0 on success, 2 when a configuration error aborted the run, else 1."""
        if self.ok:
            return EXIT_OK
        if any(r.outcome.error == ConfigurationError.code for r in self.results):
            return EXIT_CONFIG
        return EXIT_FATAL

    def result_for(self, step_id: str) -> StepResult | None:
        """Return the last result recorded for ``step_id``."""
        for result in reversed(self.results):
            if result.step_id == step_id:
                return result
        return None
