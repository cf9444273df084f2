"""Contracts shared across the preflight.

The contracts package defines:
- outcome, step-result and pipeline-result value types
- the error taxonomy
- Protocol definitions for the external tools (dependency injection)
- stable step identifiers

Main exports:
- Outcome, OutcomeKind, StepResult, StageDecision, PipelineResult, OsFamily
- CommandResult, LoginCommand
- PreflightError and its subclasses

``contracts.services`` (the Services bag and its boto3-backed factory) is
imported explicitly by entry points to keep this package import-light.
"""

from contracts import commands, errors, outcomes

# Explicit re-exports to satisfy ruff F401
__all__ = [
    "CommandResult",
    "ConfigurationError",
    "LoginCommand",
    "OsFamily",
    "Outcome",
    "OutcomeKind",
    "PipelineResult",
    "PreflightError",
    "StageDecision",
    "StepResult",
]

# Re-export for convenience
CommandResult = commands.CommandResult
LoginCommand = commands.LoginCommand

Outcome = outcomes.Outcome
OutcomeKind = outcomes.OutcomeKind
OsFamily = outcomes.OsFamily
PipelineResult = outcomes.PipelineResult
StageDecision = outcomes.StageDecision
StepResult = outcomes.StepResult

PreflightError = errors.PreflightError
ConfigurationError = errors.ConfigurationError
