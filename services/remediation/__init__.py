"""Remediation framework primitives.

This package contains:
- action contracts (`base.py`)
- registry/discovery and the (step, OS family) table (`registry.py`)
- built-in actions (`actions/`)
"""

from services.remediation.base import (
    ActionContext,
    ActionResult,
    RemediationAction,
)
from services.remediation.executor import RemediationExecutor
from services.remediation.preconditions import (
    ActionPrecondition,
    CapabilityPrecondition,
    InteractiveTerminalPrecondition,
    OsFamilyPrecondition,
    PreconditionResult,
    RequiredPayloadKeysPrecondition,
)
from services.remediation.registry import (
    ActionRegistry,
    list_action_types,
    register_action,
    remediation_table,
)

__all__ = [
    "ActionContext",
    "ActionResult",
    "RemediationAction",
    "PreconditionResult",
    "ActionPrecondition",
    "CapabilityPrecondition",
    "InteractiveTerminalPrecondition",
    "OsFamilyPrecondition",
    "RequiredPayloadKeysPrecondition",
    "ActionRegistry",
    "register_action",
    "list_action_types",
    "remediation_table",
    "RemediationExecutor",
]
