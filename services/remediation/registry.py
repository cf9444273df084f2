"""Registry and discovery for remediation action implementations.

Besides the ``action_type`` index, registration fills an explicit remediation
table keyed by ``(step_id, OsFamily)``. A missing cell means "unsupported".
"""

from __future__ import annotations

import importlib
import pkgutil
from collections.abc import Callable

from contracts.outcomes import OsFamily
from services.remediation.base import RemediationAction

ActionType = type[RemediationAction]

_ACTION_REGISTRY: dict[str, ActionType] = {}
_REMEDIATION_TABLE: dict[tuple[str, OsFamily], str] = {}


def register_action(action_type: str) -> Callable[[ActionType], ActionType]:
    """Register a remediation action class under an action_type key."""

    normalized = str(action_type or "").strip().lower()
    if not normalized:
        raise ValueError("action_type must be non-empty")

    def _decorator(klass: ActionType) -> ActionType:
        if normalized in _ACTION_REGISTRY:
            raise KeyError(f"Action already registered for '{normalized}'")
        cells = [(step_id, family) for step_id in klass.step_ids for family in klass.os_families]
        for cell in cells:
            if cell in _REMEDIATION_TABLE:
                raise KeyError(
                    f"Remediation for {cell[0]!r} on {cell[1].value!r} already "
                    f"registered as '{_REMEDIATION_TABLE[cell]}'"
                )
        _ACTION_REGISTRY[normalized] = klass
        for cell in cells:
            _REMEDIATION_TABLE[cell] = normalized
        return klass

    return _decorator


def list_action_types() -> list[str]:
    """Return registered action types in deterministic order."""
    return sorted(_ACTION_REGISTRY.keys())


def remediation_table() -> dict[tuple[str, OsFamily], str]:
    """Return a copy of the ``(step_id, os_family) -> action_type`` table."""
    return dict(_REMEDIATION_TABLE)


class ActionRegistry:
    """Action registry facade with discovery and instantiation helpers."""

    def discover(self, package_name: str = "services.remediation.actions") -> None:
        """Import all modules under the actions package."""
        package = importlib.import_module(package_name)
        package_path = getattr(package, "__path__", None)
        if package_path is None:
            return
        prefix = package.__name__ + "."
        for module_info in pkgutil.walk_packages(package_path, prefix):
            importlib.import_module(module_info.name)

    def list_types(self) -> list[str]:
        """Return registered action types."""
        return list_action_types()

    def get_class(self, action_type: str) -> ActionType | None:
        """Return registered action class for an action_type."""
        key = str(action_type or "").strip().lower()
        if not key:
            return None
        return _ACTION_REGISTRY.get(key)

    def lookup(self, step_id: str, os_family: OsFamily) -> str | None:
        """Return the action_type remediating ``step_id`` on ``os_family``."""
        return _REMEDIATION_TABLE.get((step_id, os_family))

    def create(self, action_type: str) -> RemediationAction:
        """Instantiate a registered action implementation."""
        klass = self.get_class(action_type)
        if klass is None:
            raise KeyError(f"Unknown action_type: {action_type!r}")
        return klass()
