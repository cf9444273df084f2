"""Built-in remediation actions.

Import modules here so registration works in static contexts.
"""

from services.remediation.actions import configure as _configure
from services.remediation.actions import ownership as _ownership
from services.remediation.actions import packages as _packages

__all__ = ["_configure", "_ownership", "_packages"]
