"""Pipeline components.

This package contains the step engine (ordered checks with one remediation
attempt each) and the terminal registry login action.
"""

from pipeline.engine import Pipeline
from pipeline.login import LoginAction

__all__ = ["LoginAction", "Pipeline"]
