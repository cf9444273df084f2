"""Path conventions for preflight log artifacts.

All code that needs to know where failing command output lands should go
through :class:`infra.pipeline_paths.PreflightPaths`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _p(path: str | Path) -> Path:
    return path if isinstance(path, Path) else Path(str(path))


def safe_artifact_name(name: str) -> str:
    """Normalize a step/action name into a file-name-safe stem."""
    stem = _UNSAFE_CHARS.sub("_", str(name or "").strip()).strip("._")
    return stem or "command"


@dataclass(frozen=True)
class PreflightPaths:
    """
    Central path conventions for preflight artifacts.

    Rules:
      - CLI/config may override the *base directory*
      - File names and suffixes live here, not scattered in code
    """

    base_log_dir: Path = Path("logs")
    log_suffix: str = ".log"

    def __post_init__(self) -> None:
        if not isinstance(self.base_log_dir, Path):
            raise TypeError(f"base_log_dir must be a pathlib.Path (got {type(self.base_log_dir)})")
        if not self.log_suffix.startswith(".") or "/" in self.log_suffix or "\\" in self.log_suffix:
            raise ValueError(f"log_suffix must look like '.log': {self.log_suffix!r}")

    def log_dir(self) -> Path:
        return self.base_log_dir

    def failure_log(self, name: str) -> Path:
        """Path of the failing-output artifact for one step or action."""
        return self.base_log_dir / f"{safe_artifact_name(name)}{self.log_suffix}"

    @classmethod
    def with_overrides(cls, *, log_dir: str | Path | None = None) -> PreflightPaths:
        """Preferred way for runner/CLI to override locations without changing conventions."""
        if log_dir:
            return cls(base_log_dir=_p(log_dir))
        return cls()
