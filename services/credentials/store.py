"""Local filesystem view of the container runtime's credential file."""

from __future__ import annotations

import os
from pathlib import Path


class LocalCredentialStore:
    """Read-only metadata access to a credential file on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def owner_uid(self) -> int:
        return self.path.stat().st_uid

    def is_writable(self) -> bool:
        return os.access(self.path, os.W_OK)

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8", errors="replace")

    def mtime(self) -> float:
        return self.path.stat().st_mtime

    def ensure_parent(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
