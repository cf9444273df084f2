"""Facts about the host the preflight runs on."""

from __future__ import annotations

import getpass
import os
import platform
import sys

from contracts.outcomes import OsFamily


def detect_os_family() -> OsFamily:
    return OsFamily.from_platform(platform.system())


def is_interactive() -> bool:
    """True when both stdin and stdout are attached to a terminal."""
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def current_uid() -> int:
    # Windows has no uid; -1 never matches a file owner.
    getuid = getattr(os, "getuid", None)
    return getuid() if getuid is not None else -1


def is_privileged() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return str(current_uid())
