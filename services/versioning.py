"""Dotted version parsing and comparison."""

from __future__ import annotations

import re
from itertools import zip_longest

from contracts.errors import ConfigurationError

Version = tuple[int, ...]

_LEADING_DIGITS = re.compile(r"^(\d+)")
_BANNER_VERSION = re.compile(r"(\d+(?:\.\d+)+)")


def parse_version(text: str) -> Version:
    """Parse ``"1.16.28"`` into ``(1, 16, 28)``.

    Each component's leading digits are used and a trailing suffix is ignored
    (``"28rc1"`` -> 28). Empty input or a component without leading digits
    raises :class:`ConfigurationError`.
    """
    raw = str(text or "").strip()
    if not raw:
        raise ConfigurationError("version string is empty")
    parts: list[int] = []
    for component in raw.split("."):
        match = _LEADING_DIGITS.match(component.strip())
        if match is None:
            raise ConfigurationError(f"malformed version string: {raw!r}")
        parts.append(int(match.group(1)))
    return tuple(parts)


def compare_versions(left: Version, right: Version) -> int:
    """Return -1, 0 or 1; the shorter operand is zero-padded."""
    for a, b in zip_longest(left, right, fillvalue=0):
        if a != b:
            return -1 if a < b else 1
    return 0


def is_at_least(actual: str | Version, required: str | Version) -> bool:
    """True iff ``actual >= required``."""
    left = parse_version(actual) if isinstance(actual, str) else tuple(actual)
    right = parse_version(required) if isinstance(required, str) else tuple(required)
    return compare_versions(left, right) >= 0


def extract_version(banner: str) -> str:
    """Pull the first dotted version out of a tool banner.

    ``"aws-cli/1.16.28 Python/3.7.0 Darwin/18.0.0"`` -> ``"1.16.28"``.
    """
    match = _BANNER_VERSION.search(str(banner or ""))
    if match is None:
        raise ConfigurationError(f"no version found in: {str(banner or '').strip()!r}")
    return match.group(1)
