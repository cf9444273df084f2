"""Unit tests for dotted version parsing and comparison."""

from __future__ import annotations

import pytest

from contracts.errors import ConfigurationError
from services.versioning import compare_versions, extract_version, is_at_least, parse_version


@pytest.mark.parametrize(
    ("actual", "required", "expected"),
    [
        ("1.16.28", "1.16.28", True),
        ("1.16.29", "1.16.28", True),
        ("1.16.9", "1.16.28", False),
        ("1.9", "1.16.28", False),
        ("2.0", "1.16.28", True),
        ("1.16", "1.16.0", True),
        ("1.16.0", "1.16", True),
        ("1.16.28rc1", "1.16.28", True),
    ],
)
def test_is_at_least_examples(actual: str, required: str, expected: bool) -> None:
    assert is_at_least(actual, required) is expected


def test_components_compare_numerically_not_lexically() -> None:
    assert compare_versions(parse_version("1.10.0"), parse_version("1.9.9")) == 1
    assert compare_versions(parse_version("1.9.9"), parse_version("1.10.0")) == -1


def test_shorter_version_is_zero_padded() -> None:
    assert compare_versions((1, 16), (1, 16, 0, 0)) == 0


def test_parse_version_ignores_trailing_suffix() -> None:
    assert parse_version("2.13.5dev0") == (2, 13, 5)


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.x.3", "v1.2"])
def test_parse_version_rejects_malformed_input(text: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_version(text)


def test_is_at_least_accepts_tuples() -> None:
    assert is_at_least((1, 18, 69), (1, 16, 28)) is True


def test_extract_version_from_cli_banner() -> None:
    banner = "aws-cli/1.16.28 Python/3.7.0 Darwin/18.0.0 botocore/1.12.18"
    assert extract_version(banner) == "1.16.28"


def test_extract_version_raises_without_version() -> None:
    with pytest.raises(ConfigurationError):
        extract_version("command not found")
