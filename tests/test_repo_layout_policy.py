"""Tests for repository layout policy enforcement."""

from __future__ import annotations

from pathlib import Path

from tools.repo.check_layout import list_unexpected_root_entries, main


def test_layout_policy_passes_for_current_repo() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    assert list_unexpected_root_entries(repo_root) == []


def test_layout_policy_detects_unexpected_entry(tmp_path: Path) -> None:
    # Minimal policy-compliant root subset for this isolated test.
    (tmp_path / "checks").mkdir()
    (tmp_path / "services").mkdir()
    (tmp_path / "tests").mkdir()
    (tmp_path / "cli.py").write_text("x", encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text("x", encoding="utf-8")
    (tmp_path / "ecr_preflight.egg-info").mkdir()
    (tmp_path / "NOTES.md").write_text("x", encoding="utf-8")
    (tmp_path / "changes.patch").write_text("x", encoding="utf-8")

    # Introduce a policy violation.
    (tmp_path / "random_script.py").write_text("x", encoding="utf-8")

    violations = list_unexpected_root_entries(tmp_path)
    assert violations == ["random_script.py"]


def test_main_reports_violation_exit_code(tmp_path: Path) -> None:
    (tmp_path / "scratch.py").write_text("x", encoding="utf-8")
    assert main(["--repo-root", str(tmp_path)]) == 1
    (tmp_path / "scratch.py").unlink()
    assert main(["--repo-root", str(tmp_path)]) == 0
