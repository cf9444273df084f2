"""Blocking execution of external commands with captured output."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from contracts.commands import EXIT_NOT_FOUND, CommandResult
from infra.pipeline_paths import PreflightPaths

logger = logging.getLogger(__name__)


class SubprocessProbe:
    """Run external commands; a non-zero exit is a normal result, not an error."""

    def __init__(
        self,
        *,
        paths: PreflightPaths | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._paths = paths or PreflightPaths()
        self._env = dict(env) if env is not None else None
        self._timeout = timeout

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: str | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        """Run ``argv`` and return exit code plus merged stdout/stderr.

        ``interactive`` commands inherit the terminal and capture nothing.
        """
        args = tuple(str(a) for a in argv)
        logger.debug("running %s", " ".join(args))
        try:
            if interactive:
                completed = subprocess.run(args, env=self._env, check=False, timeout=self._timeout)
                return CommandResult(argv=args, exit_code=completed.returncode)
            completed = subprocess.run(
                args,
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                env=self._env,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            return CommandResult(argv=args, exit_code=EXIT_NOT_FOUND, output=str(exc))
        except PermissionError as exc:
            return CommandResult(argv=args, exit_code=126, output=str(exc))
        except subprocess.TimeoutExpired as exc:
            output = exc.output if isinstance(exc.output, str) else ""
            return CommandResult(argv=args, exit_code=124, output=f"{output}\ntimed out after {exc.timeout}s".strip())
        return CommandResult(argv=args, exit_code=completed.returncode, output=completed.stdout or "")

    def persist(self, result: CommandResult, name: str) -> Path | None:
        """Write a failing command's output to the log artifact directory.

        Returns the artifact path, or None when it could not be written.
        """
        target = self._paths.failure_log(name)
        body = f"$ {result.display()}\nexit code: {result.exit_code}\n\n{result.output}"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(body, encoding="utf-8")
        except OSError as exc:
            logger.warning("could not write failure log %s: %s", target, exc)
            return None
        return target
