"""Subprocess runner used by installers."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path | None
    returncode: int
    stdout: str
    stderr: str


class ExecError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


class CommandTimeoutError(RuntimeError):
    """Raised when a command exceeds its timeout."""

    def __init__(self, argv: tuple[str, ...], timeout: float):
        super().__init__(f"command timed out after {timeout:g}s: {' '.join(argv)}")
        self.argv = argv
        self.timeout = timeout


def run_command(
    argv: list[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    sudo: bool = False,
    check: bool = True,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ExecResult:
    """Run command and return structured result."""
    full_argv = ["sudo", *argv] if sudo else list(argv)
    logger.debug("Running: %s", " ".join(full_argv))
    try:
        completed = subprocess.run(
            full_argv,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(tuple(full_argv), timeout) from exc

    result = ExecResult(
        argv=tuple(full_argv),
        cwd=cwd.resolve() if cwd is not None else None,
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and result.returncode != 0:
        raise ExecError(result)
    return result
