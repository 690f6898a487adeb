"""Pytest fixtures shared by the sigao test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from sigao.exec import ExecResult
from sigao.installers.base import InstallContext
from sigao.platform import PlatformInfo


class FakeRunner:
    """Records commands instead of running them.

    ``responses`` maps the first argv element to (returncode, stdout).
    """

    def __init__(self, responses: dict[str, tuple[int, str]] | None = None):
        self.calls: list[list[str]] = []
        self.responses = responses or {}

    def __call__(self, argv: list[str], *, sudo: bool = False, check: bool = True, **_: object) -> ExecResult:
        full = ["sudo", *argv] if sudo else list(argv)
        self.calls.append(full)
        code, stdout = self.responses.get(argv[0], (0, ""))
        return ExecResult(argv=tuple(full), cwd=None, returncode=code, stdout=stdout, stderr="")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner({"locale": (0, "C\nC.utf8\nen_US.utf8\nPOSIX\n")})


@pytest.fixture
def linux_platform(tmp_path: Path) -> PlatformInfo:
    return PlatformInfo(
        system="linux",
        arch="x86_64",
        is_wsl=False,
        home=tmp_path,
        login_shell="/bin/bash",
        distro="ubuntu",
        distro_version="24.04",
        is_apt=True,
    )


@pytest.fixture
def make_ctx(tmp_path: Path, linux_platform: PlatformInfo, fake_runner: FakeRunner):
    def _make(*, shell: str | None = "bash", commands: set[str] | None = None, **overrides) -> InstallContext:
        available = set(commands or ())
        fields = {
            "home": tmp_path,
            "platform": linux_platform,
            "shell": shell,
            "mod_version": "9.9.9",
            "runner": fake_runner,
            "command_exists": lambda name: name in available,
        }
        fields.update(overrides)
        return InstallContext(**fields)

    return _make
