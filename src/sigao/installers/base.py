"""Installer capability protocol and the context installers run in."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal, Protocol

from sigao import __version__
from sigao.exec import ExecResult, run_command
from sigao.mods.store import BlockWriteError, Position, upsert_block
from sigao.platform import PlatformInfo, has_command

logger = logging.getLogger(__name__)

InstallStatus = Literal["installed", "skipped", "partial", "failed"]
Runner = Callable[..., ExecResult]


class UnsupportedPlatformError(RuntimeError):
    """Raised when no supported package manager is available."""


@dataclass(frozen=True)
class StepOutcome:
    """Result of one configuration step, usually one block write."""

    step: str
    path: Path | None
    ok: bool
    action: str
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["path"] = str(self.path) if self.path is not None else None
        return payload


@dataclass(frozen=True)
class InstallResult:
    module_id: str
    status: InstallStatus
    steps: tuple[StepOutcome, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("installed", "skipped")

    def to_dict(self) -> dict[str, Any]:
        return {
            "module_id": self.module_id,
            "status": self.status,
            "steps": [step.to_dict() for step in self.steps],
            "error": self.error,
        }


@dataclass
class InstallContext:
    """Everything an installer needs from the current provisioning run."""

    home: Path
    platform: PlatformInfo
    shell: str | None = None
    mod_version: str = __version__
    dry_run: bool = False
    runner: Runner = run_command
    command_exists: Callable[[str], bool] = has_command
    installed_modules: set[str] = field(default_factory=set)
    git_name: str | None = None
    git_email: str | None = None

    def rc_paths(self) -> list[Path]:
        """Shell rc files to configure.

        A selected shell gets its rc file (created on first write); without a
        selection only the rc files that already exist are touched.
        """
        if self.shell == "zsh":
            return [self.home / ".zshrc"]
        if self.shell == "bash":
            return [self.home / ".bashrc"]
        return [path for path in (self.home / ".bashrc", self.home / ".zshrc") if path.exists()]

    def write_block(
        self,
        path: Path,
        name: str,
        content: str,
        *,
        position: Position = "end",
    ) -> StepOutcome:
        """Upsert one block; a failed write becomes a failed step instead of an exception."""
        try:
            result = upsert_block(
                path,
                name,
                content,
                self.mod_version,
                position=position,
                dry_run=self.dry_run,
            )
        except (BlockWriteError, ValueError) as exc:
            logger.warning("Could not write %s to %s: %s", name, path, exc)
            return StepOutcome(step=name, path=path, ok=False, action="failed", detail=str(exc))

        if result.changed and self.dry_run:
            logger.info("[dry run] would update %s in %s", name, path.name)
            logger.debug("%s", result.diff)
        elif result.changed:
            logger.info("%s %s in %s", result.action.capitalize(), name, path.name)
        return StepOutcome(step=name, path=path, ok=True, action=result.action)

    def install_packages(self, *packages: str) -> None:
        if self.platform.is_mac:
            if not self.command_exists("brew"):
                raise UnsupportedPlatformError("Homebrew is required on macOS")
            self.runner(["brew", "install", *packages])
        elif self.platform.is_linux and self.platform.is_apt:
            self.runner(["apt-get", "update"], sudo=True)
            self.runner(["apt-get", "install", "-y", *packages], sudo=True)
        elif self.platform.is_linux and self.command_exists("dnf"):
            self.runner(["dnf", "install", "-y", *packages], sudo=True)
        else:
            raise UnsupportedPlatformError(
                f"No supported package manager on {self.platform.system} ({self.platform.distro})"
            )


class Installer(Protocol):
    """Capabilities every tool installer provides."""

    module_id: str

    def is_installed(self, ctx: InstallContext) -> bool: ...

    def install(self, ctx: InstallContext) -> None: ...

    def configure(self, ctx: InstallContext) -> list[StepOutcome]: ...

    def verify(self, ctx: InstallContext) -> bool: ...


def shell_type(rc_path: Path) -> str:
    return "zsh" if rc_path.name.endswith("zshrc") else "bash"
