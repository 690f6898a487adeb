"""Global git identity, recommended settings and credential helper."""

from __future__ import annotations

import logging
from pathlib import Path

from sigao.installers.base import InstallContext, StepOutcome

logger = logging.getLogger(__name__)

RECOMMENDED_SETTINGS: tuple[tuple[str, str], ...] = (
    ("init.defaultBranch", "main"),
    ("pull.rebase", "false"),
    ("fetch.prune", "true"),
    ("rerere.enabled", "true"),
    ("diff.colorMoved", "zebra"),
    ("color.ui", "auto"),
)

# Git for Windows install locations, seen from WSL.
WINDOWS_CREDENTIAL_MANAGERS: tuple[Path, ...] = (
    Path("/mnt/c/Program Files/Git/mingw64/bin/git-credential-manager.exe"),
    Path("/mnt/c/Program Files/Git/mingw64/libexec/git-core/git-credential-manager.exe"),
    Path("/mnt/c/Program Files (x86)/Git/mingw64/bin/git-credential-manager.exe"),
)


def find_windows_credential_manager(candidates: tuple[Path, ...] = WINDOWS_CREDENTIAL_MANAGERS) -> Path | None:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def credential_helper_value(manager: Path) -> str:
    # git runs the helper through the shell, so spaces in the path need escaping
    return str(manager).replace(" ", "\\ ")


def _get(ctx: InstallContext, key: str) -> str:
    result = ctx.runner(["git", "config", "--global", key], check=False)
    return result.stdout.strip() if result.returncode == 0 else ""


def _set(ctx: InstallContext, key: str, value: str) -> None:
    ctx.runner(["git", "config", "--global", key, value])


class GitConfigInstaller:
    """Configures git rather than installing it; ``essentials`` provides the binary."""

    module_id = "git-config"

    def __init__(self, credential_managers: tuple[Path, ...] = WINDOWS_CREDENTIAL_MANAGERS):
        self.credential_managers = credential_managers

    def is_installed(self, ctx: InstallContext) -> bool:
        if not ctx.command_exists("git"):
            return False
        return bool(_get(ctx, "user.name") and _get(ctx, "user.email"))

    def install(self, ctx: InstallContext) -> None:
        if not ctx.command_exists("git"):
            raise RuntimeError("git is required; install the essentials module first")

        name = ctx.git_name or _get(ctx, "user.name")
        email = ctx.git_email or _get(ctx, "user.email")
        if not name or not email:
            raise RuntimeError(
                "git user.name and user.email are not set; "
                "add git_name and git_email to the config file or set SIGAO_GIT_NAME and SIGAO_GIT_EMAIL"
            )

        if ctx.git_name:
            _set(ctx, "user.name", ctx.git_name)
        if ctx.git_email:
            _set(ctx, "user.email", ctx.git_email)

        for key, value in RECOMMENDED_SETTINGS:
            _set(ctx, key, value)
        logger.info("Applied recommended git settings")

        self._configure_credentials(ctx)

    def _configure_credentials(self, ctx: InstallContext) -> None:
        if not ctx.platform.is_wsl:
            _set(ctx, "credential.helper", "store")
            return

        manager = find_windows_credential_manager(self.credential_managers)
        if manager is None:
            logger.warning("Windows Git Credential Manager not found; using the store helper")
            _set(ctx, "credential.helper", "store")
            return

        logger.info("Using Git Credential Manager at %s", manager)
        _set(ctx, "credential.helper", credential_helper_value(manager))
        _set(ctx, "credential.https://dev.azure.com.useHttpPath", "true")

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return []

    def verify(self, ctx: InstallContext) -> bool:
        return self.is_installed(ctx)
