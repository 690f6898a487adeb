"""Docker Engine from Docker's apt repository."""

from __future__ import annotations

import getpass
import logging

from sigao.exec import ExecError
from sigao.installers.base import InstallContext, StepOutcome, UnsupportedPlatformError

logger = logging.getLogger(__name__)

PREREQUISITES: tuple[str, ...] = ("ca-certificates", "curl", "gnupg", "lsb-release")
DOCKER_PACKAGES: tuple[str, ...] = (
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
)
KEYRING = "/etc/apt/keyrings/docker.gpg"
SOURCES_LIST = "/etc/apt/sources.list.d/docker.list"

_DEB_ARCH = {"x86_64": "amd64", "amd64": "amd64", "aarch64": "arm64", "arm64": "arm64"}


def _flavour(distro: str) -> str:
    return "debian" if distro == "debian" else "ubuntu"


def repository_line(arch: str, distro: str) -> str:
    """apt source line; ``$(lsb_release -cs)`` is left for the shell to expand."""
    deb_arch = _DEB_ARCH.get(arch.lower(), arch.lower())
    flavour = _flavour(distro)
    return (
        f"deb [arch={deb_arch} signed-by={KEYRING}] "
        f"https://download.docker.com/linux/{flavour} $(lsb_release -cs) stable"
    )


class DockerInstaller:
    module_id = "docker"

    def __init__(self, user: str | None = None):
        self.user = user

    def is_installed(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("docker")

    def install(self, ctx: InstallContext) -> None:
        if not (ctx.platform.is_linux and ctx.platform.is_apt):
            raise UnsupportedPlatformError(
                "Docker Engine is installed on apt-based Linux only; use Docker Desktop elsewhere"
            )
        if ctx.platform.is_wsl:
            logger.warning("Installing Docker Engine inside WSL; Docker Desktop for Windows is an alternative")

        flavour = _flavour(ctx.platform.distro)
        ctx.install_packages(*PREREQUISITES)
        ctx.runner(["install", "-m", "0755", "-d", "/etc/apt/keyrings"], sudo=True)
        ctx.runner(
            [
                "sh",
                "-c",
                f"curl -fsSL https://download.docker.com/linux/{flavour}/gpg | sudo gpg --dearmor --yes -o {KEYRING}",
            ]
        )
        line = repository_line(ctx.platform.arch, ctx.platform.distro)
        ctx.runner(["sh", "-c", f'echo "{line}" | sudo tee {SOURCES_LIST} > /dev/null'])
        ctx.install_packages(*DOCKER_PACKAGES)

        if ctx.platform.is_wsl:
            result = ctx.runner(["service", "docker", "start"], sudo=True, check=False)
            if result.returncode != 0:
                logger.warning("Could not start Docker; run: sudo service docker start")

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        if not ctx.platform.is_linux:
            return []
        return [self._join_docker_group(ctx)]

    def _join_docker_group(self, ctx: InstallContext) -> StepOutcome:
        user = self.user or getpass.getuser()
        groups = ctx.runner(["id", "-nG", user], check=False).stdout.split()
        if "docker" in groups:
            return StepOutcome(step="docker-group", path=None, ok=True, action="unchanged")
        if ctx.dry_run:
            logger.info("[dry run] would add %s to the docker group", user)
            return StepOutcome(step="docker-group", path=None, ok=True, action="dry-run")

        try:
            ctx.runner(["groupadd", "-f", "docker"], sudo=True)
            ctx.runner(["usermod", "-aG", "docker", user], sudo=True)
        except ExecError as exc:
            logger.warning("Could not add %s to the docker group: %s", user, exc)
            return StepOutcome(step="docker-group", path=None, ok=False, action="failed", detail=str(exc))

        logger.info("Added %s to the docker group; log out and back in to use docker without sudo", user)
        return StepOutcome(step="docker-group", path=None, ok=True, action="configured", detail=user)

    def verify(self, ctx: InstallContext) -> bool:
        if not ctx.command_exists("docker"):
            return False
        return ctx.runner(["docker", "--version"], check=False).returncode == 0
