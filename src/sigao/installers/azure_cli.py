"""Azure CLI."""

from __future__ import annotations

import logging

from sigao.installers.base import InstallContext, StepOutcome, UnsupportedPlatformError

logger = logging.getLogger(__name__)

AZURE_CLI_DEB_INSTALL = "curl -sL https://aka.ms/InstallAzureCLIDeb | sudo bash"


class AzureCliInstaller:
    module_id = "azure-cli"

    def is_installed(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("az")

    def install(self, ctx: InstallContext) -> None:
        if ctx.platform.is_mac:
            ctx.install_packages("azure-cli")
        elif ctx.platform.is_linux and ctx.platform.is_apt:
            ctx.runner(["sh", "-c", AZURE_CLI_DEB_INSTALL])
        else:
            raise UnsupportedPlatformError(
                f"No Azure CLI installer for {ctx.platform.system} ({ctx.platform.distro})"
            )

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return []

    def verify(self, ctx: InstallContext) -> bool:
        if not ctx.command_exists("az"):
            return False
        result = ctx.runner(["az", "--version"], check=False)
        if result.returncode != 0:
            return False
        first_line = result.stdout.strip().splitlines()[:1]
        if first_line:
            logger.info("Azure CLI: %s", first_line[0])
        return True
