"""Essential command line tools."""

from __future__ import annotations

from sigao.installers.base import InstallContext, StepOutcome

# command name -> package name
ESSENTIAL_TOOLS: dict[str, str] = {
    "git": "git",
    "curl": "curl",
    "wget": "wget",
    "unzip": "unzip",
    "rg": "ripgrep",
}


class EssentialsInstaller:
    module_id = "essentials"

    def _missing(self, ctx: InstallContext) -> list[str]:
        return [pkg for cmd, pkg in ESSENTIAL_TOOLS.items() if not ctx.command_exists(cmd)]

    def is_installed(self, ctx: InstallContext) -> bool:
        return not self._missing(ctx)

    def install(self, ctx: InstallContext) -> None:
        ctx.install_packages(*self._missing(ctx))

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return []

    def verify(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("git") and ctx.command_exists("curl")
