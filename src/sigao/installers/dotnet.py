"""Microsoft .NET SDK through dotnet-install.sh."""

from __future__ import annotations

from sigao.installers.base import InstallContext, StepOutcome

DOTNET_INSTALL_URL = "https://dot.net/v1/dotnet-install.sh"
DOTNET_CHANNEL = "LTS"

DOTNET_PATH = """# .NET SDK configuration
export DOTNET_ROOT="$HOME/.dotnet"
export PATH="$DOTNET_ROOT:$DOTNET_ROOT/tools:$PATH\""""

DOTNET_TELEMETRY = """# Disable .NET telemetry
export DOTNET_CLI_TELEMETRY_OPTOUT=1"""


class DotnetInstaller:
    module_id = "dotnet"

    def is_installed(self, ctx: InstallContext) -> bool:
        return (ctx.home / ".dotnet" / "dotnet").exists() or ctx.command_exists("dotnet")

    def install(self, ctx: InstallContext) -> None:
        install_dir = ctx.home / ".dotnet"
        script = (
            f"curl -sSL {DOTNET_INSTALL_URL} | bash /dev/stdin"
            f" --channel {DOTNET_CHANNEL} --install-dir {install_dir}"
        )
        ctx.runner(["bash", "-c", script])

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        outcomes: list[StepOutcome] = []
        for rc_path in ctx.rc_paths():
            outcomes.append(ctx.write_block(rc_path, "dotnet-path", DOTNET_PATH))
            outcomes.append(ctx.write_block(rc_path, "dotnet-telemetry", DOTNET_TELEMETRY))
        return outcomes

    def verify(self, ctx: InstallContext) -> bool:
        dotnet = ctx.home / ".dotnet" / "dotnet"
        if not dotnet.exists():
            return ctx.command_exists("dotnet")
        return ctx.runner([str(dotnet), "--version"], check=False).returncode == 0
