"""Node.js through NVM."""

from __future__ import annotations

from sigao.installers.base import InstallContext, StepOutcome

NVM_VERSION = "v0.40.3"
NODE_VERSION = "lts/*"
NVM_INSTALL = f"curl -o- https://raw.githubusercontent.com/nvm-sh/nvm/{NVM_VERSION}/install.sh | bash"

NVM_INIT = r'''# NVM configuration
export NVM_DIR="$HOME/.nvm"
[ -s "$NVM_DIR/nvm.sh" ] && \. "$NVM_DIR/nvm.sh"
[ -s "$NVM_DIR/bash_completion" ] && \. "$NVM_DIR/bash_completion"'''


def nvm_script(*commands: str) -> str:
    """Bash snippet that loads nvm.sh and then runs ``commands``."""
    return "\n".join(['export NVM_DIR="$HOME/.nvm"', r'[ -s "$NVM_DIR/nvm.sh" ] && \. "$NVM_DIR/nvm.sh"', *commands])


class NodeInstaller:
    module_id = "node"

    def is_installed(self, ctx: InstallContext) -> bool:
        return (ctx.home / ".nvm" / "nvm.sh").is_file()

    def install(self, ctx: InstallContext) -> None:
        if not (ctx.home / ".nvm" / "nvm.sh").is_file():
            ctx.runner(["bash", "-c", NVM_INSTALL])
        if not (ctx.home / ".nvm" / "nvm.sh").is_file():
            raise RuntimeError("NVM install did not create ~/.nvm/nvm.sh")
        ctx.runner(
            [
                "bash",
                "-c",
                nvm_script(
                    f"nvm install {NODE_VERSION}",
                    f"nvm use {NODE_VERSION}",
                    f"nvm alias default {NODE_VERSION}",
                ),
            ]
        )

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return [ctx.write_block(rc_path, "nvm-init", NVM_INIT) for rc_path in ctx.rc_paths()]

    def verify(self, ctx: InstallContext) -> bool:
        if not self.is_installed(ctx):
            return False
        result = ctx.runner(["bash", "-c", nvm_script("node --version")], check=False)
        return result.returncode == 0
