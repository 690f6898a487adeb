"""Claude Code CLI, installed globally with NVM's npm."""

from __future__ import annotations

from sigao.installers.base import InstallContext, StepOutcome
from sigao.installers.node import nvm_script

CLAUDE_PACKAGE = "@anthropic-ai/claude-code"

CLAUDE_NVM_DEFAULT = """# Ensure NVM default Node is active for Claude CLI
command -v nvm &>/dev/null && nvm use default >/dev/null 2>&1"""

_FIND_CLAUDE = (
    'export PATH="$HOME/.npm-global/bin:$PATH"',
    "command -v claude >/dev/null 2>&1 && exit 0",
    'for dir in "$HOME"/.nvm/versions/node/*/bin; do',
    '  [ -x "$dir/claude" ] && exit 0',
    "done",
    "exit 1",
)


class ClaudeInstaller:
    module_id = "claude"

    def is_installed(self, ctx: InstallContext) -> bool:
        if ctx.command_exists("claude"):
            return True
        result = ctx.runner(["bash", "-c", nvm_script(*_FIND_CLAUDE)], check=False)
        return result.returncode == 0

    def install(self, ctx: InstallContext) -> None:
        if not (ctx.home / ".nvm" / "nvm.sh").is_file():
            raise RuntimeError("NVM is required; install the node module first")
        ctx.runner(
            [
                "bash",
                "-c",
                nvm_script(
                    "unset npm_config_prefix",
                    "nvm ls default >/dev/null 2>&1 || { nvm install --lts && nvm alias default 'lts/*'; }",
                    "nvm use default",
                    f"npm install -g {CLAUDE_PACKAGE}",
                ),
            ]
        )

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return [ctx.write_block(rc_path, "claude-nvm-default", CLAUDE_NVM_DEFAULT) for rc_path in ctx.rc_paths()]

    def verify(self, ctx: InstallContext) -> bool:
        return self.is_installed(ctx)
