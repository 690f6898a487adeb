"""Python developer tools, each in its own pipx environment."""

from __future__ import annotations

import logging

from sigao.exec import CommandTimeoutError, ExecError
from sigao.installers.base import InstallContext, StepOutcome

logger = logging.getLogger(__name__)

# pipx package -> command it provides
PIPX_TOOLS: dict[str, str] = {
    "black": "black",
    "ruff": "ruff",
    "mypy": "mypy",
    "pytest": "pytest",
    "ipython": "ipython",
    "httpie": "http",
    "poetry": "poetry",
}
COVERAGE_THRESHOLD = 0.5

PIPX_PATH = """# pipx installed applications
export PATH="$HOME/.local/bin:$PATH\""""


class PythonToolsInstaller:
    module_id = "python-tools"

    def _resolve(self, ctx: InstallContext, command: str) -> str | None:
        """Find ``command`` on PATH or in pipx's bin directory, which may not be on PATH yet."""
        if ctx.command_exists(command):
            return command
        local = ctx.home / ".local" / "bin" / command
        if local.exists():
            return str(local)
        return None

    def is_installed(self, ctx: InstallContext) -> bool:
        if self._resolve(ctx, "pipx") is None:
            return False
        found = sum(1 for command in PIPX_TOOLS.values() if self._resolve(ctx, command) is not None)
        return found >= len(PIPX_TOOLS) * COVERAGE_THRESHOLD

    def install(self, ctx: InstallContext) -> None:
        if not ctx.command_exists("python3"):
            raise RuntimeError("python3 is required; install the python module or a system Python first")

        pipx = self._resolve(ctx, "pipx")
        if pipx is None:
            ctx.install_packages("pipx")
            pipx = "pipx"

        for package, command in PIPX_TOOLS.items():
            if self._resolve(ctx, command) is not None:
                continue
            try:
                ctx.runner([pipx, "install", package])
                logger.info("Installed %s", package)
            except (ExecError, CommandTimeoutError) as exc:
                logger.warning("Failed to install %s: %s", package, exc)

        poetry = self._resolve(ctx, "poetry")
        if poetry is not None:
            ctx.runner([poetry, "config", "virtualenvs.in-project", "true"], check=False)

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return [ctx.write_block(rc_path, "pipx-path", PIPX_PATH) for rc_path in ctx.rc_paths()]

    def verify(self, ctx: InstallContext) -> bool:
        return self._resolve(ctx, "pipx") is not None
