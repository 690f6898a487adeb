"""Modern command line tools from the package manager, cargo and git."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sigao.exec import CommandTimeoutError, ExecError
from sigao.installers.base import InstallContext, StepOutcome

logger = logging.getLogger(__name__)

FZF_REPO = "https://github.com/junegunn/fzf.git"
COVERAGE_THRESHOLD = 0.7
CARGO_INSTALL_TIMEOUT_SECONDS = 1800


@dataclass(frozen=True)
class CliTool:
    package: str
    command: str
    # Debian ships some tools under another name (fdfind, batcat).
    alt_command: str | None = None
    brew_package: str | None = None


PACKAGE_TOOLS: tuple[CliTool, ...] = (
    CliTool("ripgrep", "rg"),
    CliTool("fd-find", "fd", "fdfind", brew_package="fd"),
    CliTool("bat", "bat", "batcat"),
    CliTool("htop", "htop"),
    CliTool("ncdu", "ncdu"),
    CliTool("tldr", "tldr"),
    CliTool("httpie", "http"),
    CliTool("jq", "jq"),
    CliTool("tmux", "tmux"),
    CliTool("btop", "btop"),
)

CARGO_TOOLS: tuple[str, ...] = ("zoxide", "eza", "procs")


def _present(ctx: InstallContext, tool: CliTool) -> bool:
    if ctx.command_exists(tool.command):
        return True
    return tool.alt_command is not None and ctx.command_exists(tool.alt_command)


class CliToolsInstaller:
    module_id = "cli-tools"

    def _coverage(self, ctx: InstallContext) -> float:
        found = [_present(ctx, tool) for tool in PACKAGE_TOOLS]
        cargo_bin = ctx.home / ".cargo" / "bin"
        found.extend(ctx.command_exists(command) or (cargo_bin / command).exists() for command in CARGO_TOOLS)
        found.append(ctx.command_exists("fzf") or (ctx.home / ".fzf").is_dir())
        return sum(found) / len(found)

    def is_installed(self, ctx: InstallContext) -> bool:
        return self._coverage(ctx) >= COVERAGE_THRESHOLD

    def install(self, ctx: InstallContext) -> None:
        missing = [tool for tool in PACKAGE_TOOLS if not _present(ctx, tool)]
        if missing:
            packages = [
                (tool.brew_package or tool.package) if ctx.platform.is_mac else tool.package
                for tool in missing
            ]
            try:
                ctx.install_packages(*packages)
            except ExecError as exc:
                logger.warning("Some CLI tools failed to install: %s", exc)

        if ctx.platform.is_linux:
            self._link_alt_commands(ctx)
        self._install_fzf(ctx)
        self._install_cargo_tools(ctx)

    def _link_alt_commands(self, ctx: InstallContext) -> None:
        for tool in PACKAGE_TOOLS:
            if tool.alt_command is None or ctx.command_exists(tool.command):
                continue
            if not ctx.command_exists(tool.alt_command):
                continue
            located = ctx.runner(["which", tool.alt_command], check=False)
            target = located.stdout.strip()
            if located.returncode != 0 or not target:
                continue
            ctx.runner(["ln", "-sf", target, f"/usr/local/bin/{tool.command}"], sudo=True)
            logger.info("Linked %s -> %s", tool.command, tool.alt_command)

    def _install_fzf(self, ctx: InstallContext) -> None:
        fzf_dir = ctx.home / ".fzf"
        if fzf_dir.is_dir():
            logger.info("fzf already installed")
            return
        # --bin only fetches the binary; shell-enhancements owns the rc hook.
        ctx.runner(["git", "clone", "--depth", "1", FZF_REPO, str(fzf_dir)])
        ctx.runner(["bash", str(fzf_dir / "install"), "--bin"])

    def _install_cargo_tools(self, ctx: InstallContext) -> None:
        cargo_bin = ctx.home / ".cargo" / "bin" / "cargo"
        if cargo_bin.exists():
            cargo = str(cargo_bin)
        elif ctx.command_exists("cargo"):
            cargo = "cargo"
        else:
            logger.warning("cargo not found; skipping %s", ", ".join(CARGO_TOOLS))
            return

        for command in CARGO_TOOLS:
            if ctx.command_exists(command):
                continue
            try:
                ctx.runner([cargo, "install", command, "--locked"], timeout=CARGO_INSTALL_TIMEOUT_SECONDS)
            except (ExecError, CommandTimeoutError) as exc:
                logger.warning("Failed to install %s: %s", command, exc)

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return []

    def verify(self, ctx: InstallContext) -> bool:
        return self.is_installed(ctx)
