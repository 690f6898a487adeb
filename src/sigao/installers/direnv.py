"""direnv plus its shell hook."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from sigao.installers.base import InstallContext, StepOutcome, shell_type
from sigao.mods.store import read_block

logger = logging.getLogger(__name__)

OH_MY_ZSH_BLOCK = "oh-my-zsh-config"
_PLUGINS_RE = re.compile(r"plugins=\((.*?)\)")


def hook_content(shell: str) -> str:
    return f'# Direnv configuration\ncommand -v direnv &>/dev/null && eval "$(direnv hook {shell})"'


def add_plugin(config: str, plugin: str) -> str | None:
    """Return ``config`` with ``plugin`` appended to its plugins=(...) list.

    None means there is nothing to change: no plugins list, or the plugin is
    already in it.
    """
    match = _PLUGINS_RE.search(config)
    if match is None:
        return None
    plugins = match.group(1).split()
    if plugin in plugins:
        return None
    plugins.append(plugin)
    return f"{config[:match.start()]}plugins=({' '.join(plugins)}){config[match.end():]}"


class DirenvInstaller:
    module_id = "direnv"

    def is_installed(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("direnv")

    def install(self, ctx: InstallContext) -> None:
        ctx.install_packages("direnv")

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        outcomes: list[StepOutcome] = []
        for rc_path in ctx.rc_paths():
            shell = shell_type(rc_path)
            outcomes.append(ctx.write_block(rc_path, "direnv-hook", hook_content(shell)))
            if shell == "zsh":
                outcome = self._add_oh_my_zsh_plugin(ctx, rc_path)
                if outcome is not None:
                    outcomes.append(outcome)
        return outcomes

    def _add_oh_my_zsh_plugin(self, ctx: InstallContext, rc_path: Path) -> StepOutcome | None:
        state = read_block(rc_path, OH_MY_ZSH_BLOCK)
        if state is None:
            return None
        if state.has_drift:
            logger.warning("%s in %s was edited by hand; leaving plugins alone", OH_MY_ZSH_BLOCK, rc_path)
            return StepOutcome(step="direnv-plugin", path=rc_path, ok=True, action="skipped", detail="drift")

        updated = add_plugin(state.content, "direnv")
        if updated is None:
            return None
        outcome = ctx.write_block(rc_path, OH_MY_ZSH_BLOCK, updated)
        return StepOutcome(
            step="direnv-plugin",
            path=rc_path,
            ok=outcome.ok,
            action=outcome.action,
            detail=outcome.detail,
        )

    def verify(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("direnv")
