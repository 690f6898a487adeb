"""Shell selection: bash enhancements or zsh with Oh My Zsh."""

from __future__ import annotations

import logging
from pathlib import Path

from sigao.installers.base import InstallContext, StepOutcome
from sigao.ui import logo_text

logger = logging.getLogger(__name__)

OH_MY_ZSH_INSTALL_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
ZSH_PLUGIN_REPOS: dict[str, str] = {
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
}
PREFERRED_LOCALES: tuple[str, ...] = ("en_US.UTF-8", "en_US.utf8", "C.UTF-8", "C.utf8")
LOGO_FILE = ".sigao-logo.ans"

LOGO_DISPLAY = r"""# Display Sigao logo on terminal start (only in interactive shells)
if [[ $- == *i* ]] && [ -f ~/.sigao-logo.ans ]; then
    # Use backslash cat to bypass any aliases and display raw content
    \cat ~/.sigao-logo.ans 2>/dev/null || /bin/cat ~/.sigao-logo.ans 2>/dev/null
    echo ""  # Add a blank line after the logo
fi"""

OH_MY_ZSH_CONFIG = """# ========================================
# OH MY ZSH CONFIGURATION
# ========================================
export ZSH="$HOME/.oh-my-zsh"

# Set theme to empty (using Starship instead)
ZSH_THEME=""

# Plugins
plugins=(git docker direnv zsh-autosuggestions zsh-syntax-highlighting)

# Load Oh My Zsh
source $ZSH/oh-my-zsh.sh"""

TOOL_INTEGRATIONS = r'''# ========================================
# TOOL INTEGRATIONS
# ========================================
# FZF integration
[ -f ~/.fzf.zsh ] && source ~/.fzf.zsh

# Direnv integration
command -v direnv &>/dev/null && eval "$(direnv hook zsh)"

# NVM integration (if installed)
export NVM_DIR="$HOME/.nvm"
[ -s "$NVM_DIR/nvm.sh" ] && \. "$NVM_DIR/nvm.sh"
[ -s "$NVM_DIR/bash_completion" ] && \. "$NVM_DIR/bash_completion"

# Pyenv integration (if installed)
if [ -d "$HOME/.pyenv" ]; then
    export PYENV_ROOT="$HOME/.pyenv"
    export PATH="$PYENV_ROOT/bin:$PATH"
    command -v pyenv &>/dev/null && eval "$(pyenv init -)"
    command -v pyenv &>/dev/null && eval "$(pyenv virtualenv-init -)"
fi

# Starship prompt (must be at the end)
command -v starship &>/dev/null && eval "$(starship init zsh)"'''

ALIASES_PLACEHOLDER = """# ========================================
# ALIASES & FUNCTIONS
# ========================================
# Note: Additional aliases and functions are added by shell-enhancements module"""

WSL_PATH_CLEANUP = r"""# ========================================
# WSL PATH CLEANUP
# ========================================
# Remove Windows Node/npm paths that can conflict with WSL Node installations
if [[ -n "$WSL_DISTRO_NAME" ]]; then
    NEW_PATH=""
    if [[ -n "$ZSH_VERSION" ]]; then
        PATH_ARRAY=("${(@s/:/)PATH}")
    else
        IFS=':' read -ra PATH_ARRAY <<< "$PATH"
    fi

    node_patterns='/(nodejs|node\.js|npm|npm-cache|nvm|yarn|pnpm|bun|deno|fnm|volta)'
    vscode_patterns='microsoft vs code|visual studio code|vscode'

    for path_entry in "${PATH_ARRAY[@]}"; do
        if [[ "$path_entry" == /mnt/* ]]; then
            path_lower="$(echo "$path_entry" | tr '[:upper:]' '[:lower:]')"
            if echo "$path_lower" | /bin/grep -qE "$node_patterns|$vscode_patterns"; then
                continue
            fi
        fi
        if [[ -n "$NEW_PATH" ]]; then
            NEW_PATH="$NEW_PATH:$path_entry"
        else
            NEW_PATH="$path_entry"
        fi
    done
    export PATH="$NEW_PATH"

    if [ -d "/snap/bin" ] && [[ ":$PATH:" != *":/snap/bin:"* ]]; then
        export PATH="$PATH:/snap/bin"
    fi
fi"""


def path_setup(locale: str) -> str:
    lines = [
        "# ========================================",
        "# ENVIRONMENT & PATH SETUP",
        "# ========================================",
        "# Add local bin to PATH",
        'export PATH="$HOME/.local/bin:$PATH"',
        "",
        "# Add cargo/rust to PATH if exists",
        '[ -d "$HOME/.cargo/bin" ] && export PATH="$HOME/.cargo/bin:$PATH"',
    ]
    if locale:
        lines += ["", "# Set locale to avoid warnings", f"export LANG={locale}", f"export LC_ALL={locale}"]
    return "\n".join(lines)


def bash_enhancements(locale: str) -> str:
    locale_lines = f"\n# Set locale to avoid warnings\nexport LANG={locale}\nexport LC_ALL={locale}\n" if locale else ""
    return f"""# Enhanced Bash Configuration
# Enable programmable completion
if [ -f /etc/bash_completion ] && ! shopt -oq posix; then
    . /etc/bash_completion
fi

# Better history
export HISTCONTROL=ignoredups:erasedups
export HISTSIZE=10000
export HISTFILESIZE=20000
shopt -s histappend
{locale_lines}
# Useful aliases
alias ll='ls -alF'
alias la='ls -A'
alias l='ls -CF'
alias ..='cd ..'
alias ...='cd ../..'

# Enable color support
if [ -x /usr/bin/dircolors ]; then
    test -r ~/.dircolors && eval "$(dircolors -b ~/.dircolors)" || eval "$(dircolors -b)"
    alias ls='ls --color=auto'
    alias grep='grep --color=auto'
fi"""


def pick_locale(available: list[str]) -> str:
    """First preferred UTF-8 locale present in ``locale -a`` output, or ''."""
    lowered = {name.strip().lower() for name in available if name.strip()}
    for locale in PREFERRED_LOCALES:
        if locale.lower() in lowered:
            return "C.UTF-8" if locale.lower().startswith("c.") else locale
    return ""


def ensure_logo_file(home: Path, *, dry_run: bool) -> None:
    logo_path = home / LOGO_FILE
    if logo_path.exists() or dry_run:
        return
    try:
        logo_path.write_text(logo_text(), encoding="utf-8")
    except OSError as exc:
        logger.debug("Could not write %s: %s", logo_path, exc)


class ShellInstaller:
    module_id = "shell"

    def _selected(self, ctx: InstallContext) -> str:
        return ctx.shell or "bash"

    def is_installed(self, ctx: InstallContext) -> bool:
        if self._selected(ctx) == "zsh":
            return ctx.command_exists("zsh") and (ctx.home / ".oh-my-zsh").is_dir()
        return True

    def install(self, ctx: InstallContext) -> None:
        if self._selected(ctx) == "zsh":
            self._install_zsh(ctx)
        else:
            ctx.install_packages("bash-completion")

    def _install_zsh(self, ctx: InstallContext) -> None:
        if not ctx.command_exists("zsh"):
            ctx.install_packages("zsh")

        oh_my_zsh = ctx.home / ".oh-my-zsh"
        if not oh_my_zsh.is_dir():
            logger.info("Installing Oh My Zsh...")
            ctx.runner(["sh", "-c", f"curl -fsSL {OH_MY_ZSH_INSTALL_URL} | sh -s -- --unattended --keep-zshrc"])
            plugins_dir = oh_my_zsh / "custom" / "plugins"
            for name, url in ZSH_PLUGIN_REPOS.items():
                ctx.runner(["git", "clone", "--depth", "1", url, str(plugins_dir / name)])

    def _locale(self, ctx: InstallContext) -> str:
        result = ctx.runner(["locale", "-a"], check=False)
        if result.returncode != 0:
            return "C.UTF-8"
        return pick_locale(result.stdout.splitlines())

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        ensure_logo_file(ctx.home, dry_run=ctx.dry_run)
        locale = self._locale(ctx)

        if self._selected(ctx) == "zsh":
            rc_path = ctx.home / ".zshrc"
            outcomes = [
                ctx.write_block(rc_path, "logo-display", LOGO_DISPLAY, position="start"),
                ctx.write_block(rc_path, "oh-my-zsh-config", OH_MY_ZSH_CONFIG),
                ctx.write_block(rc_path, "path-setup", path_setup(locale)),
                ctx.write_block(rc_path, "tool-integrations", TOOL_INTEGRATIONS),
                ctx.write_block(rc_path, "aliases-placeholder", ALIASES_PLACEHOLDER),
            ]
        else:
            rc_path = ctx.home / ".bashrc"
            outcomes = [
                ctx.write_block(rc_path, "logo-display", LOGO_DISPLAY, position="start"),
                ctx.write_block(rc_path, "bash-enhancements", bash_enhancements(locale)),
            ]

        if ctx.platform.is_wsl:
            outcomes.append(ctx.write_block(rc_path, "wsl-path-cleanup", WSL_PATH_CLEANUP, position="start"))
        return outcomes

    def verify(self, ctx: InstallContext) -> bool:
        return self.is_installed(ctx)
