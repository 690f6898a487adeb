"""Starship prompt, zoxide and fzf hooks, aliases and the terminal logo."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sigao.installers.base import InstallContext, StepOutcome, shell_type
from sigao.installers.shell import LOGO_DISPLAY, ensure_logo_file

logger = logging.getLogger(__name__)

STARSHIP_INSTALL = "curl -sS https://starship.rs/install.sh | sh -s -- -y -b {bin_dir}"
FZF_REPO = "https://github.com/junegunn/fzf.git"

STARSHIP_CONFIG = """# Sigao Starship configuration
command_timeout = 100
scan_timeout = 10
add_newline = false

format = \"\"\"
$username\\
$hostname\\
$directory\\
$git_branch\\
$git_status\\
$docker_context\\
$nodejs\\
$python\\
$rust\\
$cmd_duration\\
$line_break\\
$character\\
\"\"\"

[hostname]
ssh_only = true
format = "[@$hostname](bold blue) "

[directory]
style = "bold cyan"
truncation_length = 3
truncate_to_repo = true

[git_branch]
style = "bold green"
format = "[$symbol$branch]($style) "

[cmd_duration]
min_time = 2_000
format = "[took $duration]($style) "
style = "bold yellow"

[character]
success_symbol = "[❯](bold green)"
error_symbol = "[❯](bold red)"
"""

ALIASES = r"""# Navigation
alias dev="cd ~/dev"
alias ...="cd ../.."
alias ....="cd ../../.."

# Git aliases
alias g="git"
alias gs="git status"
alias ga="git add"
alias gc="git commit"
alias gp="git push"
alias gl="git log --oneline --graph --decorate"
alias gd="git diff"
alias gco="git checkout"
alias gcb="git checkout -b"

# Modern CLI tool aliases (only when the tool is available)
command -v bat &>/dev/null && alias cat="bat"
command -v eza &>/dev/null && alias ls="eza --icons" && alias ll="eza -la --icons"
command -v fd &>/dev/null && alias find="fd"
command -v btop &>/dev/null && alias top="btop"
command -v nvim &>/dev/null && alias vim="nvim"

# Docker aliases
alias d="docker"
alias dc="docker compose"
alias dps="docker ps"

# Utility aliases
alias reload="source ~/.zshrc 2>/dev/null || source ~/.bashrc"
alias path='echo -e ${PATH//:/\\n}'
alias now='date +"%Y-%m-%d %H:%M:%S"'

# Make directory and cd into it
mkcd() {
    mkdir -p "$1" && cd "$1"
}

# Extract any archive
extract() {
    if [ -f "$1" ]; then
        case "$1" in
            *.tar.bz2)   tar xjf "$1"   ;;
            *.tar.gz)    tar xzf "$1"   ;;
            *.bz2)       bunzip2 "$1"   ;;
            *.gz)        gunzip "$1"    ;;
            *.tar)       tar xf "$1"    ;;
            *.tgz)       tar xzf "$1"   ;;
            *.zip)       unzip "$1"     ;;
            *.7z)        7z x "$1"      ;;
            *)           echo "'$1' cannot be extracted" ;;
        esac
    else
        echo "'$1' is not a valid file"
    fi
}"""


def starship_init(shell: str) -> str:
    return f'command -v starship &>/dev/null && eval "$(starship init {shell})"'


def zoxide_init(shell: str) -> str:
    return f'# Zoxide configuration\ncommand -v zoxide &>/dev/null && eval "$(zoxide init {shell})"'


def fzf_init(shell: str) -> str:
    return f"# FZF configuration\n[ -f ~/.fzf.{shell} ] && source ~/.fzf.{shell}"


def write_starship_config(home: Path, *, dry_run: bool) -> None:
    """Write ~/.config/starship.toml, keeping a .backup of any existing file."""
    config_path = home / ".config" / "starship.toml"
    if dry_run:
        return
    config_path.parent.mkdir(parents=True, exist_ok=True)
    if config_path.exists():
        if config_path.read_text(encoding="utf-8") == STARSHIP_CONFIG:
            return
        shutil.copyfile(config_path, config_path.with_name("starship.toml.backup"))
        logger.info("Backed up existing starship.toml")
    config_path.write_text(STARSHIP_CONFIG, encoding="utf-8")


class ShellEnhancementsInstaller:
    module_id = "shell-enhancements"

    def is_installed(self, ctx: InstallContext) -> bool:
        return (
            ctx.command_exists("starship")
            and (ctx.home / ".config" / "starship.toml").exists()
            and (ctx.home / ".sigao-logo.ans").exists()
        )

    def install(self, ctx: InstallContext) -> None:
        if not ctx.command_exists("starship"):
            bin_dir = ctx.home / ".local" / "bin"
            bin_dir.mkdir(parents=True, exist_ok=True)
            ctx.runner(["sh", "-c", STARSHIP_INSTALL.format(bin_dir=bin_dir)])
        if not ctx.command_exists("zoxide"):
            try:
                ctx.install_packages("zoxide")
            except RuntimeError as exc:
                logger.warning("Skipping zoxide: %s", exc)
        fzf_dir = ctx.home / ".fzf"
        if not fzf_dir.is_dir():
            ctx.runner(["git", "clone", "--depth", "1", FZF_REPO, str(fzf_dir)])
            ctx.runner([str(fzf_dir / "install"), "--all", "--no-update-rc"])

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        write_starship_config(ctx.home, dry_run=ctx.dry_run)
        ensure_logo_file(ctx.home, dry_run=ctx.dry_run)

        has_zoxide = ctx.command_exists("zoxide")
        has_fzf = (ctx.home / ".fzf").is_dir()

        outcomes: list[StepOutcome] = []
        for rc_path in ctx.rc_paths():
            shell = shell_type(rc_path)
            outcomes.append(ctx.write_block(rc_path, "starship-init", starship_init(shell)))
            if has_zoxide:
                outcomes.append(ctx.write_block(rc_path, "zoxide-init", zoxide_init(shell)))
            if has_fzf:
                outcomes.append(ctx.write_block(rc_path, "fzf-init", fzf_init(shell)))
            outcomes.append(ctx.write_block(rc_path, "shell-enhancements-aliases", ALIASES))
            outcomes.append(ctx.write_block(rc_path, "logo-display", LOGO_DISPLAY, position="start"))
        return outcomes

    def verify(self, ctx: InstallContext) -> bool:
        return ctx.command_exists("starship") or (ctx.home / ".local" / "bin" / "starship").exists()
