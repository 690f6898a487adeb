"""Catalog of the rc-file blocks each installer module writes.

Descriptive only: the block store never consults it, so an installer can
write a block that is not listed here. Used for help text and audits.
"""

from __future__ import annotations

from dataclasses import dataclass

BASHRC = ".bashrc"
ZSHRC = ".zshrc"
BOTH: tuple[str, ...] = (BASHRC, ZSHRC)


@dataclass(frozen=True)
class Modification:
    name: str
    description: str
    files: tuple[str, ...]
    content: str


@dataclass(frozen=True)
class FileModification:
    module: str
    name: str
    description: str
    files: tuple[str, ...]
    content: str


SHELL_MODIFICATIONS: dict[str, tuple[Modification, ...]] = {
    "shell": (
        Modification(
            name="logo-display",
            description="Displays Sigao logo on terminal start",
            files=BOTH,
            content="Logo display logic with ANSI file",
        ),
        Modification(
            name="oh-my-zsh-config",
            description="Oh My Zsh configuration and plugin setup",
            files=(ZSHRC,),
            content="ZSH theme, plugins configuration",
        ),
        Modification(
            name="path-setup",
            description="Basic PATH configuration and locale settings",
            files=(ZSHRC,),
            content="Local bin paths, cargo bin, locale exports",
        ),
        Modification(
            name="tool-integrations",
            description="Tool integrations (FZF, direnv, NVM, pyenv, Starship)",
            files=(ZSHRC,),
            content="Hooks and initializations for various tools",
        ),
        Modification(
            name="aliases-placeholder",
            description="Placeholder for aliases added by shell-enhancements",
            files=(ZSHRC,),
            content="Note about shell-enhancements module",
        ),
        Modification(
            name="bash-enhancements",
            description="Enhanced Bash configuration",
            files=(BASHRC,),
            content="Bash completion, history settings, basic aliases, color support",
        ),
        Modification(
            name="wsl-path-cleanup",
            description="WSL-specific PATH cleanup to remove Windows Node/npm paths",
            files=BOTH,
            content="Filters out Windows Node.js/npm paths while preserving other Windows tools",
        ),
    ),
    "cargo": (
        Modification(
            name="cargo-config",
            description="Rust/Cargo environment setup",
            files=BOTH,
            content="Sources ~/.cargo/env or adds ~/.cargo/bin to PATH",
        ),
    ),
    "node": (
        Modification(
            name="nvm-init",
            description="Loads NVM and its bash completion",
            files=BOTH,
            content="NVM_DIR export and nvm.sh sourcing",
        ),
    ),
    "claude": (
        Modification(
            name="claude-nvm-default",
            description="Ensures NVM default version is loaded for Claude CLI",
            files=BOTH,
            content="nvm use default command",
        ),
    ),
    "direnv": (
        Modification(
            name="direnv-hook",
            description="Direnv shell hook for automatic environment loading",
            files=BOTH,
            content="direnv hook for bash/zsh",
        ),
        Modification(
            name="direnv-plugin",
            description="Adds direnv to Oh My Zsh plugins list",
            files=(ZSHRC,),
            content="Updates plugins=() array in Oh My Zsh config",
        ),
    ),
    "dotnet": (
        Modification(
            name="dotnet-path",
            description=".NET SDK PATH configuration",
            files=BOTH,
            content="DOTNET_ROOT and PATH exports",
        ),
        Modification(
            name="dotnet-telemetry",
            description="Disables .NET CLI telemetry",
            files=BOTH,
            content="DOTNET_CLI_TELEMETRY_OPTOUT export",
        ),
    ),
    "python": (
        Modification(
            name="pyenv-config",
            description="pyenv configuration for Python version management",
            files=BOTH,
            content="PYENV_ROOT, PATH, and pyenv init commands",
        ),
    ),
    "python-tools": (
        Modification(
            name="pipx-path",
            description="Puts pipx installed applications on PATH",
            files=BOTH,
            content="~/.local/bin PATH export",
        ),
    ),
    "shell-enhancements": (
        Modification(
            name="starship-init",
            description="Starship prompt initialization",
            files=BOTH,
            content="Starship init command",
        ),
        Modification(
            name="zoxide-init",
            description="Zoxide (smart cd) initialization",
            files=BOTH,
            content="Zoxide init command",
        ),
        Modification(
            name="fzf-init",
            description="FZF (fuzzy finder) configuration",
            files=BOTH,
            content="Sources FZF configuration files",
        ),
        Modification(
            name="shell-enhancements-aliases",
            description="Navigation, git and modern CLI aliases plus helper functions",
            files=BOTH,
            content="Navigation, git, docker and modern CLI tool aliases; mkcd and extract functions",
        ),
        Modification(
            name="logo-display",
            description="Sigao logo display on terminal start",
            files=BOTH,
            content="Logo display logic (same block as the shell module writes)",
        ),
    ),
}


def list_modules() -> list[str]:
    return list(SHELL_MODIFICATIONS)


def get_module_modifications(module: str) -> list[Modification]:
    return list(SHELL_MODIFICATIONS.get(module, ()))


def get_file_modifications(file_name: str) -> list[FileModification]:
    """Every modification that touches ``file_name`` (e.g. ``.zshrc``), in catalog order."""
    found: list[FileModification] = []
    for module, modifications in SHELL_MODIFICATIONS.items():
        for mod in modifications:
            if file_name in mod.files:
                found.append(
                    FileModification(
                        module=module,
                        name=mod.name,
                        description=mod.description,
                        files=mod.files,
                        content=mod.content,
                    )
                )
    return found


def get_block_owners(name: str) -> list[str]:
    """Modules that declare a block called ``name``."""
    return [
        module
        for module, modifications in SHELL_MODIFICATIONS.items()
        if any(mod.name == name for mod in modifications)
    ]
