"""Module catalog: what can be installed, in which order, and what it needs first."""

from __future__ import annotations

from dataclasses import dataclass


class UnknownModuleError(KeyError):
    """Raised for a module id that is not in the catalog."""

    def __str__(self) -> str:
        return f"Unknown module: {self.args[0]}"


@dataclass(frozen=True)
class ModuleSpec:
    id: str
    name: str
    description: str
    enabled: bool
    priority: int
    tags: tuple[str, ...]
    dependencies: tuple[str, ...] = ()


MODULES: tuple[ModuleSpec, ...] = (
    ModuleSpec(
        id="shell",
        name="Shell Selection",
        description="Bash or Zsh with Oh My Zsh",
        enabled=True,
        priority=1,
        tags=("core", "shell"),
    ),
    ModuleSpec(
        id="essentials",
        name="Essential Tools",
        description="Git, ripgrep, curl, wget, and unzip",
        enabled=True,
        priority=2,
        tags=("core", "required"),
    ),
    ModuleSpec(
        id="git-config",
        name="Git Configuration",
        description="Git identity, recommended settings and credential helper",
        enabled=True,
        priority=3,
        tags=("git", "config"),
    ),
    ModuleSpec(
        id="cargo",
        name="Rust/Cargo",
        description="Rust programming language and Cargo package manager",
        enabled=True,
        priority=4,
        tags=("rust", "cargo", "tools"),
    ),
    ModuleSpec(
        id="cli-tools",
        name="Modern CLI Tools",
        description="fd, bat, fzf, zoxide, eza, and more",
        enabled=True,
        priority=5,
        tags=("cli", "tools"),
        dependencies=("cargo",),
    ),
    ModuleSpec(
        id="direnv",
        name="Direnv",
        description="Environment variable management with shell integration",
        enabled=True,
        priority=6,
        tags=("env", "tools"),
    ),
    ModuleSpec(
        id="node",
        name="Node.js (via NVM)",
        description="Install NVM and latest LTS Node.js",
        enabled=True,
        priority=7,
        tags=("node", "javascript"),
    ),
    ModuleSpec(
        id="claude",
        name="Claude Code CLI",
        description="Anthropic Claude Code CLI tool",
        enabled=True,
        priority=8,
        tags=("ai", "claude"),
        dependencies=("node",),
    ),
    ModuleSpec(
        id="docker",
        name="Docker",
        description="Docker Engine with the compose and buildx plugins",
        enabled=True,
        priority=9,
        tags=("containers", "docker"),
    ),
    ModuleSpec(
        id="shell-enhancements",
        name="Shell Enhancements",
        description="Starship prompt, zoxide/fzf hooks, and navigation aliases",
        enabled=True,
        priority=10,
        tags=("shell", "productivity"),
        dependencies=("shell", "cli-tools"),
    ),
    ModuleSpec(
        id="azure-cli",
        name="Azure CLI",
        description="Microsoft Azure command-line interface",
        enabled=True,
        priority=11,
        tags=("cloud", "azure"),
    ),
    ModuleSpec(
        id="dotnet",
        name=".NET SDK",
        description="Microsoft .NET SDK (LTS channel)",
        enabled=False,
        priority=12,
        tags=("dotnet", "csharp"),
    ),
    ModuleSpec(
        id="python-tools",
        name="Python Development Tools",
        description="Python tools via pipx (black, ruff, mypy, pytest, poetry)",
        enabled=False,
        priority=13,
        tags=("python",),
    ),
    ModuleSpec(
        id="python",
        name="Python (via pyenv)",
        description="Python with pyenv version manager",
        enabled=False,
        priority=14,
        tags=("python", "advanced"),
    ),
)

CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Core Tools", ("shell", "essentials", "git-config")),
    ("Development Environments", ("node", "python", "python-tools", "dotnet", "docker", "cargo")),
    ("CLI Enhancements", ("cli-tools", "shell-enhancements", "direnv")),
    ("Cloud & Services", ("claude", "azure-cli")),
)

_BY_ID: dict[str, ModuleSpec] = {spec.id: spec for spec in MODULES}


def get_module(module_id: str) -> ModuleSpec:
    try:
        return _BY_ID[module_id]
    except KeyError:
        raise UnknownModuleError(module_id) from None


def get_enabled_modules() -> list[ModuleSpec]:
    return [spec for spec in MODULES if spec.enabled]


def get_modules_by_tag(tag: str) -> list[ModuleSpec]:
    return [spec for spec in MODULES if tag in spec.tags]


def resolve_install_order(module_ids: list[str]) -> list[ModuleSpec]:
    """Expand dependencies (dependencies first) and drop duplicates.

    Selected modules run in catalog priority order; each one is preceded by
    any dependency not already scheduled.
    """
    ordered: list[ModuleSpec] = []
    seen: set[str] = set()

    def add(module_id: str) -> None:
        if module_id in seen:
            return
        spec = get_module(module_id)
        seen.add(module_id)
        for dep in spec.dependencies:
            add(dep)
        ordered.append(spec)

    for module_id in sorted(module_ids, key=lambda m: get_module(m).priority):
        add(module_id)
    return ordered
