from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import cycle
from typing import TypeVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text

_T = TypeVar("_T")

console = Console()

BANNER_LINES: list[str] = [
    "███████╗██╗ ██████╗  █████╗  ██████╗ ",
    "██╔════╝██║██╔════╝ ██╔══██╗██╔═══██╗",
    "███████╗██║██║  ███╗███████║██║   ██║",
    "╚════██║██║██║   ██║██╔══██║██║   ██║",
    "███████║██║╚██████╔╝██║  ██║╚██████╔╝",
    "╚══════╝╚═╝ ╚═════╝ ╚═╝  ╚═╝ ╚═════╝ ",
]

BANNER_PALETTE: list[str] = [
    "bright_cyan",
    "cyan",
    "bright_blue",
    "blue",
    "bright_green",
    "green",
]

STATUS_STYLES: dict[str, str] = {
    "installed": "bold green",
    "skipped": "yellow",
    "partial": "bold yellow",
    "failed": "bold red",
}


def fancy_enabled() -> bool:
    return os.getenv("SIGAO_FANCY", "1") == "1"


def should_show_banner(argv: Sequence[str]) -> bool:
    if not fancy_enabled():
        return False
    if len(argv) <= 1:
        return True
    return any(a in ("--help", "-h") for a in argv[1:])


def render_banner() -> None:
    if not fancy_enabled():
        return

    colors = cycle(BANNER_PALETTE)
    for line in BANNER_LINES:
        t = Text()
        for ch in line:
            t.append(ch, style=f"bold {next(colors)}")
        console.print(t)

    console.print()
    console.print(Text("DEVELOPER ENVIRONMENT PROVISIONING", style="bold bright_white on blue"))
    console.print(Text("Toggle: SIGAO_FANCY=0", style="dim"))
    console.print()


def logo_text() -> str:
    """Plain banner used for ~/.sigao-logo.ans."""
    return "\n".join(BANNER_LINES) + "\n"


@dataclass(frozen=True)
class Spinner:
    message: str

    def run(self, fn: Callable[[], _T]) -> _T:
        if not fancy_enabled():
            return fn()

        with Progress(
            SpinnerColumn(style="bright_cyan"),
            TextColumn("[bold]{task.description}[/bold]"),
            transient=True,
            console=console,
        ) as prog:
            task_id = prog.add_task(self.message, total=None)
            try:
                return fn()
            finally:
                prog.update(task_id, completed=1)


def status_text(status: str) -> Text:
    return Text(status, style=STATUS_STYLES.get(status, "white"))


CHEATSHEET = """\
# Sigao quick reference

## Navigation
- `dev` - go to ~/dev
- `z <partial>` - jump to a frecent directory (zoxide)
- `...` / `....` - up two / three directories
- `mkcd <dir>` - create a directory and cd into it

## Git
- `g` - git
- `gs` / `ga` / `gc` / `gp` - status, add, commit, push
- `gl` - log graph
- `gd` / `gco` / `gcb` - diff, checkout, new branch

## Modern CLI tools
- `cat` -> `bat`, `ls` -> `eza`, `find` -> `fd`, `top` -> `btop`
- `rg <pattern>` - fast text search
- `extract <archive>` - unpack any common archive

## Docker
- `d` - docker
- `dc` - docker compose
- `dps` - running containers

## Key bindings (fzf)
- `Ctrl+R` - fuzzy history search
- `Ctrl+T` - fuzzy file finder
- `Alt+C` - fuzzy cd

## Sigao
- `sigao install --list` - available modules
- `sigao mods audit` - find hand-edited blocks
- `sigao cheat` - this page
"""
