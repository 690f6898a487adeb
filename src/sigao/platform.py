"""Host platform detection."""

from __future__ import annotations

import os
import platform as _platform
import shutil
from dataclasses import dataclass
from pathlib import Path

APT_DISTROS: tuple[str, ...] = ("ubuntu", "debian", "linuxmint", "pop", "elementary", "kali", "parrot")
OS_RELEASE_PATH = Path("/etc/os-release")


@dataclass(frozen=True)
class PlatformInfo:
    system: str
    arch: str
    is_wsl: bool
    home: Path
    login_shell: str
    distro: str = "unknown"
    distro_version: str = "unknown"
    is_apt: bool = False

    @property
    def is_linux(self) -> bool:
        return self.system == "linux"

    @property
    def is_mac(self) -> bool:
        return self.system == "darwin"


def has_command(name: str) -> bool:
    return shutil.which(name) is not None


def is_wsl(system: str | None = None, release: str | None = None) -> bool:
    system = (system or _platform.system()).lower()
    if system != "linux":
        return False
    release = (release or _platform.release()).lower()
    return "microsoft" in release or "wsl" in release


def parse_os_release(text: str) -> dict[str, str]:
    info: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if not sep or not key.strip():
            continue
        info[key.strip()] = value.strip().strip('"').strip("'")
    return info


def _is_apt(info: dict[str, str]) -> bool:
    distro = info.get("ID", "").lower()
    return distro in APT_DISTROS or "debian" in info.get("ID_LIKE", "").lower()


def detect_platform(os_release_path: Path = OS_RELEASE_PATH) -> PlatformInfo:
    system = _platform.system().lower()
    base = {
        "system": system,
        "arch": _platform.machine(),
        "is_wsl": is_wsl(system),
        "home": Path.home(),
        "login_shell": os.environ.get("SHELL", "/bin/bash"),
    }
    if system != "linux":
        return PlatformInfo(**base)

    try:
        info = parse_os_release(os_release_path.read_text(encoding="utf-8"))
    except OSError:
        return PlatformInfo(**base)

    return PlatformInfo(
        **base,
        distro=info.get("ID", "unknown"),
        distro_version=info.get("VERSION_ID", "unknown"),
        is_apt=_is_apt(info),
    )


def infer_shell(login_shell: str) -> str | None:
    """Map a $SHELL value to ``bash`` or ``zsh``."""
    if login_shell.endswith("zsh"):
        return "zsh"
    if login_shell.endswith("bash"):
        return "bash"
    return None
