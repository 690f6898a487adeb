from __future__ import annotations

from pathlib import Path

import pytest

from sigao.platform import detect_platform, infer_shell, is_wsl, parse_os_release


def test_parse_os_release() -> None:
    info = parse_os_release('NAME="Ubuntu"\nID=ubuntu\nVERSION_ID="24.04"\n# comment\n\nID_LIKE=debian\n')
    assert info["ID"] == "ubuntu"
    assert info["VERSION_ID"] == "24.04"
    assert info["ID_LIKE"] == "debian"


@pytest.mark.parametrize(
    ("system", "release", "expected"),
    [
        ("Linux", "5.15.153.1-microsoft-standard-WSL2", True),
        ("Linux", "6.8.0-45-generic", False),
        ("Darwin", "23.6.0", False),
    ],
)
def test_is_wsl(system: str, release: str, expected: bool) -> None:
    assert is_wsl(system, release) is expected


@pytest.mark.parametrize(
    ("login_shell", "expected"),
    [("/bin/bash", "bash"), ("/usr/bin/zsh", "zsh"), ("/usr/bin/fish", None), ("", None)],
)
def test_infer_shell(login_shell: str, expected: str | None) -> None:
    assert infer_shell(login_shell) == expected


def test_detect_platform_reads_os_release(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    os_release = tmp_path / "os-release"
    os_release.write_text("ID=linuxmint\nVERSION_ID=22\nID_LIKE=\"ubuntu debian\"\n", encoding="utf-8")
    monkeypatch.setattr("sigao.platform._platform.system", lambda: "Linux")
    monkeypatch.setattr("sigao.platform._platform.release", lambda: "6.8.0-generic")
    monkeypatch.setenv("SHELL", "/usr/bin/zsh")

    info = detect_platform(os_release)

    assert info.is_linux
    assert not info.is_wsl
    assert info.distro == "linuxmint"
    assert info.is_apt
    assert info.login_shell == "/usr/bin/zsh"


def test_detect_platform_without_os_release(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sigao.platform._platform.system", lambda: "Linux")
    monkeypatch.setattr("sigao.platform._platform.release", lambda: "6.8.0-generic")

    info = detect_platform(tmp_path / "missing")

    assert info.distro == "unknown"
    assert not info.is_apt
