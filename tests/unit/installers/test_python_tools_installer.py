from __future__ import annotations

from pathlib import Path

import pytest

from sigao.installers.python_tools import PIPX_PATH, PIPX_TOOLS, PythonToolsInstaller
from sigao.mods.store import read_block


def test_is_installed_needs_pipx_and_half_the_tools(make_ctx) -> None:
    assert not PythonToolsInstaller().is_installed(make_ctx(commands={"black", "ruff", "mypy", "pytest"}))
    assert PythonToolsInstaller().is_installed(make_ctx(commands={"pipx", "black", "ruff", "mypy", "pytest"}))
    assert not PythonToolsInstaller().is_installed(make_ctx(commands={"pipx", "black"}))


def test_tools_in_local_bin_count_as_installed(make_ctx, tmp_path: Path) -> None:
    local_bin = tmp_path / ".local" / "bin"
    local_bin.mkdir(parents=True)
    for command in ("pipx", "black", "ruff", "mypy", "http"):
        (local_bin / command).write_text("", encoding="utf-8")

    assert PythonToolsInstaller().is_installed(make_ctx())


def test_install_gets_pipx_then_missing_tools(make_ctx, fake_runner) -> None:
    ctx = make_ctx(commands={"python3", "black", "http"})

    PythonToolsInstaller().install(ctx)

    assert ["sudo", "apt-get", "install", "-y", "pipx"] in fake_runner.calls
    installed = [call[2] for call in fake_runner.calls if call[:2] == ["pipx", "install"]]
    assert installed == [pkg for pkg, cmd in PIPX_TOOLS.items() if cmd not in {"black", "http"}]


def test_install_configures_poetry_when_present(make_ctx, fake_runner) -> None:
    PythonToolsInstaller().install(make_ctx(commands={"python3", "pipx", *PIPX_TOOLS.values()}))

    assert fake_runner.calls == [["poetry", "config", "virtualenvs.in-project", "true"]]


def test_install_requires_python3(make_ctx) -> None:
    with pytest.raises(RuntimeError, match="python3"):
        PythonToolsInstaller().install(make_ctx())


def test_configure_writes_pipx_path_block(make_ctx) -> None:
    ctx = make_ctx(shell="zsh")

    outcomes = PythonToolsInstaller().configure(ctx)

    assert [(o.step, o.action) for o in outcomes] == [("pipx-path", "inserted")]
    state = read_block(ctx.home / ".zshrc", "pipx-path")
    assert state is not None and state.content == PIPX_PATH
