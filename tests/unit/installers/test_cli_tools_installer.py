from __future__ import annotations

from pathlib import Path

from sigao.exec import ExecError, ExecResult
from sigao.installers.cli_tools import CARGO_TOOLS, PACKAGE_TOOLS, CliToolsInstaller

ALL_PACKAGE_COMMANDS = {tool.command for tool in PACKAGE_TOOLS}


def test_is_installed_counts_debian_alt_names(make_ctx) -> None:
    commands = (ALL_PACKAGE_COMMANDS - {"fd", "bat"}) | {"fdfind", "batcat"}
    assert CliToolsInstaller().is_installed(make_ctx(commands=commands))
    assert not CliToolsInstaller().is_installed(make_ctx(commands={"rg", "jq"}))


def test_install_fetches_missing_packages_fzf_and_cargo_tools(make_ctx, fake_runner, tmp_path: Path) -> None:
    cargo = tmp_path / ".cargo" / "bin" / "cargo"
    cargo.parent.mkdir(parents=True)
    cargo.write_text("", encoding="utf-8")
    ctx = make_ctx(commands={"rg", "jq", "zoxide"})

    CliToolsInstaller().install(ctx)

    apt_install = [call for call in fake_runner.calls if call[:4] == ["sudo", "apt-get", "install", "-y"]]
    assert len(apt_install) == 1
    assert "ripgrep" not in apt_install[0]
    assert {"fd-find", "bat", "httpie"} <= set(apt_install[0])
    assert ["git", "clone", "--depth", "1", "https://github.com/junegunn/fzf.git", str(tmp_path / ".fzf")] in fake_runner.calls
    assert ["bash", str(tmp_path / ".fzf" / "install"), "--bin"] in fake_runner.calls
    cargo_installs = [call[2] for call in fake_runner.calls if call[:2] == [str(cargo), "install"]]
    assert cargo_installs == [tool for tool in CARGO_TOOLS if tool != "zoxide"]


def test_install_links_alt_commands(make_ctx, fake_runner, tmp_path: Path) -> None:
    (tmp_path / ".fzf").mkdir()
    fake_runner.responses["which"] = (0, "/usr/bin/fdfind\n")
    ctx = make_ctx(commands=(ALL_PACKAGE_COMMANDS - {"fd"}) | {"fdfind", "cargo", *CARGO_TOOLS})

    CliToolsInstaller().install(ctx)

    assert ["sudo", "ln", "-sf", "/usr/bin/fdfind", "/usr/local/bin/fd"] in fake_runner.calls


def test_failed_cargo_build_is_not_fatal(make_ctx, fake_runner, tmp_path: Path) -> None:
    (tmp_path / ".fzf").mkdir()

    def runner(argv: list[str], **kwargs: object) -> ExecResult:
        result = fake_runner(argv, **kwargs)
        if argv[:2] == ["cargo", "install"]:
            raise ExecError(ExecResult(argv=tuple(argv), cwd=None, returncode=101, stdout="", stderr="linker error"))
        return result

    ctx = make_ctx(commands=ALL_PACKAGE_COMMANDS | {"cargo"}, runner=runner)

    CliToolsInstaller().install(ctx)

    assert [call[2] for call in fake_runner.calls if call[:2] == ["cargo", "install"]] == list(CARGO_TOOLS)
