from __future__ import annotations

from dataclasses import replace

from sigao.installers.shell import LOGO_FILE, ShellInstaller, pick_locale
from sigao.installers.shell_enhancements import ShellEnhancementsInstaller
from sigao.mods.codec import find_all_blocks
from sigao.mods.store import read_block


def _block_names(path) -> list[str]:
    return [block.name for block in find_all_blocks(path.read_text(encoding="utf-8"))]


def test_pick_locale_prefers_en_us() -> None:
    assert pick_locale(["C", "C.UTF-8", "en_US.UTF-8"]) == "en_US.UTF-8"
    assert pick_locale(["C", "c.utf8"]) == "C.UTF-8"
    assert pick_locale(["POSIX"]) == ""


def test_zsh_configuration_writes_structured_blocks(make_ctx) -> None:
    ctx = make_ctx(shell="zsh")

    outcomes = ShellInstaller().configure(ctx)

    assert all(outcome.ok for outcome in outcomes)
    assert _block_names(ctx.home / ".zshrc") == [
        "logo-display",
        "oh-my-zsh-config",
        "path-setup",
        "tool-integrations",
        "aliases-placeholder",
    ]
    path_setup = read_block(ctx.home / ".zshrc", "path-setup")
    assert path_setup is not None
    assert "export LANG=en_US.utf8" in path_setup.content
    assert (ctx.home / LOGO_FILE).exists()
    assert not (ctx.home / ".bashrc").exists()


def test_bash_configuration(make_ctx) -> None:
    ctx = make_ctx(shell="bash")
    (ctx.home / ".bashrc").write_text("# distro defaults\n", encoding="utf-8")

    ShellInstaller().configure(ctx)

    text = (ctx.home / ".bashrc").read_text(encoding="utf-8")
    assert text.startswith("#<SIGAO_MOD name='logo-display'")
    assert "# distro defaults\n" in text
    assert _block_names(ctx.home / ".bashrc") == ["logo-display", "bash-enhancements"]


def test_wsl_cleanup_goes_first(make_ctx, linux_platform) -> None:
    ctx = make_ctx(shell="bash", platform=replace(linux_platform, is_wsl=True))

    ShellInstaller().configure(ctx)

    assert _block_names(ctx.home / ".bashrc")[0] == "wsl-path-cleanup"


def test_repeated_configuration_is_stable(make_ctx) -> None:
    ctx = make_ctx(shell="zsh")
    installer = ShellInstaller()

    installer.configure(ctx)
    first = (ctx.home / ".zshrc").read_bytes()
    outcomes = installer.configure(ctx)

    assert (ctx.home / ".zshrc").read_bytes() == first
    assert {outcome.action for outcome in outcomes} == {"unchanged"}


def test_dry_run_writes_nothing(make_ctx) -> None:
    ctx = make_ctx(shell="zsh", dry_run=True)

    outcomes = ShellInstaller().configure(ctx)

    assert {outcome.action for outcome in outcomes} == {"inserted"}
    assert not (ctx.home / ".zshrc").exists()
    assert not (ctx.home / LOGO_FILE).exists()


def test_zsh_install_clones_plugins(make_ctx, fake_runner) -> None:
    ctx = make_ctx(shell="zsh", commands={"zsh"})

    ShellInstaller().install(ctx)

    commands = [call[0] for call in fake_runner.calls]
    assert commands == ["sh", "git", "git"]
    assert not ShellInstaller().is_installed(ctx)


def test_shell_enhancements_hooks_follow_available_tools(make_ctx) -> None:
    ctx = make_ctx(shell="bash", commands={"zoxide"})
    (ctx.home / ".fzf").mkdir()

    ShellEnhancementsInstaller().configure(ctx)

    bashrc = ctx.home / ".bashrc"
    names = _block_names(bashrc)
    assert names[0] == "logo-display"
    assert set(names) == {"logo-display", "starship-init", "zoxide-init", "fzf-init", "shell-enhancements-aliases"}
    fzf = read_block(bashrc, "fzf-init")
    assert fzf is not None and "~/.fzf.bash" in fzf.content
    assert (ctx.home / ".config" / "starship.toml").exists()


def test_shell_enhancements_skip_missing_tools(make_ctx) -> None:
    ctx = make_ctx(shell="zsh")

    ShellEnhancementsInstaller().configure(ctx)

    names = _block_names(ctx.home / ".zshrc")
    assert "zoxide-init" not in names
    assert "fzf-init" not in names
    starship = read_block(ctx.home / ".zshrc", "starship-init")
    assert starship is not None and "starship init zsh" in starship.content
